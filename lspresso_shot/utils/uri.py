from pathlib import Path
from urllib.parse import quote


def path_to_uri(path: str | Path) -> str:
    return "file://" + quote(str(Path(path)), safe="/:")


def uri_prefixes(directory: Path) -> list[str]:
    """All `file://` spellings of `directory` a client may report, each ending in `/`.

    Covers the percent-encoded and raw forms of both the given path and its
    resolved form (e.g. `/tmp` vs `/private/tmp` on macOS).
    """
    prefixes = []
    for candidate in (directory, directory.resolve()):
        for prefix in (path_to_uri(candidate), "file://" + str(candidate)):
            prefix = prefix.rstrip("/") + "/"
            if prefix not in prefixes:
                prefixes.append(prefix)
    return prefixes
