"""Deterministic on-disk layout of a test case's workspace."""

import os
import tempfile
from pathlib import Path

from .errors import InvalidFilePath

HARNESS_DIR = "lspresso-shot"


class Layout:
    """Paths under `<tmp>/lspresso-shot/<test_id>/`.

    Nothing is created on construction; see `create_dirs`.
    """

    def __init__(self, test_id: str, base: str | Path | None = None):
        self.test_id = test_id
        self.base = Path(base) if base is not None else Path(tempfile.gettempdir())

    @property
    def root(self) -> Path:
        return self.base / HARNESS_DIR / self.test_id

    @property
    def src_dir(self) -> Path:
        return self.root / "src"

    @property
    def init_script(self) -> Path:
        return self.root / "init.lua"

    @property
    def results_file(self) -> Path:
        return self.root / "results.json"

    @property
    def empty_file(self) -> Path:
        return self.root / "empty"

    @property
    def error_file(self) -> Path:
        return self.root / "error.txt"

    @property
    def log_file(self) -> Path:
        return self.root / "log.txt"

    @property
    def timeout_file(self) -> Path:
        return self.root / "timeout"

    @property
    def markers(self) -> tuple[Path, ...]:
        """Files written by the driver during a run."""
        return (self.results_file, self.empty_file, self.error_file, self.log_file, self.timeout_file)

    def source_path(self, relative: str | Path) -> Path:
        """Absolute path of a workspace-relative source file.

        Raises InvalidFilePath for empty or absolute paths and for paths that
        escape `src/` once normalized.
        """
        text = str(relative)
        rel = Path(text)
        if not text or rel.is_absolute():
            raise InvalidFilePath(text)
        src = Path(os.path.normpath(self.src_dir))
        candidate = Path(os.path.normpath(src / rel))
        if src not in candidate.parents:
            raise InvalidFilePath(text)
        return candidate

    def create_dirs(self) -> None:
        self.src_dir.mkdir(parents=True, exist_ok=True)

    def read_error(self) -> str:
        """Contents of the driver's error file, or an empty string."""
        if not self.error_file.exists():
            return ""
        return self.error_file.read_text(errors="replace")
