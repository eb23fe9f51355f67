"""Handler for inlay hint requests."""

from ..lsp.types import InlayHint, Range
from ..normalize import each, normalize_inlay_hint
from .base import KindSpec, RequestKind, register

INLAY_HINT = register(KindSpec(
    RequestKind.INLAY_HINT,
    "Inlay Hint",
    list[InlayHint],
    normalize=each(normalize_inlay_hint),
))


def whole_document_range(contents: str) -> Range:
    """Range from the start of `contents` to the end of its last line."""
    lines = contents.split("\n")
    return Range.of(0, 0, len(lines) - 1, len(lines[-1]))
