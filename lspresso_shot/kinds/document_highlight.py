"""Handler for document highlight requests."""

from ..lsp.types import DocumentHighlight
from .base import KindSpec, RequestKind, register

# The position is passed explicitly or taken from the test case's cursor
DOCUMENT_HIGHLIGHT = register(KindSpec(
    RequestKind.DOCUMENT_HIGHLIGHT,
    "Document Highlight",
    list[DocumentHighlight],
))
