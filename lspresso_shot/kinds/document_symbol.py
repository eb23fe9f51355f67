"""Handler for document symbol requests."""

from ..lsp.types import DocumentSymbolResponse
from ..normalize import normalize_document_symbols
from .base import KindSpec, RequestKind, register, untagged_empty_equal

DOCUMENT_SYMBOL = register(KindSpec(
    RequestKind.DOCUMENT_SYMBOL,
    "Document Symbol",
    DocumentSymbolResponse,
    normalize=normalize_document_symbols,
    equal=untagged_empty_equal,
))
