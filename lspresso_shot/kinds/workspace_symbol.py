"""Handler for workspace/symbol requests."""

from ..driver.injection import DirectJson
from ..lsp.types import WorkspaceSymbolResponse
from ..normalize import normalize_workspace_symbols
from .base import KindSpec, RequestKind, register, untagged_empty_equal

WORKSPACE_SYMBOL = register(KindSpec(
    RequestKind.WORKSPACE_SYMBOL,
    "Workspace Symbol",
    WorkspaceSymbolResponse,
    text_document=False,
    normalize=normalize_workspace_symbols,
    equal=untagged_empty_equal,
))


def workspace_symbol_injections(query: str) -> list:
    return [DirectJson.of("query", query)]
