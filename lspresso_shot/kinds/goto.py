"""Go-to kinds: declaration, definition, implementation, type definition."""

from ..lsp.types import GotoResponse
from ..normalize import normalize_goto
from .base import KindSpec, RequestKind, register, untagged_empty_equal


def _goto(kind: RequestKind, label: str) -> KindSpec:
    return register(KindSpec(
        kind,
        label,
        GotoResponse,
        needs_cursor=True,
        normalize=normalize_goto,
        equal=untagged_empty_equal,
    ))


DECLARATION = _goto(RequestKind.DECLARATION, "Declaration")
DEFINITION = _goto(RequestKind.DEFINITION, "Definition")
IMPLEMENTATION = _goto(RequestKind.IMPLEMENTATION, "Implementation")
TYPE_DEFINITION = _goto(RequestKind.TYPE_DEFINITION, "Type Definition")
