from ..lsp.types import LinkedEditingRanges
from .base import KindSpec, RequestKind, register

LINKED_EDITING_RANGE = register(KindSpec(
    RequestKind.LINKED_EDITING_RANGE,
    "Linked Editing Range",
    LinkedEditingRanges,
    needs_cursor=True,
))
