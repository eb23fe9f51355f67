from ..lsp.types import Moniker
from .base import KindSpec, RequestKind, register

MONIKER = register(KindSpec(
    RequestKind.MONIKER,
    "Moniker",
    list[Moniker],
    needs_cursor=True,
))
