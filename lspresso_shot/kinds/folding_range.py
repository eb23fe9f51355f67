from ..lsp.types import FoldingRange
from .base import KindSpec, RequestKind, register

FOLDING_RANGE = register(KindSpec(
    RequestKind.FOLDING_RANGE,
    "Folding Range",
    list[FoldingRange],
))
