"""Semantic token kinds: full, full/delta and range."""

from ..driver.injection import RangeParam
from ..driver.script import SEMANTIC_TOKENS_DELTA_ACTION
from ..lsp.types import Range, SemanticTokens, SemanticTokensFullDeltaResponse
from .base import KindSpec, RequestKind, register

SEMANTIC_TOKENS_FULL = register(KindSpec(
    RequestKind.SEMANTIC_TOKENS_FULL,
    "Semantic Tokens Full",
    SemanticTokens,
))

SEMANTIC_TOKENS_FULL_DELTA = register(KindSpec(
    RequestKind.SEMANTIC_TOKENS_FULL_DELTA,
    "Semantic Tokens Full Delta",
    SemanticTokensFullDeltaResponse,
    fragment=SEMANTIC_TOKENS_DELTA_ACTION,
))

SEMANTIC_TOKENS_RANGE = register(KindSpec(
    RequestKind.SEMANTIC_TOKENS_RANGE,
    "Semantic Tokens Range",
    SemanticTokens,
))


def range_injections(range_: Range) -> list:
    return [RangeParam(range_)]
