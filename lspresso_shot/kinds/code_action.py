"""Code action kinds: codeAction and codeAction/resolve."""

from ..driver.injection import DestructureJson, DirectJson, RangeParam
from ..lsp.types import CodeAction, CodeActionContext, CodeActionResponse, Range
from ..normalize import each, normalize_code_action
from .base import KindSpec, RequestKind, register

CODE_ACTION = register(KindSpec(
    RequestKind.CODE_ACTION,
    "Code Action",
    CodeActionResponse,
    normalize=each(normalize_code_action),
))

CODE_ACTION_RESOLVE = register(KindSpec(
    RequestKind.CODE_ACTION_RESOLVE,
    "Code Action Resolve",
    CodeAction,
    text_document=False,
    normalize=normalize_code_action,
))


def code_action_injections(range_: Range, context: CodeActionContext | None) -> list:
    context = context or CodeActionContext()
    return [RangeParam(range_), DirectJson.of("context", context.to_lsp())]


def code_action_resolve_injections(action: CodeAction) -> list:
    data = action.to_lsp()
    return [DestructureJson.of("code_action", list(data), data)]
