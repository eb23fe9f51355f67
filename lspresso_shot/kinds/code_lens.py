"""Code lens kinds: codeLens and codeLens/resolve."""

from ..driver.injection import DestructureJson
from ..lsp.types import CodeLens
from .base import KindSpec, RequestKind, register

CODE_LENS = register(KindSpec(RequestKind.CODE_LENS, "Code Lens", list[CodeLens]))

CODE_LENS_RESOLVE = register(KindSpec(
    RequestKind.CODE_LENS_RESOLVE,
    "Code Lens Resolve",
    CodeLens,
    text_document=False,
))


def code_lens_injections(code_lens: CodeLens) -> list:
    data = code_lens.to_lsp()
    return [DestructureJson.of("code_lens", list(data), data)]
