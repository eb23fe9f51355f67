"""Handler for signature help requests."""

from ..driver.injection import DirectJson
from ..lsp.types import SignatureHelp, SignatureHelpContext
from .base import KindSpec, RequestKind, register

SIGNATURE_HELP = register(KindSpec(
    RequestKind.SIGNATURE_HELP,
    "Signature Help",
    SignatureHelp,
    needs_cursor=True,
))


def signature_help_injections(context: SignatureHelpContext | None) -> list:
    if context is None:
        return []
    return [DirectJson.of("context", context.to_lsp())]
