"""Handler for formatting requests."""

from ..driver.injection import DirectJson
from ..driver.script import STATE_OR_RESPONSE_ACTION
from ..lsp.types import FormattingOptions, TextEdit
from .base import RequestKind, register
from .state import StateOrResponseKindSpec

FORMATTING = register(StateOrResponseKindSpec(
    RequestKind.FORMATTING,
    "Formatting",
    list[TextEdit],
    fragment=STATE_OR_RESPONSE_ACTION,
    invoke_fn="function(p) vim.lsp.buf.format({ async = false, formatting_options = p.options }) end",
))


def formatting_injections(options: FormattingOptions) -> list:
    return [DirectJson.of("options", options.to_lsp())]
