"""Request kind registry.

Importing this package registers every supported kind.
"""

from .base import KINDS, KindSpec, RequestKind, decode_response, get_kind_spec, untagged_empty_equal
from . import (
    call_hierarchy,
    code_action,
    code_lens,
    color,
    completion,
    diagnostics,
    document_highlight,
    document_link,
    document_symbol,
    execute_command,
    folding_range,
    formatting,
    goto,
    hover,
    inlay_hint,
    linked_editing_range,
    moniker,
    references,
    rename,
    selection_range,
    semantic_tokens,
    signature_help,
    type_hierarchy,
    workspace_symbol,
)
from .completion import CompletionExpectation, Contains, Exact
from .state import EndState, Response, StateOrResponse

__all__ = [
    "KINDS",
    "KindSpec",
    "RequestKind",
    "decode_response",
    "get_kind_spec",
    "untagged_empty_equal",
    "CompletionExpectation",
    "Contains",
    "Exact",
    "EndState",
    "Response",
    "StateOrResponse",
]
