"""Black-box tests for language servers, run through a headless Neovim."""

from .case import Immediate, Progress, StartupMode, TestCase, TestFile
from .errors import (
    CompletionMismatch,
    DecodeError,
    EditorError,
    ExecutionIOError,
    ExpectedNone,
    ExpectedSome,
    InvalidCursorPosition,
    InvalidEditor,
    InvalidFileExtension,
    InvalidFilePath,
    InvalidServerCommand,
    LspressoError,
    MissingFileExtension,
    NoResults,
    ResponseMismatch,
    SetupIOError,
    TestExecutionError,
    TestSetupError,
    TimeoutExceeded,
    Utf8Error,
)
from .kinds import Contains, EndState, Exact, RequestKind, Response
from .lsp import types
from .runner import (
    ENTRY_POINTS,
    preview_script,
    run_case,
    test_code_action,
    test_code_action_resolve,
    test_code_lens,
    test_code_lens_resolve,
    test_color_presentation,
    test_completion,
    test_completion_resolve,
    test_declaration,
    test_definition,
    test_diagnostics,
    test_document_color,
    test_document_diagnostic,
    test_document_highlight,
    test_document_link,
    test_document_link_resolve,
    test_document_symbol,
    test_execute_command,
    test_folding_range,
    test_formatting,
    test_hover,
    test_implementation,
    test_incoming_calls,
    test_inlay_hint,
    test_linked_editing_range,
    test_moniker,
    test_outgoing_calls,
    test_prepare_call_hierarchy,
    test_prepare_type_hierarchy,
    test_references,
    test_rename,
    test_selection_range,
    test_semantic_tokens_full,
    test_semantic_tokens_full_delta,
    test_semantic_tokens_range,
    test_signature_help,
    test_type_definition,
    test_type_hierarchy_subtypes,
    test_type_hierarchy_supertypes,
    test_workspace_diagnostic,
    test_workspace_symbol,
)

__version__ = "0.1.0"
