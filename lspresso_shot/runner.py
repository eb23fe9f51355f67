"""Test entry points: one `test_<kind>` function per request kind.

Each entry point returns None on success and raises an `LspressoError`
subclass on failure; `str(error)` is the human-readable report, including the
colorized diff for mismatches.
"""

import json
import logging
from typing import Any, Callable, Iterable

from .case import TestCase
from .driver.injection import ParameterInjection, PositionParam
from .driver.script import build_init_script
from .errors import (
    DecodeError,
    EditorError,
    ExecutionIOError,
    ExpectedNone,
    ExpectedSome,
    InvalidCursorPosition,
    NoResults,
    TimeoutExceeded,
    Utf8Error,
)
from .kinds import RequestKind, get_kind_spec
from .kinds.base import KindSpec
from .kinds.call_hierarchy import call_item_injections
from .kinds.code_action import code_action_injections, code_action_resolve_injections
from .kinds.code_lens import code_lens_injections
from .kinds.color import color_presentation_injections
from .kinds.completion import CompletionExpectation, completion_resolve_injections
from .kinds.diagnostics import document_diagnostic_injections, workspace_diagnostic_injections
from .kinds.document_link import document_link_injections
from .kinds.execute_command import execute_command_injections
from .kinds.formatting import formatting_injections
from .kinds.inlay_hint import whole_document_range
from .kinds.references import reference_injections
from .kinds.rename import rename_injections
from .kinds.selection_range import selection_range_injections
from .kinds.semantic_tokens import range_injections
from .kinds.signature_help import signature_help_injections
from .kinds.state import StateOrResponse
from .kinds.type_hierarchy import type_item_injections
from .kinds.workspace_symbol import workspace_symbol_injections
from .layout import Layout
from .lsp.types import (
    CallHierarchyIncomingCall,
    CallHierarchyItem,
    CallHierarchyOutgoingCall,
    CodeAction,
    CodeActionContext,
    CodeActionResponse,
    CodeLens,
    Color,
    ColorInformation,
    ColorPresentation,
    CompletionItem,
    Diagnostic,
    DocumentDiagnosticReport,
    DocumentHighlight,
    DocumentLink,
    FoldingRange,
    FormattingOptions,
    Hover,
    LinkedEditingRanges,
    Location,
    Moniker,
    Position,
    PreviousResultId,
    Range,
    SelectionRange,
    SemanticTokens,
    SignatureHelp,
    SignatureHelpContext,
    TypeHierarchyItem,
    WorkspaceDiagnosticReport,
    WorkspaceEdit,
)
from .supervisor import run_editor
from .utils.config import load_config
from .workspace import cleanup, materialize

logger = logging.getLogger(__name__)


def run_case(
    case: TestCase,
    kind: RequestKind,
    expected: Any,
    injections: Iterable[ParameterInjection] = (),
) -> None:
    """Validate, write, run and check a single request.

    `expected` of None asserts that the server's reply is absent or empty.
    """
    spec = get_kind_spec(kind)
    spec.check_preconditions(case)
    case.validate()

    layout = case.layout
    try:
        script = build_init_script(case, spec, [*spec.base_injections(case), *injections], layout)
        source_path = materialize(case, script, layout)
        run_editor(case, source_path, layout, poll_interval=_poll_interval())
        resolve_outcome(case, spec, layout, expected)
    finally:
        if case.cleanup:
            cleanup(case, layout)


def _poll_interval() -> float:
    return float(load_config()["editor"]["poll_interval"])


def resolve_outcome(case: TestCase, spec: KindSpec, layout: Layout, expected: Any) -> None:
    empty = layout.empty_file.exists()
    results = layout.results_file.exists()

    if empty and results:
        raise AssertionError(f"Test {case.test_id}: both a results file and an empty marker were written")

    if empty:
        if expected is None:
            return
        raise ExpectedSome(case.test_id, spec.label)

    if not results:
        if layout.timeout_file.exists():
            raise TimeoutExceeded(case.test_id, case.timeout)
        error = layout.read_error()
        if error.strip():
            raise EditorError(case.test_id, error)
        raise NoResults(case.test_id)

    raw = read_results(case, layout)
    if expected is None:
        if is_empty_reply(raw):
            logger.debug(f"Test {case.test_id}: empty reply written as results: {raw}")
            return
        try:
            actual = spec.normalize(spec.decode(raw), layout)
        except ValueError:
            actual = raw
        raise ExpectedNone(case.test_id, spec.label, actual)

    try:
        actual = spec.decode(raw, expected)
    except ValueError as e:
        raise DecodeError(case.test_id, f"Results file -- {e}") from e
    actual = spec.normalize(actual, layout)
    spec.compare(case.test_id, expected, actual)


def is_empty_reply(raw: str) -> bool:
    """A `null`, `[]` or `{}` reply. The editor encodes empty arrays and objects alike."""
    try:
        value = json.loads(raw)
    except ValueError:
        return False
    return value is None or (isinstance(value, (list, dict)) and not value)


def read_results(case: TestCase, layout: Layout) -> str:
    try:
        data = layout.results_file.read_bytes()
    except OSError as e:
        raise ExecutionIOError(case.test_id, str(e)) from e
    try:
        raw = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise Utf8Error(case.test_id, str(e)) from e
    logger.debug(f"Raw results for test {case.test_id}: {raw}")
    return raw


# =============================================================================
# Kind-specific parameters
# =============================================================================


def default_formatting_options() -> FormattingOptions:
    formatting = load_config()["formatting"]
    return FormattingOptions(tab_size=formatting["tab_size"], insert_spaces=formatting["insert_spaces"])


def _formatting(case: TestCase, expected: Any, options: FormattingOptions | None = None) -> list:
    spec = get_kind_spec(RequestKind.FORMATTING)
    return [*formatting_injections(options or default_formatting_options()), *spec.mode_injections(expected)]


def _execute_command(
    case: TestCase,
    expected: Any,
    command: str,
    arguments: list | None = None,
    commands: list[str] | None = None,
) -> list:
    spec = get_kind_spec(RequestKind.EXECUTE_COMMAND)
    return [*execute_command_injections(command, arguments, commands), *spec.mode_injections(expected)]


def _call_item(case: TestCase, expected: Any, item: CallHierarchyItem) -> list:
    return call_item_injections(item)


def _references(case: TestCase, expected: Any, include_declaration: bool) -> list:
    return reference_injections(include_declaration)


def _rename(case: TestCase, expected: Any, new_name: str) -> list:
    return rename_injections(new_name)


def _code_lens_resolve(case: TestCase, expected: Any, code_lens: CodeLens) -> list:
    return code_lens_injections(code_lens)


def _document_link_resolve(case: TestCase, expected: Any, link: DocumentLink) -> list:
    return document_link_injections(link)


def _document_highlight(case: TestCase, expected: Any, position: Position | None = None) -> list:
    position = position or case.cursor_pos
    if position is None:
        raise InvalidCursorPosition(RequestKind.DOCUMENT_HIGHLIGHT.slug)
    return [PositionParam(position)]


def _selection_range(case: TestCase, expected: Any, positions: list[Position] | None = None) -> list:
    if positions is None:
        positions = [case.cursor_pos] if case.cursor_pos is not None else []
    return selection_range_injections(positions)


def _semantic_tokens_range(case: TestCase, expected: Any, range_: Range) -> list:
    return range_injections(range_)


def _signature_help(case: TestCase, expected: Any, context: SignatureHelpContext | None = None) -> list:
    return signature_help_injections(context)


def _inlay_hint(case: TestCase, expected: Any, range_: Range | None = None) -> list:
    return range_injections(range_ or whole_document_range(case.source_file.contents))


def _workspace_symbol(case: TestCase, expected: Any, query: str) -> list:
    return workspace_symbol_injections(query)


def _code_action(
    case: TestCase,
    expected: Any,
    range_: Range,
    context: CodeActionContext | None = None,
) -> list:
    return code_action_injections(range_, context)


def _code_action_resolve(case: TestCase, expected: Any, code_action: CodeAction) -> list:
    return code_action_resolve_injections(code_action)


def _completion_resolve(case: TestCase, expected: Any, completion_item: CompletionItem) -> list:
    return completion_resolve_injections(completion_item)


def _document_diagnostic(
    case: TestCase,
    expected: Any,
    identifier: str | None = None,
    previous_result_id: str | None = None,
) -> list:
    return document_diagnostic_injections(identifier, previous_result_id)


def _workspace_diagnostic(
    case: TestCase,
    expected: Any,
    identifier: str | None = None,
    previous_result_ids: list[PreviousResultId] | None = None,
) -> list:
    return workspace_diagnostic_injections(identifier, previous_result_ids)


def _type_item(case: TestCase, expected: Any, item: TypeHierarchyItem) -> list:
    return type_item_injections(item)


def _color_presentation(case: TestCase, expected: Any, color: Color, range_: Range) -> list:
    return color_presentation_injections(color, range_)


_INJECTION_BUILDERS: dict[RequestKind, Callable[..., list]] = {
    RequestKind.FORMATTING: _formatting,
    RequestKind.EXECUTE_COMMAND: _execute_command,
    RequestKind.INCOMING_CALLS: _call_item,
    RequestKind.OUTGOING_CALLS: _call_item,
    RequestKind.REFERENCES: _references,
    RequestKind.RENAME: _rename,
    RequestKind.CODE_LENS_RESOLVE: _code_lens_resolve,
    RequestKind.DOCUMENT_LINK_RESOLVE: _document_link_resolve,
    RequestKind.DOCUMENT_HIGHLIGHT: _document_highlight,
    RequestKind.SELECTION_RANGE: _selection_range,
    RequestKind.SEMANTIC_TOKENS_RANGE: _semantic_tokens_range,
    RequestKind.SIGNATURE_HELP: _signature_help,
    RequestKind.INLAY_HINT: _inlay_hint,
    RequestKind.WORKSPACE_SYMBOL: _workspace_symbol,
    RequestKind.CODE_ACTION: _code_action,
    RequestKind.CODE_ACTION_RESOLVE: _code_action_resolve,
    RequestKind.COMPLETION_RESOLVE: _completion_resolve,
    RequestKind.DOCUMENT_DIAGNOSTIC: _document_diagnostic,
    RequestKind.WORKSPACE_DIAGNOSTIC: _workspace_diagnostic,
    RequestKind.TYPE_HIERARCHY_SUPERTYPES: _type_item,
    RequestKind.TYPE_HIERARCHY_SUBTYPES: _type_item,
    RequestKind.COLOR_PRESENTATION: _color_presentation,
}


def request_injections(kind: RequestKind, case: TestCase, expected: Any, **inputs) -> list[ParameterInjection]:
    """Injections for the kind-specific inputs of a request.

    The text document and cursor injections every kind shares are added by
    `run_case` and `preview_script`.
    """
    spec = get_kind_spec(kind)
    builder = _INJECTION_BUILDERS.get(spec.kind)
    if builder is None:
        if inputs:
            raise TypeError(f"{spec.kind.slug} takes no inputs, got {sorted(inputs)}")
        return []
    return builder(case, expected, **inputs)


def preview_script(kind: RequestKind, case: TestCase, expected: Any = None, **inputs) -> str:
    """The driver script a test would run, without running it."""
    spec = get_kind_spec(kind)
    injections = [*spec.base_injections(case), *request_injections(kind, case, expected, **inputs)]
    return build_init_script(case, spec, injections)


def _run(kind: RequestKind, case: TestCase, expected: Any, **inputs) -> None:
    run_case(case, kind, expected, request_injections(kind, case, expected, **inputs))


# =============================================================================
# Entry points
# =============================================================================

ENTRY_POINTS: dict[RequestKind, Callable[..., None]] = {}


def entry_point(kind: RequestKind):
    def decorator(fn):
        # Keep pytest from collecting these when imported into test modules
        fn.__test__ = False
        ENTRY_POINTS[kind] = fn
        return fn

    return decorator


@entry_point(RequestKind.COMPLETION)
def test_completion(case: TestCase, expected: CompletionExpectation | None) -> None:
    _run(RequestKind.COMPLETION, case, expected)


@entry_point(RequestKind.DECLARATION)
def test_declaration(case: TestCase, expected: Any) -> None:
    _run(RequestKind.DECLARATION, case, expected)


@entry_point(RequestKind.DEFINITION)
def test_definition(case: TestCase, expected: Any) -> None:
    _run(RequestKind.DEFINITION, case, expected)


@entry_point(RequestKind.IMPLEMENTATION)
def test_implementation(case: TestCase, expected: Any) -> None:
    _run(RequestKind.IMPLEMENTATION, case, expected)


@entry_point(RequestKind.TYPE_DEFINITION)
def test_type_definition(case: TestCase, expected: Any) -> None:
    _run(RequestKind.TYPE_DEFINITION, case, expected)


@entry_point(RequestKind.DIAGNOSTICS)
def test_diagnostics(case: TestCase, expected: list[Diagnostic] | None) -> None:
    _run(RequestKind.DIAGNOSTICS, case, expected)


@entry_point(RequestKind.DOCUMENT_SYMBOL)
def test_document_symbol(case: TestCase, expected: Any) -> None:
    _run(RequestKind.DOCUMENT_SYMBOL, case, expected)


@entry_point(RequestKind.FORMATTING)
def test_formatting(
    case: TestCase,
    expected: StateOrResponse | None,
    options: FormattingOptions | None = None,
) -> None:
    """Check formatting edits (`Response`) or the formatted text (`EndState`).

    `options` defaults to the `[formatting]` section of the config file.
    """
    _run(RequestKind.FORMATTING, case, expected, options=options)


@entry_point(RequestKind.HOVER)
def test_hover(case: TestCase, expected: Hover | None) -> None:
    _run(RequestKind.HOVER, case, expected)


@entry_point(RequestKind.INCOMING_CALLS)
def test_incoming_calls(
    case: TestCase,
    item: CallHierarchyItem,
    expected: list[CallHierarchyIncomingCall] | None,
) -> None:
    _run(RequestKind.INCOMING_CALLS, case, expected, item=item)


@entry_point(RequestKind.OUTGOING_CALLS)
def test_outgoing_calls(
    case: TestCase,
    item: CallHierarchyItem,
    expected: list[CallHierarchyOutgoingCall] | None,
) -> None:
    _run(RequestKind.OUTGOING_CALLS, case, expected, item=item)


@entry_point(RequestKind.PREPARE_CALL_HIERARCHY)
def test_prepare_call_hierarchy(case: TestCase, expected: list[CallHierarchyItem] | None) -> None:
    _run(RequestKind.PREPARE_CALL_HIERARCHY, case, expected)


@entry_point(RequestKind.REFERENCES)
def test_references(case: TestCase, include_declaration: bool, expected: list[Location] | None) -> None:
    _run(RequestKind.REFERENCES, case, expected, include_declaration=include_declaration)


@entry_point(RequestKind.RENAME)
def test_rename(case: TestCase, new_name: str, expected: WorkspaceEdit | None) -> None:
    _run(RequestKind.RENAME, case, expected, new_name=new_name)


@entry_point(RequestKind.CODE_LENS)
def test_code_lens(case: TestCase, expected: list[CodeLens] | None) -> None:
    _run(RequestKind.CODE_LENS, case, expected)


@entry_point(RequestKind.CODE_LENS_RESOLVE)
def test_code_lens_resolve(case: TestCase, code_lens: CodeLens, expected: CodeLens | None) -> None:
    _run(RequestKind.CODE_LENS_RESOLVE, case, expected, code_lens=code_lens)


@entry_point(RequestKind.DOCUMENT_HIGHLIGHT)
def test_document_highlight(
    case: TestCase,
    expected: list[DocumentHighlight] | None,
    position: Position | None = None,
) -> None:
    """The position defaults to the test case's cursor."""
    _run(RequestKind.DOCUMENT_HIGHLIGHT, case, expected, position=position)


@entry_point(RequestKind.DOCUMENT_LINK)
def test_document_link(case: TestCase, expected: list[DocumentLink] | None) -> None:
    _run(RequestKind.DOCUMENT_LINK, case, expected)


@entry_point(RequestKind.DOCUMENT_LINK_RESOLVE)
def test_document_link_resolve(case: TestCase, link: DocumentLink, expected: DocumentLink | None) -> None:
    _run(RequestKind.DOCUMENT_LINK_RESOLVE, case, expected, link=link)


@entry_point(RequestKind.FOLDING_RANGE)
def test_folding_range(case: TestCase, expected: list[FoldingRange] | None) -> None:
    _run(RequestKind.FOLDING_RANGE, case, expected)


@entry_point(RequestKind.SELECTION_RANGE)
def test_selection_range(
    case: TestCase,
    expected: list[SelectionRange] | None,
    positions: list[Position] | None = None,
) -> None:
    """Positions default to the test case's cursor."""
    _run(RequestKind.SELECTION_RANGE, case, expected, positions=positions)


@entry_point(RequestKind.SEMANTIC_TOKENS_FULL)
def test_semantic_tokens_full(case: TestCase, expected: SemanticTokens | None) -> None:
    _run(RequestKind.SEMANTIC_TOKENS_FULL, case, expected)


@entry_point(RequestKind.SEMANTIC_TOKENS_FULL_DELTA)
def test_semantic_tokens_full_delta(case: TestCase, expected: Any) -> None:
    _run(RequestKind.SEMANTIC_TOKENS_FULL_DELTA, case, expected)


@entry_point(RequestKind.SEMANTIC_TOKENS_RANGE)
def test_semantic_tokens_range(case: TestCase, range_: Range, expected: SemanticTokens | None) -> None:
    _run(RequestKind.SEMANTIC_TOKENS_RANGE, case, expected, range_=range_)


@entry_point(RequestKind.EXECUTE_COMMAND)
def test_execute_command(
    case: TestCase,
    command: str,
    expected: StateOrResponse | None,
    arguments: list | None = None,
    commands: list[str] | None = None,
) -> None:
    """`commands` are advertised to the server as experimental client commands."""
    _run(RequestKind.EXECUTE_COMMAND, case, expected, command=command, arguments=arguments, commands=commands)


@entry_point(RequestKind.SIGNATURE_HELP)
def test_signature_help(
    case: TestCase,
    expected: SignatureHelp | None,
    context: SignatureHelpContext | None = None,
) -> None:
    _run(RequestKind.SIGNATURE_HELP, case, expected, context=context)


@entry_point(RequestKind.INLAY_HINT)
def test_inlay_hint(case: TestCase, expected: Any, range_: Range | None = None) -> None:
    """The range defaults to the whole source file."""
    _run(RequestKind.INLAY_HINT, case, expected, range_=range_)


@entry_point(RequestKind.PREPARE_TYPE_HIERARCHY)
def test_prepare_type_hierarchy(case: TestCase, expected: Any) -> None:
    _run(RequestKind.PREPARE_TYPE_HIERARCHY, case, expected)


@entry_point(RequestKind.WORKSPACE_SYMBOL)
def test_workspace_symbol(case: TestCase, query: str, expected: Any) -> None:
    _run(RequestKind.WORKSPACE_SYMBOL, case, expected, query=query)


@entry_point(RequestKind.CODE_ACTION)
def test_code_action(
    case: TestCase,
    range_: Range,
    expected: CodeActionResponse | None,
    context: CodeActionContext | None = None,
) -> None:
    """`context` defaults to one without diagnostics."""
    _run(RequestKind.CODE_ACTION, case, expected, range_=range_, context=context)


@entry_point(RequestKind.CODE_ACTION_RESOLVE)
def test_code_action_resolve(case: TestCase, code_action: CodeAction, expected: CodeAction | None) -> None:
    _run(RequestKind.CODE_ACTION_RESOLVE, case, expected, code_action=code_action)


@entry_point(RequestKind.COMPLETION_RESOLVE)
def test_completion_resolve(
    case: TestCase,
    completion_item: CompletionItem,
    expected: CompletionItem | None,
) -> None:
    _run(RequestKind.COMPLETION_RESOLVE, case, expected, completion_item=completion_item)


@entry_point(RequestKind.DOCUMENT_DIAGNOSTIC)
def test_document_diagnostic(
    case: TestCase,
    expected: DocumentDiagnosticReport | None,
    identifier: str | None = None,
    previous_result_id: str | None = None,
) -> None:
    _run(
        RequestKind.DOCUMENT_DIAGNOSTIC,
        case,
        expected,
        identifier=identifier,
        previous_result_id=previous_result_id,
    )


@entry_point(RequestKind.WORKSPACE_DIAGNOSTIC)
def test_workspace_diagnostic(
    case: TestCase,
    expected: WorkspaceDiagnosticReport | None,
    identifier: str | None = None,
    previous_result_ids: list[PreviousResultId] | None = None,
) -> None:
    _run(
        RequestKind.WORKSPACE_DIAGNOSTIC,
        case,
        expected,
        identifier=identifier,
        previous_result_ids=previous_result_ids,
    )


@entry_point(RequestKind.TYPE_HIERARCHY_SUPERTYPES)
def test_type_hierarchy_supertypes(
    case: TestCase,
    item: TypeHierarchyItem,
    expected: list[TypeHierarchyItem] | None,
) -> None:
    _run(RequestKind.TYPE_HIERARCHY_SUPERTYPES, case, expected, item=item)


@entry_point(RequestKind.TYPE_HIERARCHY_SUBTYPES)
def test_type_hierarchy_subtypes(
    case: TestCase,
    item: TypeHierarchyItem,
    expected: list[TypeHierarchyItem] | None,
) -> None:
    _run(RequestKind.TYPE_HIERARCHY_SUBTYPES, case, expected, item=item)


@entry_point(RequestKind.DOCUMENT_COLOR)
def test_document_color(case: TestCase, expected: list[ColorInformation] | None) -> None:
    _run(RequestKind.DOCUMENT_COLOR, case, expected)


@entry_point(RequestKind.COLOR_PRESENTATION)
def test_color_presentation(
    case: TestCase,
    color: Color,
    range_: Range,
    expected: list[ColorPresentation] | None,
) -> None:
    _run(RequestKind.COLOR_PRESENTATION, case, expected, color=color, range_=range_)


@entry_point(RequestKind.LINKED_EDITING_RANGE)
def test_linked_editing_range(case: TestCase, expected: LinkedEditingRanges | None) -> None:
    _run(RequestKind.LINKED_EDITING_RANGE, case, expected)


@entry_point(RequestKind.MONIKER)
def test_moniker(case: TestCase, expected: list[Moniker] | None) -> None:
    _run(RequestKind.MONIKER, case, expected)
