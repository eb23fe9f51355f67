import json

import pytest

import lspresso_shot as shot
from lspresso_shot.lsp.types import (
    CallHierarchyIncomingCall,
    CallHierarchyItem,
    CodeAction,
    CodeActionContext,
    Color,
    ColorInformation,
    ColorPresentation,
    Command,
    CompletionItem,
    CompletionItemKind,
    Diagnostic,
    DiagnosticRelatedInformation,
    DiagnosticSeverity,
    Hover,
    LinkedEditingRanges,
    Location,
    MarkupContent,
    MarkupKind,
    Moniker,
    MonikerKind,
    Position,
    Range,
    RelatedFullDocumentDiagnosticReport,
    SelectionRange,
    SemanticTokens,
    SemanticTokensDelta,
    SignatureHelp,
    SymbolKind,
    TextEdit,
    TypeHierarchyItem,
    UnchangedDocumentDiagnosticReport,
    UniquenessLevel,
    WorkspaceDiagnosticReport,
    WorkspaceEdit,
    WorkspaceFullDocumentDiagnosticReport,
    WorkspaceUnchangedDocumentDiagnosticReport,
)
from lspresso_shot.utils.uri import path_to_uri

CURSOR = Position(line=0, character=3)
RANGE = Range.of(0, 3, 0, 7)
ITEM = CallHierarchyItem(
    name="main",
    kind=SymbolKind.Function,
    uri="main.rs",
    range=RANGE,
    selection_range=RANGE,
)


def hover_reply(value: str) -> str:
    return json.dumps({"contents": {"kind": "markdown", "value": value}})


def type_item(name: str, kind: SymbolKind) -> TypeHierarchyItem:
    return TypeHierarchyItem(name=name, kind=kind, uri="main.rs", range=RANGE, selection_range=RANGE)


class TestEntryPoints:
    def test_one_per_kind(self):
        assert set(shot.ENTRY_POINTS) == set(shot.RequestKind)

    def test_not_collected_by_pytest(self):
        assert shot.test_hover.__test__ is False


class TestHover:
    def test_success(self, fake_nvim, make_case):
        fake_nvim.reply(hover_reply("fn main()"))
        expected = Hover(contents=MarkupContent(kind="markdown", value="fn main()"))
        shot.test_hover(make_case(cursor_pos=CURSOR), expected)

    def test_mismatch(self, fake_nvim, make_case):
        fake_nvim.reply(hover_reply("fn other()"))
        expected = Hover(contents=MarkupContent(kind="markdown", value="fn main()"))
        case = make_case(cursor_pos=CURSOR)
        with pytest.raises(shot.ResponseMismatch) as exc_info:
            shot.test_hover(case, expected)
        assert str(exc_info.value).startswith(f"Test {case.test_id}: Incorrect Hover response:")

    def test_requires_cursor(self, fake_nvim, make_case):
        with pytest.raises(shot.InvalidCursorPosition):
            shot.test_hover(make_case(), None)

    def test_expected_some(self, fake_nvim, make_case):
        fake_nvim.mode("empty")
        with pytest.raises(shot.ExpectedSome):
            shot.test_hover(make_case(cursor_pos=CURSOR), Hover(contents="x"))

    def test_expected_none_and_empty(self, fake_nvim, make_case):
        fake_nvim.mode("empty")
        shot.test_hover(make_case(cursor_pos=CURSOR), None)

    def test_decode_error(self, fake_nvim, make_case):
        fake_nvim.reply('{"range": 5}')
        with pytest.raises(shot.DecodeError):
            shot.test_hover(make_case(cursor_pos=CURSOR), Hover(contents="x"))

    def test_invalid_utf8(self, fake_nvim, make_case):
        fake_nvim.reply_path.write_bytes(b'"\xff"')
        with pytest.raises(shot.Utf8Error):
            shot.test_hover(make_case(cursor_pos=CURSOR), Hover(contents="x"))


class TestOutcomes:
    def test_no_results(self, fake_nvim, make_case):
        fake_nvim.mode("nothing")
        with pytest.raises(shot.NoResults):
            shot.test_document_symbol(make_case(), None)

    def test_driver_error(self, fake_nvim, make_case):
        fake_nvim.mode("error")
        with pytest.raises(shot.EditorError) as exc_info:
            shot.test_document_symbol(make_case(), None)
        assert "driver failed" in str(exc_info.value)

    def test_driver_timeout_marker(self, fake_nvim, make_case):
        fake_nvim.mode("timeout")
        with pytest.raises(shot.TimeoutExceeded):
            shot.test_document_symbol(make_case(), None)

    def test_both_markers_is_a_bug(self, fake_nvim, make_case):
        fake_nvim.reply("[]")
        fake_nvim.mode("both")
        with pytest.raises(AssertionError):
            shot.test_document_symbol(make_case(), None)

    def test_invalid_server(self, fake_nvim, make_case, temp_dir):
        with pytest.raises(shot.InvalidServerCommand):
            shot.test_document_symbol(make_case(executable_path=str(temp_dir / "nope")), None)


class TestDefinition:
    def test_expected_none_reports_normalized_actual(self, fake_nvim, make_case):
        case = make_case(cursor_pos=CURSOR)
        uri = path_to_uri(case.layout.src_dir / "main.rs")
        fake_nvim.reply(json.dumps({"uri": uri, "range": RANGE.to_lsp()}))
        with pytest.raises(shot.ExpectedNone) as exc_info:
            shot.test_definition(case, None)
        assert exc_info.value.actual == Location(uri="main.rs", range=RANGE)

    def test_uris_are_relative(self, fake_nvim, make_case):
        case = make_case(cursor_pos=CURSOR)
        uri = path_to_uri(case.layout.src_dir / "src" / "lib.rs")
        fake_nvim.reply(json.dumps([{"uri": uri, "range": RANGE.to_lsp()}]))
        shot.test_definition(case, [Location(uri="src/lib.rs", range=RANGE)])

    def test_empty_object_matches_empty_list(self, fake_nvim, make_case):
        fake_nvim.reply("{}")
        shot.test_definition(make_case(cursor_pos=CURSOR), [])


class TestOtherKinds:
    def test_rename(self, fake_nvim, make_case):
        case = make_case(cursor_pos=CURSOR)
        uri = path_to_uri(case.layout.src_dir / "main.rs")
        edit = {"changes": {uri: [{"range": RANGE.to_lsp(), "newText": "start"}]}}
        fake_nvim.reply(json.dumps(edit))
        expected = WorkspaceEdit(changes={"main.rs": [TextEdit(range=RANGE, new_text="start")]})
        shot.test_rename(case, "start", expected)

    def test_completion_contains(self, fake_nvim, make_case):
        fake_nvim.reply(json.dumps({"isIncomplete": True, "items": [{"label": "b"}, {"label": "a"}]}))
        shot.test_completion(make_case(cursor_pos=CURSOR), shot.Contains([CompletionItem(label="a")]))

    def test_completion_contains_missing(self, fake_nvim, make_case):
        fake_nvim.reply(json.dumps([{"label": "b"}]))
        with pytest.raises(shot.CompletionMismatch):
            shot.test_completion(make_case(cursor_pos=CURSOR), shot.Contains([CompletionItem(label="a")]))

    def test_formatting_end_state(self, fake_nvim, make_case):
        fake_nvim.reply(json.dumps("fn main() {}"))
        shot.test_formatting(make_case(), shot.EndState("fn main() {}"))

    def test_document_highlight_needs_a_position(self, fake_nvim, make_case):
        with pytest.raises(shot.InvalidCursorPosition):
            shot.test_document_highlight(make_case(), None)

    def test_references(self, fake_nvim, make_case):
        fake_nvim.mode("empty")
        shot.test_references(make_case(cursor_pos=CURSOR), True, None)


class TestWorkspace:
    def test_files_written(self, fake_nvim, make_case):
        fake_nvim.mode("empty")
        case = make_case(other_files=[shot.TestFile("src/lib.rs", "pub fn f() {}\n")])
        shot.test_document_symbol(case, None)
        layout = case.layout
        assert (layout.src_dir / "main.rs").read_text() == "fn main() {}\n"
        assert (layout.src_dir / "src" / "lib.rs").read_text() == "pub fn f() {}\n"
        assert "textDocument/documentSymbol" in layout.init_script.read_text()

    def test_cleanup_removes_workspace(self, fake_nvim, make_case):
        fake_nvim.mode("empty")
        case = make_case(cleanup=True)
        shot.test_document_symbol(case, None)
        assert not case.layout.root.exists()

    def test_cleanup_after_failure(self, fake_nvim, make_case):
        fake_nvim.mode("nothing")
        case = make_case(cleanup=True)
        with pytest.raises(shot.NoResults):
            shot.test_document_symbol(case, None)
        assert not case.layout.root.exists()

    def test_stale_results_are_removed(self, fake_nvim, make_case):
        case = make_case()
        layout = case.layout
        layout.create_dirs()
        layout.results_file.write_text("[]")
        fake_nvim.mode("empty")
        shot.test_document_symbol(case, None)


class TestEmptyReplies:
    def test_incoming_calls_empty_object(self, fake_nvim, make_case):
        fake_nvim.reply("{}")
        shot.test_incoming_calls(make_case(), ITEM, [])

    def test_outgoing_calls_empty_object(self, fake_nvim, make_case):
        fake_nvim.reply("{}")
        shot.test_outgoing_calls(make_case(), ITEM, [])

    @pytest.mark.parametrize("reply", ["{}", "[]", "null"])
    def test_empty_reply_satisfies_none(self, fake_nvim, make_case, reply):
        fake_nvim.reply(reply)
        shot.test_incoming_calls(make_case(), ITEM, None)

    def test_empty_object_is_still_a_mismatch_for_non_empty(self, fake_nvim, make_case):
        fake_nvim.reply("{}")
        call = CallHierarchyIncomingCall(from_=ITEM, from_ranges=[RANGE])
        with pytest.raises(shot.ResponseMismatch):
            shot.test_incoming_calls(make_case(), ITEM, [call])

    def test_prepare_call_hierarchy_empty_object(self, fake_nvim, make_case):
        fake_nvim.reply("{}")
        shot.test_prepare_call_hierarchy(make_case(cursor_pos=CURSOR), [])

    def test_prepare_type_hierarchy_empty_object(self, fake_nvim, make_case):
        fake_nvim.reply("{}")
        shot.test_prepare_type_hierarchy(make_case(cursor_pos=CURSOR), [])

    def test_selection_range_empty_object(self, fake_nvim, make_case):
        fake_nvim.reply("{}")
        shot.test_selection_range(make_case(cursor_pos=CURSOR), [])

    def test_signature_help_nested_empty_object(self, fake_nvim, make_case):
        fake_nvim.reply(json.dumps({"signatures": {}, "activeSignature": 0}))
        expected = SignatureHelp(signatures=[], active_signature=0)
        shot.test_signature_help(make_case(cursor_pos=CURSOR), expected)

    def test_semantic_tokens_full_nested_empty_object(self, fake_nvim, make_case):
        fake_nvim.reply(json.dumps({"resultId": "1", "data": {}}))
        shot.test_semantic_tokens_full(make_case(), SemanticTokens(result_id="1", data=[]))

    def test_semantic_tokens_delta_nested_empty_object(self, fake_nvim, make_case):
        fake_nvim.reply(json.dumps({"resultId": "2", "edits": {}}))
        shot.test_semantic_tokens_full_delta(make_case(), SemanticTokensDelta(result_id="2", edits=[]))

    def test_semantic_tokens_range_nested_empty_object(self, fake_nvim, make_case):
        fake_nvim.reply(json.dumps({"data": {}}))
        shot.test_semantic_tokens_range(make_case(), RANGE, SemanticTokens(data=[]))

    def test_selection_range_with_parent(self, fake_nvim, make_case):
        outer = Range.of(0, 0, 0, 12)
        fake_nvim.reply(json.dumps([{"range": RANGE.to_lsp(), "parent": {"range": outer.to_lsp()}}]))
        expected = [SelectionRange(range=RANGE, parent=SelectionRange(range=outer))]
        shot.test_selection_range(make_case(cursor_pos=CURSOR), expected)


class TestDiagnostics:
    def test_published_error(self, fake_nvim, make_case):
        case = make_case(source_file=shot.TestFile("src/main.rs", 'fn main() {\n    let s = "\n}\n'))
        uri = path_to_uri(case.layout.src_dir / "src" / "main.rs")
        fake_nvim.reply(json.dumps([{
            "range": Range.of(1, 13, 2, 1).to_lsp(),
            "severity": 1,
            "code": "E0765",
            "source": "rustc",
            "message": "unterminated double quote string",
            "relatedInformation": [{
                "location": {"uri": uri, "range": Range.of(1, 12, 1, 13).to_lsp()},
                "message": "string starts here",
            }],
        }]))
        expected = [Diagnostic(
            range=Range.of(1, 13, 2, 1),
            severity=DiagnosticSeverity.Error,
            code="E0765",
            source="rustc",
            message="unterminated double quote string",
            related_information=[DiagnosticRelatedInformation(
                location=Location(uri="src/main.rs", range=Range.of(1, 12, 1, 13)),
                message="string starts here",
            )],
        )]
        shot.test_diagnostics(case, expected)

    def test_severity_mismatch(self, fake_nvim, make_case):
        fake_nvim.reply(json.dumps([{"range": RANGE.to_lsp(), "severity": 2, "message": "unused"}]))
        expected = [Diagnostic(range=RANGE, severity=DiagnosticSeverity.Error, message="unused")]
        with pytest.raises(shot.ResponseMismatch):
            shot.test_diagnostics(make_case(), expected)

    def test_document_diagnostic_related_documents(self, fake_nvim, make_case):
        case = make_case()
        uri = path_to_uri(case.layout.src_dir / "lib.rs")
        fake_nvim.reply(json.dumps({
            "kind": "full",
            "resultId": "3",
            "items": [{"range": RANGE.to_lsp(), "severity": 4, "message": "hint"}],
            "relatedDocuments": {uri: {"kind": "unchanged", "resultId": "7"}},
        }))
        expected = RelatedFullDocumentDiagnosticReport(
            result_id="3",
            items=[Diagnostic(range=RANGE, severity=DiagnosticSeverity.Hint, message="hint")],
            related_documents={"lib.rs": UnchangedDocumentDiagnosticReport(result_id="7")},
        )
        shot.test_document_diagnostic(case, expected)

    def test_workspace_diagnostic(self, fake_nvim, make_case):
        case = make_case()
        main_uri = path_to_uri(case.layout.src_dir / "main.rs")
        lib_uri = path_to_uri(case.layout.src_dir / "lib.rs")
        fake_nvim.reply(json.dumps({"items": [
            {
                "kind": "full",
                "uri": main_uri,
                "version": None,
                "items": [{"range": RANGE.to_lsp(), "severity": 1, "message": "broken"}],
            },
            {"kind": "unchanged", "uri": lib_uri, "version": 2, "resultId": "r1"},
        ]}))
        expected = WorkspaceDiagnosticReport(items=[
            WorkspaceFullDocumentDiagnosticReport(
                uri="main.rs",
                items=[Diagnostic(range=RANGE, severity=DiagnosticSeverity.Error, message="broken")],
            ),
            WorkspaceUnchangedDocumentDiagnosticReport(uri="lib.rs", version=2, result_id="r1"),
        ])
        shot.test_workspace_diagnostic(case, expected)

    def test_workspace_diagnostic_empty_items(self, fake_nvim, make_case):
        fake_nvim.reply(json.dumps({"items": {}}))
        shot.test_workspace_diagnostic(make_case(), WorkspaceDiagnosticReport(items=[]))


class TestCodeActions:
    def test_actions_and_commands(self, fake_nvim, make_case):
        case = make_case()
        uri = path_to_uri(case.layout.src_dir / "main.rs")
        fake_nvim.reply(json.dumps([
            {
                "title": "Rename to start",
                "kind": "quickfix",
                "isPreferred": True,
                "edit": {"changes": {uri: [{"range": RANGE.to_lsp(), "newText": "start"}]}},
            },
            {"title": "Run", "command": "rust-analyzer.run", "arguments": [1]},
        ]))
        expected = [
            CodeAction(
                title="Rename to start",
                kind="quickfix",
                is_preferred=True,
                edit=WorkspaceEdit(changes={"main.rs": [TextEdit(range=RANGE, new_text="start")]}),
            ),
            Command(title="Run", command="rust-analyzer.run", arguments=[1]),
        ]
        context = CodeActionContext(only=["quickfix"])
        shot.test_code_action(case, RANGE, expected, context=context)

    def test_no_actions(self, fake_nvim, make_case):
        fake_nvim.mode("empty")
        shot.test_code_action(make_case(), RANGE, None)

    def test_resolve(self, fake_nvim, make_case):
        case = make_case()
        uri = path_to_uri(case.layout.src_dir / "main.rs")
        fake_nvim.reply(json.dumps({
            "title": "Inline",
            "data": {"id": 4},
            "edit": {"changes": {uri: [{"range": RANGE.to_lsp(), "newText": ""}]}},
        }))
        action = CodeAction(title="Inline", data={"id": 4})
        expected = action.model_copy(update={
            "edit": WorkspaceEdit(changes={"main.rs": [TextEdit(range=RANGE, new_text="")]}),
        })
        shot.test_code_action_resolve(case, action, expected)


class TestResolveKinds:
    def test_completion_resolve(self, fake_nvim, make_case):
        fake_nvim.reply(json.dumps({
            "label": "main",
            "kind": 3,
            "documentation": {"kind": "markdown", "value": "Entry point"},
        }))
        expected = CompletionItem(
            label="main",
            kind=CompletionItemKind.Function,
            documentation=MarkupContent(kind=MarkupKind.Markdown, value="Entry point"),
        )
        shot.test_completion_resolve(make_case(), CompletionItem(label="main", kind=3), expected)

    def test_type_hierarchy_supertypes(self, fake_nvim, make_case):
        case = make_case()
        uri = path_to_uri(case.layout.src_dir / "lib.rs")
        fake_nvim.reply(json.dumps([{
            "name": "Base",
            "kind": 23,
            "uri": uri,
            "range": RANGE.to_lsp(),
            "selectionRange": RANGE.to_lsp(),
        }]))
        item = type_item("Derived", SymbolKind.Struct)
        expected = [item.model_copy(update={"name": "Base", "uri": "lib.rs"})]
        shot.test_type_hierarchy_supertypes(case, item, expected)

    def test_type_hierarchy_subtypes_empty(self, fake_nvim, make_case):
        fake_nvim.reply("{}")
        item = type_item("Base", SymbolKind.Class)
        shot.test_type_hierarchy_subtypes(make_case(), item, [])


class TestSmallKinds:
    def test_document_color(self, fake_nvim, make_case):
        fake_nvim.reply(json.dumps([
            {"range": RANGE.to_lsp(), "color": {"red": 1, "green": 0, "blue": 0.5, "alpha": 1}},
        ]))
        expected = [ColorInformation(range=RANGE, color=Color(red=1.0, green=0.0, blue=0.5, alpha=1.0))]
        shot.test_document_color(make_case(), expected)

    def test_color_presentation(self, fake_nvim, make_case):
        fake_nvim.reply(json.dumps([{"label": "#ff0000"}]))
        color = Color(red=1.0, green=0.0, blue=0.0, alpha=1.0)
        shot.test_color_presentation(make_case(), color, RANGE, [ColorPresentation(label="#ff0000")])

    def test_linked_editing_range(self, fake_nvim, make_case):
        other = Range.of(0, 10, 0, 14)
        fake_nvim.reply(json.dumps({"ranges": [RANGE.to_lsp(), other.to_lsp()]}))
        expected = LinkedEditingRanges(ranges=[RANGE, other])
        shot.test_linked_editing_range(make_case(cursor_pos=CURSOR), expected)

    def test_moniker(self, fake_nvim, make_case):
        fake_nvim.reply(json.dumps([
            {"scheme": "rust", "identifier": "crate::main", "unique": "project", "kind": "export"},
        ]))
        expected = [Moniker(
            scheme="rust",
            identifier="crate::main",
            unique=UniquenessLevel.Project,
            kind=MonikerKind.Export,
        )]
        shot.test_moniker(make_case(cursor_pos=CURSOR), expected)

    def test_moniker_needs_cursor(self, fake_nvim, make_case):
        with pytest.raises(shot.InvalidCursorPosition):
            shot.test_moniker(make_case(), None)
