import json

import pytest

from lspresso_shot.case import Immediate, Progress
from lspresso_shot.casefile import CaseFile, CaseFileError, skeleton_case
from lspresso_shot.errors import ExpectedNone
from lspresso_shot.kinds import Contains, EndState, Exact, RequestKind, Response
from lspresso_shot.lsp.types import (
    CallHierarchyItem,
    CodeAction,
    CodeActionContext,
    Hover,
    MarkupContent,
    Position,
    Range,
    SignatureHelpContext,
    TypeHierarchyItem,
)

HOVER_CASE = """
kind = "hover"
server = "./bin/fake-server"
cursor = { line = 0, character = 3 }
timeout = 2.0

[source]
path = "main.rs"
contents = "fn main() {}\\n"

[expected]
contents = { kind = "markdown", value = "fn main()" }
"""


def write_case(temp_dir, text, name="case.toml"):
    path = temp_dir / name
    path.write_text(text)
    return path


class TestLoad:
    def test_hover_case(self, isolated_config, fake_server, temp_dir):
        case_file = CaseFile.load(write_case(temp_dir, HOVER_CASE))
        assert case_file.kind is RequestKind.HOVER
        assert case_file.case.executable_path == str(temp_dir / "bin" / "fake-server")
        assert case_file.case.cursor_pos == Position(line=0, character=3)
        assert case_file.case.timeout == 2.0
        assert case_file.case.start_type == Immediate()
        assert case_file.expected == Hover(contents=MarkupContent(kind="markdown", value="fn main()"))

    def test_command_on_path_is_kept(self, isolated_config, temp_dir):
        text = HOVER_CASE.replace('"./bin/fake-server"', '"rust-analyzer"')
        assert CaseFile.load(write_case(temp_dir, text)).case.executable_path == "rust-analyzer"

    def test_startup_and_files(self, isolated_config, temp_dir):
        text = HOVER_CASE + """
[startup]
token = "rustAnalyzer/Indexing"
threshold = 2

[[files]]
path = "Cargo.toml"
contents = "[package]"
"""
        case = CaseFile.load(write_case(temp_dir, text)).case
        assert case.start_type == Progress(threshold=2, token="rustAnalyzer/Indexing")
        assert [f.path for f in case.other_files] == ["Cargo.toml"]

    def test_cursor_as_pair(self, isolated_config, temp_dir):
        text = HOVER_CASE.replace("{ line = 0, character = 3 }", "[4, 1]")
        assert CaseFile.load(write_case(temp_dir, text)).case.cursor_pos == Position(line=4, character=1)

    def test_missing_expectation_means_none(self, isolated_config, temp_dir):
        text = HOVER_CASE.split("[expected]")[0]
        assert CaseFile.load(write_case(temp_dir, text)).expected is None

    def test_expected_json(self, isolated_config, temp_dir):
        text = HOVER_CASE.split("[expected]")[0].replace(
            "timeout = 2.0", "timeout = 2.0\nexpected_json = '{\"contents\": \"x\"}'"
        )
        assert CaseFile.load(write_case(temp_dir, text)).expected == Hover(contents="x")


class TestExpectModes:
    def base(self, kind, extra=""):
        return f'kind = "{kind}"\nserver = "sh"\n{extra}\n[source]\npath = "main.rs"\ncontents = ""\n'

    def test_contains(self, isolated_config, temp_dir):
        text = self.base("completion", "expect = \"contains\"\nexpected_json = '[{\"label\": \"a\"}]'")
        expected = CaseFile.load(write_case(temp_dir, text)).expected
        assert isinstance(expected, Contains)
        assert expected.items[0].label == "a"

    def test_exact_completion(self, isolated_config, temp_dir):
        text = self.base("completion", "expected_json = '[{\"label\": \"a\"}]'")
        assert isinstance(CaseFile.load(write_case(temp_dir, text)).expected, Exact)

    def test_end_state(self, isolated_config, temp_dir):
        text = self.base("formatting", 'expect = "end_state"\nexpected = "fn main() {}"')
        assert CaseFile.load(write_case(temp_dir, text)).expected == EndState("fn main() {}")

    def test_response(self, isolated_config, temp_dir):
        text = self.base("formatting", "expected_json = '[]'")
        assert CaseFile.load(write_case(temp_dir, text)).expected == Response([])

    def test_contains_only_for_completion(self, isolated_config, temp_dir):
        text = self.base("hover", "expect = \"contains\"\nexpected_json = '[]'")
        with pytest.raises(CaseFileError):
            CaseFile.load(write_case(temp_dir, text))

    def test_unknown_mode(self, isolated_config, temp_dir):
        with pytest.raises(CaseFileError):
            CaseFile.load(write_case(temp_dir, self.base("hover", 'expect = "maybe"')))

    def test_invalid_expectation(self, isolated_config, temp_dir):
        text = self.base("hover", "expected_json = '{\"range\": 1}'")
        with pytest.raises(CaseFileError):
            CaseFile.load(write_case(temp_dir, text))


class TestInputs:
    def base(self, kind, inputs):
        return f'kind = "{kind}"\nserver = "sh"\ncursor = [0, 0]\n[source]\npath = "main.rs"\ncontents = ""\n[inputs]\n{inputs}\n'

    def test_plain_inputs(self, isolated_config, temp_dir):
        case_file = CaseFile.load(write_case(temp_dir, self.base("rename", 'new_name = "other"')))
        assert case_file.inputs == {"new_name": "other"}

    def test_typed_inputs(self, isolated_config, temp_dir):
        inputs = "range = { start = { line = 0, character = 0 }, end = { line = 2, character = 0 } }"
        case_file = CaseFile.load(write_case(temp_dir, self.base("semantic_tokens_range", inputs)))
        assert case_file.inputs == {"range_": Range.of(0, 0, 2, 0)}

    def test_call_hierarchy_item(self, isolated_config, temp_dir):
        inputs = (
            'item = { name = "f", kind = 12, uri = "main.rs", '
            "range = { start = { line = 0, character = 0 }, end = { line = 0, character = 1 } }, "
            "selectionRange = { start = { line = 0, character = 0 }, end = { line = 0, character = 1 } } }"
        )
        case_file = CaseFile.load(write_case(temp_dir, self.base("incoming_calls", inputs)))
        assert isinstance(case_file.inputs["item"], CallHierarchyItem)

    def test_type_hierarchy_item(self, isolated_config, temp_dir):
        inputs = (
            'item = { name = "S", kind = 23, uri = "main.rs", '
            "range = { start = { line = 0, character = 0 }, end = { line = 0, character = 1 } }, "
            "selectionRange = { start = { line = 0, character = 0 }, end = { line = 0, character = 1 } } }"
        )
        case_file = CaseFile.load(write_case(temp_dir, self.base("type_hierarchy_supertypes", inputs)))
        assert isinstance(case_file.inputs["item"], TypeHierarchyItem)

    def test_context_type_depends_on_kind(self, isolated_config, temp_dir):
        range_ = "range = { start = { line = 0, character = 0 }, end = { line = 0, character = 1 } }"
        code_action = CaseFile.load(write_case(
            temp_dir, self.base("code_action", range_ + '\ncontext = { only = ["quickfix"] }'), "a.toml"
        ))
        assert code_action.inputs["context"] == CodeActionContext(only=["quickfix"])
        signature_help = CaseFile.load(write_case(
            temp_dir, self.base("signature_help", "context = { triggerKind = 1, isRetrigger = false }"), "b.toml"
        ))
        assert isinstance(signature_help.inputs["context"], SignatureHelpContext)

    def test_code_action_resolve_input(self, isolated_config, temp_dir):
        inputs = 'code_action = { title = "Fix", data = { id = 3 } }'
        case_file = CaseFile.load(write_case(temp_dir, self.base("code_action_resolve", inputs)))
        assert case_file.inputs["code_action"] == CodeAction(title="Fix", data={"id": 3})

    def test_missing_required_input(self, isolated_config, temp_dir):
        with pytest.raises(CaseFileError) as exc_info:
            CaseFile.load(write_case(temp_dir, self.base("rename", "")))
        assert "bad [inputs]" in str(exc_info.value)

    def test_unexpected_input(self, isolated_config, temp_dir):
        with pytest.raises(CaseFileError):
            CaseFile.load(write_case(temp_dir, self.base("hover", "query = 'x'")))


class TestErrors:
    def test_invalid_toml(self, isolated_config, temp_dir):
        with pytest.raises(CaseFileError):
            CaseFile.load(write_case(temp_dir, "kind = "))

    def test_missing_key(self, isolated_config, temp_dir):
        with pytest.raises(CaseFileError) as exc_info:
            CaseFile.load(write_case(temp_dir, 'kind = "hover"\nserver = "sh"\n'))
        assert "missing `source`" in str(exc_info.value)

    def test_unknown_kind(self, isolated_config, temp_dir):
        with pytest.raises(CaseFileError):
            CaseFile.load(write_case(temp_dir, HOVER_CASE.replace('"hover"', '"teleport"')))

    def test_missing_file(self, isolated_config, temp_dir):
        with pytest.raises(CaseFileError):
            CaseFile.load(temp_dir / "nope.toml")

    @pytest.mark.parametrize("timeout", ['"soon"', "[1]", "true"])
    def test_invalid_timeout(self, isolated_config, temp_dir, timeout):
        text = HOVER_CASE.replace("timeout = 2.0", f"timeout = {timeout}")
        with pytest.raises(CaseFileError) as exc_info:
            CaseFile.load(write_case(temp_dir, text))
        assert "invalid timeout" in str(exc_info.value)

    def test_numeric_string_timeout(self, isolated_config, fake_server, temp_dir):
        case_file = CaseFile.load(write_case(temp_dir, HOVER_CASE.replace("timeout = 2.0", 'timeout = "1.5"')))
        assert case_file.case.timeout == 1.5

    def test_invalid_progress_threshold(self, isolated_config, temp_dir):
        text = HOVER_CASE.replace("[source]", '[startup]\ntoken = "indexing"\nthreshold = [2]\n\n[source]')
        with pytest.raises(CaseFileError):
            CaseFile.load(write_case(temp_dir, text))


class TestRun:
    def test_run_and_script(self, fake_nvim, fake_server, temp_dir):
        fake_nvim.reply(json.dumps({"contents": {"kind": "markdown", "value": "fn main()"}}))
        case_file = CaseFile.load(write_case(temp_dir, HOVER_CASE))
        case_file.run()
        assert "textDocument/hover" in case_file.script()

    def test_run_failure(self, fake_nvim, fake_server, temp_dir):
        fake_nvim.reply(json.dumps({"contents": "x"}))
        case_file = CaseFile.load(write_case(temp_dir, HOVER_CASE.split("[expected]")[0]))
        with pytest.raises(ExpectedNone):
            case_file.run()


class TestSkeleton:
    @pytest.mark.parametrize("kind", list(RequestKind))
    def test_skeleton_loads(self, isolated_config, temp_dir, kind):
        path = write_case(temp_dir, skeleton_case(kind, "sh", "main.rs"))
        case_file = CaseFile.load(path)
        assert case_file.kind is kind
