"""TOML case files: a whole test case, its inputs and its expectation in one file.

    kind = "hover"
    server = "./bin/my-server"
    cursor = { line = 2, character = 4 }

    [source]
    path = "main.rs"
    contents = "fn main() {}\n"

    [expected]
    contents = { kind = "markdown", value = "fn main()" }

A server or editor given as a path is resolved against the case file's
directory. `expect` selects how `expected` is read: `exact` (the default when
an expectation is present), `none`, `contains` (completion), and `end_state`
or `response` (formatting, execute command).
"""

import inspect
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli
import tomli_w
from pydantic import TypeAdapter, ValidationError

from .case import Immediate, Progress, TestCase, TestFile
from .errors import LspressoError
from .kinds import Contains, EndState, Exact, RequestKind, Response, get_kind_spec
from .kinds.state import StateOrResponseKindSpec
from .lsp.types import (
    CallHierarchyItem,
    CodeAction,
    CodeActionContext,
    CodeLens,
    Color,
    CompletionItem,
    DocumentLink,
    FormattingOptions,
    Position,
    PreviousResultId,
    Range,
    SignatureHelpContext,
    TypeHierarchyItem,
)
from .runner import ENTRY_POINTS, preview_script

logger = logging.getLogger(__name__)

EXPECT_MODES = ("exact", "none", "contains", "end_state", "response")

# Case file input name -> (entry point keyword, type)
INPUT_TYPES: dict[str, tuple[str, Any]] = {
    "item": ("item", CallHierarchyItem),
    "code_lens": ("code_lens", CodeLens),
    "link": ("link", DocumentLink),
    "options": ("options", FormattingOptions),
    "position": ("position", Position),
    "positions": ("positions", list[Position]),
    "range": ("range_", Range),
    "context": ("context", SignatureHelpContext),
    "code_action": ("code_action", CodeAction),
    "completion_item": ("completion_item", CompletionItem),
    "color": ("color", Color),
    "previous_result_ids": ("previous_result_ids", list[PreviousResultId]),
}

# Inputs whose type depends on the request kind
KIND_INPUT_TYPES: dict[RequestKind, dict[str, tuple[str, Any]]] = {
    RequestKind.CODE_ACTION: {"context": ("context", CodeActionContext)},
    RequestKind.TYPE_HIERARCHY_SUPERTYPES: {"item": ("item", TypeHierarchyItem)},
    RequestKind.TYPE_HIERARCHY_SUBTYPES: {"item": ("item", TypeHierarchyItem)},
}

_PLACEHOLDER_RANGE = {"start": {"line": 0, "character": 0}, "end": {"line": 0, "character": 0}}
_PLACEHOLDER_ITEM = {
    "name": "",
    "kind": 12,
    "uri": "main.txt",
    "range": _PLACEHOLDER_RANGE,
    "selectionRange": _PLACEHOLDER_RANGE,
}

SKELETON_INPUTS: dict[RequestKind, dict[str, Any]] = {
    RequestKind.REFERENCES: {"include_declaration": False},
    RequestKind.RENAME: {"new_name": "renamed"},
    RequestKind.WORKSPACE_SYMBOL: {"query": ""},
    RequestKind.EXECUTE_COMMAND: {"command": "", "arguments": []},
    RequestKind.SEMANTIC_TOKENS_RANGE: {"range": _PLACEHOLDER_RANGE},
    RequestKind.INCOMING_CALLS: {"item": _PLACEHOLDER_ITEM},
    RequestKind.OUTGOING_CALLS: {"item": _PLACEHOLDER_ITEM},
    RequestKind.CODE_LENS_RESOLVE: {"code_lens": {"range": _PLACEHOLDER_RANGE}},
    RequestKind.DOCUMENT_LINK_RESOLVE: {"link": {"range": _PLACEHOLDER_RANGE}},
    RequestKind.CODE_ACTION: {"range": _PLACEHOLDER_RANGE},
    RequestKind.CODE_ACTION_RESOLVE: {"code_action": {"title": ""}},
    RequestKind.COMPLETION_RESOLVE: {"completion_item": {"label": ""}},
    RequestKind.TYPE_HIERARCHY_SUPERTYPES: {"item": _PLACEHOLDER_ITEM},
    RequestKind.TYPE_HIERARCHY_SUBTYPES: {"item": _PLACEHOLDER_ITEM},
    RequestKind.COLOR_PRESENTATION: {
        "color": {"red": 0.0, "green": 0.0, "blue": 0.0, "alpha": 1.0},
        "range": _PLACEHOLDER_RANGE,
    },
}


class CaseFileError(LspressoError):
    def __init__(self, path: Path | str, detail: str):
        self.path = path
        self.detail = detail
        super().__init__(f"{path}: {detail}")


def _resolve_command(command: str, base_dir: Path) -> str:
    if os.sep in command or command.startswith("."):
        path = Path(command).expanduser()
        if not path.is_absolute():
            path = base_dir / path
        return str(path)
    return command


def _parse_cursor(path: Path, value: Any) -> Position:
    if isinstance(value, list) and len(value) == 2:
        value = {"line": value[0], "character": value[1]}
    try:
        return Position.model_validate(value)
    except ValidationError as e:
        raise CaseFileError(path, f"invalid cursor: {e}") from e


def _parse_startup(path: Path, table: dict | None):
    if not table:
        return Immediate()
    if "token" not in table:
        raise CaseFileError(path, "[startup] needs a progress token")
    try:
        return Progress(threshold=int(table.get("threshold", 1)), token=str(table["token"]))
    except (TypeError, ValueError) as e:
        raise CaseFileError(path, str(e)) from e


def _parse_timeout(path: Path, value: Any) -> float:
    if isinstance(value, bool):
        raise CaseFileError(path, f"invalid timeout: {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise CaseFileError(path, f"invalid timeout: {value!r}") from e


def _parse_file(path: Path, table: Any, where: str) -> TestFile:
    if not isinstance(table, dict) or "path" not in table or "contents" not in table:
        raise CaseFileError(path, f"{where} needs `path` and `contents`")
    return TestFile(table["path"], table["contents"])


def _validate(path: Path, adapter: TypeAdapter, value: Any, what: str) -> Any:
    try:
        return adapter.validate_python(value)
    except ValidationError as e:
        raise CaseFileError(path, f"invalid {what}: {e}") from e


def parse_inputs(path: Path, kind: RequestKind, table: dict[str, Any]) -> dict[str, Any]:
    input_types = {**INPUT_TYPES, **KIND_INPUT_TYPES.get(kind, {})}
    inputs = {}
    for name, value in table.items():
        if name in input_types:
            keyword, type_ = input_types[name]
            inputs[keyword] = _validate(path, TypeAdapter(type_), value, f"input `{name}`")
        else:
            inputs[name] = value
    return inputs


def parse_expectation(path: Path, kind: RequestKind, mode: str | None, data: dict) -> Any:
    if "expected" in data and "expected_json" in data:
        raise CaseFileError(path, "use either `expected` or `expected_json`, not both")
    if "expected_json" in data:
        try:
            raw = json.loads(data["expected_json"])
        except json.JSONDecodeError as e:
            raise CaseFileError(path, f"invalid expected_json: {e}") from e
    else:
        raw = data.get("expected")

    if mode is None:
        mode = "none" if raw is None else "exact"
    if mode not in EXPECT_MODES:
        raise CaseFileError(path, f"unknown expect mode `{mode}`, use one of {', '.join(EXPECT_MODES)}")
    if mode == "none":
        return None
    if raw is None:
        raise CaseFileError(path, f"expect = \"{mode}\" needs an expectation")

    spec = get_kind_spec(kind)
    if mode == "contains":
        if kind is not RequestKind.COMPLETION:
            raise CaseFileError(path, "expect = \"contains\" only applies to completion")
        items = _validate(path, TypeAdapter(list[CompletionItem]), raw, "completion items")
        return Contains(items)
    if mode == "end_state":
        if not isinstance(spec, StateOrResponseKindSpec):
            raise CaseFileError(path, f"expect = \"end_state\" does not apply to {kind.slug}")
        if not isinstance(raw, str):
            raise CaseFileError(path, "an end state expectation must be a string")
        return EndState(raw)

    response = _validate(path, spec.adapter, raw, "expectation")
    if isinstance(spec, StateOrResponseKindSpec):
        return Response(response)
    if mode == "response":
        raise CaseFileError(path, f"expect = \"response\" does not apply to {kind.slug}")
    if kind is RequestKind.COMPLETION:
        return Exact(response)
    return response


@dataclass
class CaseFile:
    path: Path
    kind: RequestKind
    case: TestCase
    expected: Any = None
    inputs: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Path | str) -> "CaseFile":
        path = Path(path)
        try:
            with open(path, "rb") as f:
                data = tomli.load(f)
        except OSError as e:
            raise CaseFileError(path, str(e)) from e
        except tomli.TOMLDecodeError as e:
            raise CaseFileError(path, f"invalid TOML: {e}") from e
        return cls.from_dict(path, data)

    @classmethod
    def from_dict(cls, path: Path, data: dict[str, Any]) -> "CaseFile":
        for key in ("kind", "server", "source"):
            if key not in data:
                raise CaseFileError(path, f"missing `{key}`")
        try:
            kind = RequestKind.from_name(data["kind"])
        except ValueError as e:
            raise CaseFileError(path, str(e)) from e

        base_dir = path.parent
        options: dict[str, Any] = {
            "executable_path": _resolve_command(data["server"], base_dir),
            "source_file": _parse_file(path, data["source"], "[source]"),
            "other_files": tuple(
                _parse_file(path, table, "[[files]]") for table in data.get("files", [])
            ),
            "start_type": _parse_startup(path, data.get("startup")),
        }
        if "cursor" in data:
            options["cursor_pos"] = _parse_cursor(path, data["cursor"])
        if "editor" in data:
            options["nvim_path"] = _resolve_command(data["editor"], base_dir)
        if "timeout" in data:
            options["timeout"] = _parse_timeout(path, data["timeout"])
        if "cleanup" in data:
            options["cleanup"] = bool(data["cleanup"])
        if "test_id" in data:
            options["test_id"] = str(data["test_id"])

        case = TestCase(**options)
        expected = parse_expectation(path, kind, data.get("expect"), data)
        inputs = parse_inputs(path, kind, data.get("inputs", {}))
        case_file = cls(path=path, kind=kind, case=case, expected=expected, inputs=inputs)
        case_file.check_inputs()
        logger.debug(f"Loaded {kind.slug} case {case.test_id} from {path}")
        return case_file

    @property
    def entry_point(self):
        return ENTRY_POINTS[self.kind]

    def check_inputs(self) -> None:
        try:
            inspect.signature(self.entry_point).bind(self.case, expected=self.expected, **self.inputs)
        except TypeError as e:
            raise CaseFileError(self.path, f"bad [inputs] for {self.kind.slug}: {e}") from e

    def run(self) -> None:
        self.entry_point(self.case, expected=self.expected, **self.inputs)

    def script(self) -> str:
        return preview_script(self.kind, self.case, self.expected, **self.inputs)


def skeleton_case(kind: RequestKind, server: str, source: str = "main.txt") -> str:
    spec = get_kind_spec(kind)
    data: dict[str, Any] = {"kind": kind.slug, "server": server}
    if spec.needs_cursor or kind is RequestKind.DOCUMENT_HIGHLIGHT:
        data["cursor"] = {"line": 0, "character": 0}
    if isinstance(spec, StateOrResponseKindSpec):
        data["expect"] = "end_state"
        data["expected"] = ""
    else:
        data["expect"] = "none"
    data["source"] = {"path": source, "contents": ""}
    if kind in SKELETON_INPUTS:
        data["inputs"] = SKELETON_INPUTS[kind]
    return tomli_w.dumps(data)
