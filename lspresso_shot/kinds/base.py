"""Request kind registry: per-method parameters, response types and equality."""

import copy
import json
import logging
from enum import Enum
from functools import cached_property
from typing import Any, Callable

from pydantic import TypeAdapter, ValidationError

from ..case import TestCase
from ..compare import structurally_equal
from ..driver.injection import ParameterInjection, PositionParam, TextDocumentParam
from ..driver.script import REQUEST_ACTION
from ..errors import InvalidCursorPosition, LspressoError, ResponseMismatch
from ..layout import Layout
from ..normalize import keep

logger = logging.getLogger(__name__)


class RequestKind(str, Enum):
    COMPLETION = "textDocument/completion"
    DECLARATION = "textDocument/declaration"
    DEFINITION = "textDocument/definition"
    DIAGNOSTICS = "textDocument/publishDiagnostics"
    DOCUMENT_SYMBOL = "textDocument/documentSymbol"
    FORMATTING = "textDocument/formatting"
    HOVER = "textDocument/hover"
    IMPLEMENTATION = "textDocument/implementation"
    INCOMING_CALLS = "callHierarchy/incomingCalls"
    OUTGOING_CALLS = "callHierarchy/outgoingCalls"
    PREPARE_CALL_HIERARCHY = "textDocument/prepareCallHierarchy"
    REFERENCES = "textDocument/references"
    RENAME = "textDocument/rename"
    TYPE_DEFINITION = "textDocument/typeDefinition"
    CODE_LENS = "textDocument/codeLens"
    CODE_LENS_RESOLVE = "codeLens/resolve"
    DOCUMENT_HIGHLIGHT = "textDocument/documentHighlight"
    DOCUMENT_LINK = "textDocument/documentLink"
    DOCUMENT_LINK_RESOLVE = "documentLink/resolve"
    FOLDING_RANGE = "textDocument/foldingRange"
    SELECTION_RANGE = "textDocument/selectionRange"
    SEMANTIC_TOKENS_FULL = "textDocument/semanticTokens/full"
    SEMANTIC_TOKENS_FULL_DELTA = "textDocument/semanticTokens/full/delta"
    SEMANTIC_TOKENS_RANGE = "textDocument/semanticTokens/range"
    EXECUTE_COMMAND = "workspace/executeCommand"
    SIGNATURE_HELP = "textDocument/signatureHelp"
    INLAY_HINT = "textDocument/inlayHint"
    PREPARE_TYPE_HIERARCHY = "textDocument/prepareTypeHierarchy"
    WORKSPACE_SYMBOL = "workspace/symbol"
    CODE_ACTION = "textDocument/codeAction"
    CODE_ACTION_RESOLVE = "codeAction/resolve"
    COMPLETION_RESOLVE = "completionItem/resolve"
    DOCUMENT_DIAGNOSTIC = "textDocument/diagnostic"
    WORKSPACE_DIAGNOSTIC = "workspace/diagnostic"
    TYPE_HIERARCHY_SUPERTYPES = "typeHierarchy/supertypes"
    TYPE_HIERARCHY_SUBTYPES = "typeHierarchy/subtypes"
    DOCUMENT_COLOR = "textDocument/documentColor"
    COLOR_PRESENTATION = "textDocument/colorPresentation"
    LINKED_EDITING_RANGE = "textDocument/linkedEditingRange"
    MONIKER = "textDocument/moniker"

    @property
    def method(self) -> str:
        return self.value

    @property
    def slug(self) -> str:
        return self.name.lower()

    @classmethod
    def from_name(cls, name: str) -> "RequestKind":
        """Look a kind up by slug (`type_definition`, `type-definition`) or LSP method."""
        key = name.strip().lower().replace("-", "_")
        for kind in cls:
            if kind.slug == key or kind.value == name.strip():
                return kind
        raise ValueError(f"Unknown request kind: {name}")

    def __str__(self) -> str:
        return self.slug


def untagged_empty_equal(expected: Any, actual: Any) -> bool:
    """Strict equality, except two empty lists are equal whatever their item type."""
    if isinstance(expected, list) and isinstance(actual, list) and not expected and not actual:
        return True
    return structurally_equal(expected, actual)


_MAX_REPAIRS = 64


def _resolve_path(data: Any, loc: tuple, target: Any) -> tuple | None:
    """Follow a validation error location through `data`.

    Segments that do not index into the data (union member tags) are skipped.
    Returns the concrete path if it ends on a value equal to `target`.
    """
    node = data
    path = []
    for segment in loc:
        if isinstance(node, dict) and isinstance(segment, str) and segment in node:
            node = node[segment]
            path.append(segment)
        elif isinstance(node, list) and isinstance(segment, int) and 0 <= segment < len(node):
            node = node[segment]
            path.append(segment)
    if type(node) is type(target) and node == target:
        return tuple(path)
    return None


def _swap_empty_containers(data: Any, error: ValidationError, seen: set) -> Any | None:
    repaired = copy.deepcopy(data)
    changed = False
    for detail in error.errors():
        bad = detail.get("input")
        if not isinstance(bad, (list, dict)) or bad:
            continue
        path = _resolve_path(repaired, detail["loc"], bad)
        if path is None or path in seen:
            continue
        seen.add(path)
        replacement = {} if isinstance(bad, list) else []
        if not path:
            repaired = replacement
        else:
            parent = repaired
            for segment in path[:-1]:
                parent = parent[segment]
            parent[path[-1]] = replacement
        changed = True
    return repaired if changed else None


def decode_response(adapter: TypeAdapter, raw: str, lenient_empty: bool = False) -> Any:
    """Validate a JSON reply against `adapter`.

    Editor-side JSON encoders cannot tell an empty array from an empty object.
    With `lenient_empty`, any empty container that fails validation is retried
    as the other kind of empty container; every other failure propagates.
    """
    data = json.loads(raw)
    seen: set = set()
    for _ in range(_MAX_REPAIRS):
        try:
            return adapter.validate_python(data)
        except ValidationError as e:
            if not lenient_empty:
                raise
            repaired = _swap_empty_containers(data, e, seen)
            if repaired is None:
                raise
            logger.debug(f"Retrying decode with swapped empty containers: {repaired!r}")
            data = repaired
    return adapter.validate_python(data)


class KindSpec:
    """Everything the pipeline needs to know about one request kind."""

    def __init__(
        self,
        kind: RequestKind,
        label: str,
        response: Any,
        fragment: str = REQUEST_ACTION,
        needs_cursor: bool = False,
        injects_cursor: bool | None = None,
        text_document: bool = True,
        normalize: Callable[[Any, Layout], Any] = keep,
        equal: Callable[[Any, Any], bool] = structurally_equal,
        lenient_empty: bool = True,
    ):
        self.kind = kind
        self.label = label
        self.response = response
        self.fragment = fragment
        self.needs_cursor = needs_cursor
        self.injects_cursor = needs_cursor if injects_cursor is None else injects_cursor
        self.text_document = text_document
        self.normalize = normalize
        self.equal = equal
        self.lenient_empty = lenient_empty

    def __repr__(self) -> str:
        return f"KindSpec({self.kind.slug!r})"

    @property
    def method(self) -> str:
        return self.kind.method

    @cached_property
    def adapter(self) -> TypeAdapter:
        return TypeAdapter(self.response)

    def check_preconditions(self, case: TestCase) -> None:
        if self.needs_cursor and case.cursor_pos is None:
            raise InvalidCursorPosition(self.kind.slug)

    def base_injections(self, case: TestCase) -> list[ParameterInjection]:
        injections: list[ParameterInjection] = []
        if self.text_document:
            injections.append(TextDocumentParam())
        if self.injects_cursor and case.cursor_pos is not None:
            injections.append(PositionParam(case.cursor_pos))
        return injections

    def decode(self, raw: str, expected: Any = None) -> Any:
        return decode_response(self.adapter, raw, self.lenient_empty)

    def compare(self, test_id: str, expected: Any, actual: Any) -> None:
        if not self.equal(expected, actual):
            raise self.mismatch(test_id, expected, actual)

    def mismatch(self, test_id: str, expected: Any, actual: Any) -> LspressoError:
        return ResponseMismatch(test_id, self.label, expected, actual)


KINDS: dict[RequestKind, KindSpec] = {}


def register(spec: KindSpec) -> KindSpec:
    KINDS[spec.kind] = spec
    return spec


def get_kind_spec(kind: RequestKind | str) -> KindSpec:
    if not isinstance(kind, RequestKind):
        kind = RequestKind.from_name(kind)
    return KINDS[kind]
