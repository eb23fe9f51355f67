"""Completion kinds: completion and completionItem/resolve.

Completion expectations come in two shapes: `Exact`, compared strictly, and
`Contains`, satisfied when every expected item matches a distinct provided
item, regardless of order or the `isIncomplete` flag.
"""

from dataclasses import dataclass
from typing import Any

from ..compare import structurally_equal, to_jsonable
from ..driver.injection import DestructureJson
from ..errors import CompletionMismatch, ResponseMismatch
from ..lsp.types import CompletionItem, CompletionList, CompletionResponse
from .base import KindSpec, RequestKind, register


def completion_items(response: Any) -> list[CompletionItem]:
    if isinstance(response, CompletionList):
        return list(response.items)
    return list(response or [])


@dataclass(frozen=True)
class Exact:
    response: list[CompletionItem] | CompletionList


@dataclass(frozen=True)
class Contains:
    items: tuple[CompletionItem, ...]

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))

    def missing_from(self, actual: Any) -> list[CompletionItem]:
        available = [to_jsonable(item) for item in completion_items(actual)]
        missing = []
        for item in self.items:
            wanted = to_jsonable(item)
            for i, provided in enumerate(available):
                if provided == wanted:
                    del available[i]
                    break
            else:
                missing.append(item)
        return missing

    def satisfied_by(self, actual: Any) -> bool:
        return not self.missing_from(actual)


CompletionExpectation = Exact | Contains


class CompletionKindSpec(KindSpec):
    def compare(self, test_id: str, expected: Any, actual: Any) -> None:
        if isinstance(expected, Contains):
            missing = expected.missing_from(actual)
            if missing:
                raise CompletionMismatch(test_id, missing, completion_items(actual), expected, actual)
            return
        exact = expected.response if isinstance(expected, Exact) else expected
        if not structurally_equal(exact, actual):
            raise ResponseMismatch(test_id, self.label, exact, actual)


COMPLETION = register(CompletionKindSpec(
    RequestKind.COMPLETION,
    "Completion",
    CompletionResponse,
    needs_cursor=True,
))

COMPLETION_RESOLVE = register(KindSpec(
    RequestKind.COMPLETION_RESOLVE,
    "Completion Resolve",
    CompletionItem,
    text_document=False,
))


def completion_resolve_injections(item: CompletionItem) -> list:
    data = item.to_lsp()
    return [DestructureJson.of("completion_item", list(data), data)]
