"""Kinds that can be checked either by their reply or by the resulting buffer."""

from dataclasses import dataclass
from typing import Any

from pydantic import TypeAdapter

from ..driver.injection import RawSubstitution
from .base import KindSpec, decode_response


@dataclass(frozen=True)
class EndState:
    """Expected buffer text after the edits have been applied."""

    text: str


@dataclass(frozen=True)
class Response:
    """Expected raw reply."""

    value: Any


StateOrResponse = EndState | Response

_TEXT = TypeAdapter(str)


class StateOrResponseKindSpec(KindSpec):
    """The expectation picks the mode: end state or raw response.

    `invoke_fn` is a Lua function taking the params table that performs the
    request and lets the editor apply its effects to the buffer.
    """

    def __init__(self, *args, invoke_fn: str, **kwargs):
        super().__init__(*args, **kwargs)
        self.invoke_fn = invoke_fn

    def mode_injections(self, expected: Any) -> list:
        end_state = isinstance(expected, EndState)
        return [
            RawSubstitution("INVOKE_ACTION", "true" if end_state else "false"),
            RawSubstitution("INVOKE_FN", self.invoke_fn),
        ]

    def decode(self, raw: str, expected: Any = None) -> Any:
        if isinstance(expected, EndState):
            return decode_response(_TEXT, raw)
        return super().decode(raw, expected)

    def compare(self, test_id: str, expected: Any, actual: Any) -> None:
        if isinstance(expected, EndState):
            expected = expected.text
        elif isinstance(expected, Response):
            expected = expected.value
        super().compare(test_id, expected, actual)
