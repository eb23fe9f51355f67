"""Handler for selection range requests."""

from ..driver.injection import DirectJson
from ..lsp.types import Position, SelectionRange
from .base import KindSpec, RequestKind, register

# Takes a list of positions rather than a single `position` field
SELECTION_RANGE = register(KindSpec(
    RequestKind.SELECTION_RANGE,
    "Selection Range",
    list[SelectionRange],
    needs_cursor=True,
    injects_cursor=False,
))


def selection_range_injections(positions: list[Position]) -> list:
    return [DirectJson.of("positions", [position.to_lsp() for position in positions])]
