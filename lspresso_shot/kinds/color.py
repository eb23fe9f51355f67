"""Color kinds: documentColor and colorPresentation."""

from ..driver.injection import DirectJson, RangeParam
from ..lsp.types import Color, ColorInformation, ColorPresentation, Range
from .base import KindSpec, RequestKind, register

DOCUMENT_COLOR = register(KindSpec(
    RequestKind.DOCUMENT_COLOR,
    "Document Color",
    list[ColorInformation],
))

COLOR_PRESENTATION = register(KindSpec(
    RequestKind.COLOR_PRESENTATION,
    "Color Presentation",
    list[ColorPresentation],
))


def color_presentation_injections(color: Color, range_: Range) -> list:
    return [DirectJson.of("color", color.to_lsp()), RangeParam(range_)]
