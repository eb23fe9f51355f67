"""Handler for references requests."""

from ..driver.injection import DirectJson, Nested
from ..lsp.types import Location
from ..normalize import normalize_locations
from .base import KindSpec, RequestKind, register

REFERENCES = register(KindSpec(
    RequestKind.REFERENCES,
    "References",
    list[Location],
    needs_cursor=True,
    normalize=normalize_locations,
))


def reference_injections(include_declaration: bool) -> list:
    return [Nested("context", (DirectJson.of("includeDeclaration", include_declaration),))]
