"""Handler for hover requests."""

from ..lsp.types import Hover
from .base import KindSpec, RequestKind, register

HOVER = register(KindSpec(RequestKind.HOVER, "Hover", Hover, needs_cursor=True))
