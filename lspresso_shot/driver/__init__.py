"""Driver script synthesis for the editor subprocess."""

from .injection import (
    DestructureJson,
    DirectJson,
    DocumentInjections,
    Nested,
    ParameterInjection,
    PositionParam,
    RangeParam,
    RawSubstitution,
    TextDocumentParam,
    assemble,
)
from .script import build_init_script

__all__ = [
    "DestructureJson",
    "DirectJson",
    "DocumentInjections",
    "Nested",
    "ParameterInjection",
    "PositionParam",
    "RangeParam",
    "RawSubstitution",
    "TextDocumentParam",
    "assemble",
    "build_init_script",
]
