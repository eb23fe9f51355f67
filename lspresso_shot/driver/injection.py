"""Typed contributions to the `params` table built by the driver script.

Each injection turns into Lua statements that run inside the driver right
before the request is issued. Every field assignment is guarded by an
assertion that the field is still unset, so two injections targeting the same
key abort the driver instead of silently overwriting each other.
"""

import itertools
import json
from dataclasses import dataclass, field
from typing import Any, Iterable

from ..lsp.types import Position, Range

PARAMS_TABLE = "params"
INDENT = "    "


@dataclass(frozen=True)
class TextDocumentParam:
    """`textDocument` identifier of the opened buffer."""

    name: str = "textDocument"


@dataclass(frozen=True)
class PositionParam:
    position: Position
    name: str = "position"


@dataclass(frozen=True)
class RangeParam:
    range: Range
    name: str = "range"


@dataclass(frozen=True)
class DirectJson:
    """Decode `json` at driver run time and assign it to `name`."""

    name: str
    json: str

    @classmethod
    def of(cls, name: str, value: Any) -> "DirectJson":
        return cls(name, json.dumps(value))


@dataclass(frozen=True)
class DestructureJson:
    """Decode `json` once and copy each of `fields` onto the enclosing table."""

    name: str
    fields: tuple[str, ...]
    json: str

    @classmethod
    def of(cls, name: str, fields: Iterable[str], value: Any) -> "DestructureJson":
        return cls(name, tuple(fields), json.dumps(value))


@dataclass(frozen=True)
class Nested:
    name: str
    fields: tuple["ParameterInjection", ...] = ()


@dataclass(frozen=True)
class RawSubstitution:
    """Plain textual replacement of `placeholder` in the driver template."""

    placeholder: str
    replacement: str


ParameterInjection = (
    TextDocumentParam | PositionParam | RangeParam | DirectJson | DestructureJson | Nested | RawSubstitution
)


@dataclass
class DocumentInjections:
    params_block: str = ""
    substitutions: list[RawSubstitution] = field(default_factory=list)


def lua_string(text: str) -> str:
    """Quote `text` as a Lua long-bracket literal that cannot be closed early.

    The opening bracket is followed by a newline, which Lua discards, so text
    beginning with a newline keeps it.
    """
    level = 0
    while True:
        close = "]" + "=" * level + "]"
        if (text + close).find(close) == len(text):
            break
        level += 1
    return "[" + "=" * level + "[\n" + text + close


def lua_quote(text: str) -> str:
    """Quote `text` as a double-quoted Lua string using only ASCII."""
    out = []
    for byte in text.encode("utf-8"):
        if byte in (0x22, 0x5C):
            out.append("\\" + chr(byte))
        elif 0x20 <= byte < 0x7F:
            out.append(chr(byte))
        else:
            out.append(f"\\{byte:03d}")
    return '"' + "".join(out) + '"'


def lua_position(position: Position) -> str:
    return f"{{ line = {position.line}, character = {position.character} }}"


def lua_range(range_: Range) -> str:
    return f"{{ start = {lua_position(range_.start)}, ['end'] = {lua_position(range_.end)} }}"


class _Assembler:
    def __init__(self):
        self.lines: list[str] = []
        self.substitutions: list[RawSubstitution] = []
        self._ids = itertools.count(1)

    def local(self, prefix: str) -> str:
        return f"{prefix}_{next(self._ids)}"

    def emit(self, line: str) -> None:
        self.lines.append(INDENT + line)

    def assign(self, table: str, name: str, value: str) -> None:
        key = f"[{lua_quote(name)}]"
        self.emit(f"assert({table}{key} == nil, {lua_quote(f'{table}.{name} is already set')})")
        self.emit(f"{table}{key} = {value}")

    def apply(self, table: str, injection: ParameterInjection) -> None:
        if isinstance(injection, TextDocumentParam):
            self.assign(table, injection.name, "vim.lsp.util.make_text_document_params(0)")
        elif isinstance(injection, PositionParam):
            self.assign(table, injection.name, lua_position(injection.position))
        elif isinstance(injection, RangeParam):
            self.assign(table, injection.name, lua_range(injection.range))
        elif isinstance(injection, DirectJson):
            local = self.local("json")
            self.emit(f"local {local} = vim.json.decode({lua_string(injection.json)})")
            self.assign(table, injection.name, local)
        elif isinstance(injection, DestructureJson):
            local = self.local(_identifier(injection.name))
            self.emit(f"local {local} = vim.json.decode({lua_string(injection.json)})")
            for name in injection.fields:
                self.assign(table, name, f"{local}[{lua_quote(name)}]")
        elif isinstance(injection, Nested):
            local = self.local(_identifier(injection.name))
            self.emit(f"local {local} = {{}}")
            for inner in injection.fields:
                self.apply(local, inner)
            self.assign(table, injection.name, local)
        elif isinstance(injection, RawSubstitution):
            self.substitutions.append(injection)
        else:
            raise TypeError(f"Unknown parameter injection: {injection!r}")


def _identifier(name: str) -> str:
    cleaned = "".join(c if c.isascii() and (c.isalnum() or c == "_") else "_" for c in name)
    return cleaned if cleaned and not cleaned[0].isdigit() else f"v_{cleaned}"


def assemble(injections: Iterable[ParameterInjection]) -> DocumentInjections:
    assembler = _Assembler()
    for injection in injections:
        assembler.apply(PARAMS_TABLE, injection)
    return DocumentInjections(
        params_block="\n".join(assembler.lines),
        substitutions=assembler.substitutions,
    )
