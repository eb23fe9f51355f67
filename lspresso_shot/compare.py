"""Field-by-field rendering of expected vs actual responses."""

import json
from typing import Any

import click
from pydantic import BaseModel

_MISSING = object()


def to_jsonable(value: Any) -> Any:
    """Convert models (and containers of models) into their LSP JSON form."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    return value


def structurally_equal(expected: Any, actual: Any) -> bool:
    return to_jsonable(expected) == to_jsonable(actual)


def _show(value: Any) -> str:
    if value is _MISSING:
        return "<missing>"
    return json.dumps(value, sort_keys=True)


def _leaf(lines: list[str], name: str, expected: Any, actual: Any, depth: int) -> None:
    padding = "  " * depth
    label = f"{name}: " if name else ""
    if expected == actual:
        lines.append(padding + label + click.style(_show(expected), fg="green"))
    else:
        if label:
            lines.append(padding + label.rstrip())
        lines.append(click.style(f"{padding}  Expected: {_show(expected)}", fg="red"))
        lines.append(click.style(f"{padding}  Actual: {_show(actual)}", fg="red"))


def _compare(lines: list[str], name: str, expected: Any, actual: Any, depth: int) -> None:
    padding = "  " * depth
    if isinstance(expected, dict) and isinstance(actual, dict):
        if name:
            lines.append(f"{padding}{name}:")
            depth += 1
            padding = "  " * depth
        for key in sorted(expected):
            _compare(lines, key, expected[key], actual.get(key, _MISSING), depth)
        extra = sorted(set(actual) - set(expected))
        if extra:
            lines.append(click.style(f"{padding}Actual has extra keys:", fg="red"))
            for key in extra:
                lines.append(click.style(f"{padding}  {key}: {_show(actual[key])}", fg="red"))
    elif isinstance(expected, list) and isinstance(actual, list):
        if name:
            lines.append(f"{padding}{name}:")
            depth += 1
        for i in range(max(len(expected), len(actual))):
            e = expected[i] if i < len(expected) else _MISSING
            a = actual[i] if i < len(actual) else _MISSING
            _compare(lines, f"[{i}]", e, a, depth)
    else:
        _leaf(lines, name, expected, actual, depth)


def write_fields_comparison(expected: Any, actual: Any) -> str:
    """Render a colorized comparison of two values.

    Matching leaves are green, differing ones red with both sides shown. Dict
    keys are visited in sorted order; keys present only in `actual` are listed
    at the end of their object.
    """
    lines: list[str] = []
    _compare(lines, "", to_jsonable(expected), to_jsonable(actual), 0)
    return "\n".join(lines) + "\n"


def render_items(items: list, fg: str) -> str:
    lines = []
    for item in items:
        text = json.dumps(to_jsonable(item), indent=2, sort_keys=True)
        lines.append(click.style(text, fg=fg))
    return "\n".join(lines) + ("\n" if lines else "")
