"""Synthesis of the `init.lua` driver script handed to the editor."""

import logging
from functools import lru_cache
from importlib import resources
from typing import Iterable

from ..case import Immediate, Progress, StartupMode, TestCase
from ..layout import Layout
from .injection import ParameterInjection, RawSubstitution, assemble, lua_quote

logger = logging.getLogger(__name__)

HELPERS = "helpers.lua"
ATTACH = "attach.lua"
REQUEST_ACTION = "request_action.lua"
STATE_OR_RESPONSE_ACTION = "state_or_response_action.lua"
SEMANTIC_TOKENS_DELTA_ACTION = "semantic_tokens_full_delta_action.lua"
DIAGNOSTIC_AUTOCMD = "diagnostic_autocmd.lua"

FRAGMENTS = (REQUEST_ACTION, STATE_OR_RESPONSE_ACTION, SEMANTIC_TOKENS_DELTA_ACTION, DIAGNOSTIC_AUTOCMD)

_ACTION_INDENT = " " * 16


@lru_cache(maxsize=None)
def load_template(name: str) -> str:
    return resources.files(__package__).joinpath("lua", name).read_text(encoding="utf-8")


def lsp_action(start_type: StartupMode) -> str:
    """Body of the client's `on_attach` callback."""
    if isinstance(start_type, Immediate):
        return f"check_progress_result()\n{_ACTION_INDENT}vim.cmd('qa!')"
    if isinstance(start_type, Progress):
        token = lua_quote(start_type.token)
        lines = [
            "vim.lsp.handlers['$/progress'] = function(_, result, _)",
            f"    if client and result.value.kind == 'end' and result.token == {token} then",
            "        client.initialized = true",
            "        check_progress_result()",
            "    end",
            "end",
        ]
        return ("\n" + _ACTION_INDENT).join(lines)
    raise TypeError(f"Unknown startup mode: {start_type!r}")


def _quoted_path(value) -> str:
    # Substituted inside single-quoted Lua strings
    return str(value).replace("\\", "\\\\").replace("'", "\\'")


def standard_substitutions(case: TestCase, method: str, layout: Layout) -> list[RawSubstitution]:
    return [
        RawSubstitution("REQUEST_METHOD", method),
        RawSubstitution("RESULTS_FILE", _quoted_path(layout.results_file)),
        RawSubstitution("ERROR_PATH", _quoted_path(layout.error_file)),
        RawSubstitution("LOG_PATH", _quoted_path(layout.log_file)),
        RawSubstitution("EMPTY_PATH", _quoted_path(layout.empty_file)),
        RawSubstitution("TIMEOUT_PATH", _quoted_path(layout.timeout_file)),
        RawSubstitution("EXECUTABLE_PATH", _quoted_path(case.executable_path)),
        RawSubstitution("ROOT_PATH", _quoted_path(layout.root)),
        RawSubstitution("PARENT_PATH", _quoted_path(layout.src_dir)),
        RawSubstitution("FILE_EXTENSION", case.file_extension()),
        RawSubstitution("TIMEOUT_MS", str(max(1, int(case.timeout * 1000)))),
        RawSubstitution("PROGRESS_THRESHOLD", str(case.start_type.threshold)),
        RawSubstitution("COMMANDS", ""),
    ]


def build_init_script(
    case: TestCase,
    kind_spec,
    injections: Iterable[ParameterInjection] = (),
    layout: Layout | None = None,
) -> str:
    """Compose helpers, the kind's action fragment and the attach logic.

    Caller-supplied raw substitutions run before the standard ones, so a
    caller can fill slots such as `COMMANDS` that would otherwise be blanked.
    The params block replaces `PARAM_ASSIGN` last, after every placeholder
    has been filled, so JSON payloads are never rewritten.
    """
    layout = layout or case.layout
    layout.source_path(case.source_file.path)
    assembled = assemble(injections)

    fragment = kind_spec.fragment
    script = load_template(HELPERS) + load_template(fragment) + load_template(ATTACH)
    action = "" if fragment == DIAGNOSTIC_AUTOCMD else lsp_action(case.start_type)
    script = script.replace("LSP_ACTION", action)

    for sub in [*assembled.substitutions, *standard_substitutions(case, kind_spec.method, layout)]:
        script = script.replace(sub.placeholder, sub.replacement)
    script = script.replace("PARAM_ASSIGN", assembled.params_block)

    logger.debug(f"Built driver script for test {case.test_id} ({kind_spec.method})")
    return script
