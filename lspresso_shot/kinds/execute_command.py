"""Handler for workspace/executeCommand requests."""

from typing import Any

from ..driver.injection import DestructureJson, RawSubstitution, lua_quote
from ..driver.script import STATE_OR_RESPONSE_ACTION
from .base import RequestKind, register
from .state import StateOrResponseKindSpec

# In end-state mode the server applies its edits through workspace/applyEdit
# while the request is in flight.
EXECUTE_COMMAND = register(StateOrResponseKindSpec(
    RequestKind.EXECUTE_COMMAND,
    "Execute Command",
    Any,
    fragment=STATE_OR_RESPONSE_ACTION,
    text_document=False,
    invoke_fn="function(p) vim.lsp.buf_request_sync(0, 'workspace/executeCommand', p, TIMEOUT_MS) end",
))


def execute_command_injections(command: str, arguments: list | None, commands: list[str] | None) -> list:
    payload: dict[str, Any] = {"command": command}
    if arguments is not None:
        payload["arguments"] = arguments
    injections: list = [DestructureJson.of("execute_command", list(payload), payload)]
    if commands:
        injections.append(RawSubstitution("COMMANDS", ", ".join(lua_quote(c) for c in commands)))
    return injections
