"""Handler for rename requests."""

from ..driver.injection import DirectJson
from ..lsp.types import WorkspaceEdit
from ..normalize import normalize_workspace_edit
from .base import KindSpec, RequestKind, register

# Empty `changes` maps come back from the editor as `[]`
RENAME = register(KindSpec(
    RequestKind.RENAME,
    "Rename",
    WorkspaceEdit,
    needs_cursor=True,
    normalize=normalize_workspace_edit,
))


def rename_injections(new_name: str) -> list:
    return [DirectJson.of("newName", new_name)]
