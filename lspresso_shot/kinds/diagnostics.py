"""Diagnostic kinds.

Published diagnostics arrive through an autocommand after the server pushes
them; document and workspace diagnostics are pulled with a regular request.
"""

from ..driver.injection import DirectJson
from ..driver.script import DIAGNOSTIC_AUTOCMD
from ..lsp.types import Diagnostic, DocumentDiagnosticReport, PreviousResultId, WorkspaceDiagnosticReport
from ..normalize import (
    each,
    normalize_diagnostic,
    normalize_document_diagnostic_report,
    normalize_workspace_diagnostic_report,
)
from .base import KindSpec, RequestKind, register

DIAGNOSTICS = register(KindSpec(
    RequestKind.DIAGNOSTICS,
    "Diagnostics",
    list[Diagnostic],
    fragment=DIAGNOSTIC_AUTOCMD,
    text_document=False,
    normalize=each(normalize_diagnostic),
))

DOCUMENT_DIAGNOSTIC = register(KindSpec(
    RequestKind.DOCUMENT_DIAGNOSTIC,
    "Document Diagnostic",
    DocumentDiagnosticReport,
    normalize=normalize_document_diagnostic_report,
))

WORKSPACE_DIAGNOSTIC = register(KindSpec(
    RequestKind.WORKSPACE_DIAGNOSTIC,
    "Workspace Diagnostic",
    WorkspaceDiagnosticReport,
    text_document=False,
    normalize=normalize_workspace_diagnostic_report,
))


def document_diagnostic_injections(identifier: str | None, previous_result_id: str | None) -> list:
    injections = []
    if identifier is not None:
        injections.append(DirectJson.of("identifier", identifier))
    if previous_result_id is not None:
        injections.append(DirectJson.of("previousResultId", previous_result_id))
    return injections


def workspace_diagnostic_injections(
    identifier: str | None,
    previous_result_ids: list[PreviousResultId] | None,
) -> list:
    injections = []
    if identifier is not None:
        injections.append(DirectJson.of("identifier", identifier))
    ids = [result_id.to_lsp() for result_id in previous_result_ids or []]
    injections.append(DirectJson.of("previousResultIds", ids))
    return injections
