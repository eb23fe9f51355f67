"""Rewriting of workspace-local URIs in replies to workspace-relative paths.

Every function here is total and idempotent: a URI that does not point into
the test's `src/` directory, or that was already rewritten, is left alone.
"""

from typing import Any, Callable, TypeVar

from .layout import Layout
from .lsp.types import (
    CallHierarchyIncomingCall,
    CallHierarchyItem,
    CallHierarchyOutgoingCall,
    CodeAction,
    CreateFile,
    DeleteFile,
    Diagnostic,
    DocumentLink,
    FullDocumentDiagnosticReport,
    InlayHint,
    Location,
    LocationLink,
    RenameFile,
    SymbolInformation,
    TextDocumentEdit,
    TypeHierarchyItem,
    WorkspaceDiagnosticReport,
    WorkspaceEdit,
    WorkspaceSymbol,
)
from .utils.uri import uri_prefixes

T = TypeVar("T")


def clean_uri(uri: str, layout: Layout) -> str:
    for prefix in uri_prefixes(layout.src_dir):
        if uri.startswith(prefix):
            return uri[len(prefix):]
    return uri


def keep(value: T, layout: Layout) -> T:
    return value


def each(fn: Callable[[Any, Layout], Any]) -> Callable[[Any, Layout], Any]:
    """Lift a per-item normalizer over an optional list."""

    def normalize_all(values, layout: Layout):
        if values is None:
            return None
        return [fn(value, layout) for value in values]

    return normalize_all


def normalize_location(location: Location, layout: Layout) -> Location:
    return location.model_copy(update={"uri": clean_uri(location.uri, layout)})


def normalize_location_link(link: LocationLink, layout: Layout) -> LocationLink:
    return link.model_copy(update={"target_uri": clean_uri(link.target_uri, layout)})


normalize_locations = each(normalize_location)


def normalize_goto(response, layout: Layout):
    """Single location, list of locations, or list of location links."""
    if isinstance(response, Location):
        return normalize_location(response, layout)
    if isinstance(response, list):
        return [
            normalize_location_link(item, layout) if isinstance(item, LocationLink)
            else normalize_location(item, layout)
            for item in response
        ]
    return response


def normalize_call_hierarchy_item(item: CallHierarchyItem, layout: Layout) -> CallHierarchyItem:
    return item.model_copy(update={"uri": clean_uri(item.uri, layout)})


def normalize_incoming_call(call: CallHierarchyIncomingCall, layout: Layout) -> CallHierarchyIncomingCall:
    return call.model_copy(update={"from_": normalize_call_hierarchy_item(call.from_, layout)})


def normalize_outgoing_call(call: CallHierarchyOutgoingCall, layout: Layout) -> CallHierarchyOutgoingCall:
    return call.model_copy(update={"to": normalize_call_hierarchy_item(call.to, layout)})


def normalize_type_hierarchy_item(item: TypeHierarchyItem, layout: Layout) -> TypeHierarchyItem:
    return item.model_copy(update={"uri": clean_uri(item.uri, layout)})


def normalize_diagnostic(diagnostic: Diagnostic, layout: Layout) -> Diagnostic:
    if not diagnostic.related_information:
        return diagnostic
    related = [
        info.model_copy(update={"location": normalize_location(info.location, layout)})
        for info in diagnostic.related_information
    ]
    return diagnostic.model_copy(update={"related_information": related})


def normalize_document_link(link: DocumentLink, layout: Layout) -> DocumentLink:
    if link.target is None:
        return link
    return link.model_copy(update={"target": clean_uri(link.target, layout)})


def normalize_document_symbols(response, layout: Layout):
    """Flat symbol information carries locations; nested document symbols do not."""
    if isinstance(response, list):
        return [
            item.model_copy(update={"location": normalize_location(item.location, layout)})
            if isinstance(item, SymbolInformation) else item
            for item in response
        ]
    return response


def normalize_workspace_symbols(response, layout: Layout):
    if not isinstance(response, list):
        return response
    normalized = []
    for item in response:
        if isinstance(item, SymbolInformation):
            item = item.model_copy(update={"location": normalize_location(item.location, layout)})
        elif isinstance(item, WorkspaceSymbol):
            location = item.location
            if isinstance(location, Location):
                location = normalize_location(location, layout)
            else:
                location = location.model_copy(update={"uri": clean_uri(location.uri, layout)})
            item = item.model_copy(update={"location": location})
        normalized.append(item)
    return normalized


def _normalize_document_change(change, layout: Layout):
    if isinstance(change, TextDocumentEdit):
        document = change.text_document
        document = document.model_copy(update={"uri": clean_uri(document.uri, layout)})
        return change.model_copy(update={"text_document": document})
    if isinstance(change, (CreateFile, DeleteFile)):
        return change.model_copy(update={"uri": clean_uri(change.uri, layout)})
    if isinstance(change, RenameFile):
        return change.model_copy(update={
            "old_uri": clean_uri(change.old_uri, layout),
            "new_uri": clean_uri(change.new_uri, layout),
        })
    return change


def normalize_workspace_edit(edit: WorkspaceEdit, layout: Layout) -> WorkspaceEdit:
    update = {}
    if edit.changes is not None:
        update["changes"] = {clean_uri(uri, layout): edits for uri, edits in edit.changes.items()}
    if edit.document_changes is not None:
        update["document_changes"] = [
            _normalize_document_change(change, layout) for change in edit.document_changes
        ]
    return edit.model_copy(update=update) if update else edit


def normalize_inlay_hint(hint: InlayHint, layout: Layout) -> InlayHint:
    if not isinstance(hint.label, list):
        return hint
    parts = [
        part.model_copy(update={"location": normalize_location(part.location, layout)})
        if part.location is not None else part
        for part in hint.label
    ]
    return hint.model_copy(update={"label": parts})


def normalize_code_action(action, layout: Layout):
    """Commands pass through; code actions get their edit and diagnostics rewritten."""
    if not isinstance(action, CodeAction):
        return action
    update = {}
    if action.edit is not None:
        update["edit"] = normalize_workspace_edit(action.edit, layout)
    if action.diagnostics is not None:
        update["diagnostics"] = [normalize_diagnostic(d, layout) for d in action.diagnostics]
    return action.model_copy(update=update) if update else action


def _normalize_report_items(report, layout: Layout):
    if not isinstance(report, FullDocumentDiagnosticReport):
        return report
    return report.model_copy(update={"items": [normalize_diagnostic(d, layout) for d in report.items]})


def normalize_document_diagnostic_report(report, layout: Layout):
    report = _normalize_report_items(report, layout)
    if not report.related_documents:
        return report
    related = {
        clean_uri(uri, layout): _normalize_report_items(related_report, layout)
        for uri, related_report in report.related_documents.items()
    }
    return report.model_copy(update={"related_documents": related})


def normalize_workspace_diagnostic_report(
    report: WorkspaceDiagnosticReport, layout: Layout
) -> WorkspaceDiagnosticReport:
    items = [
        _normalize_report_items(item, layout).model_copy(update={"uri": clean_uri(item.uri, layout)})
        for item in report.items
    ]
    return report.model_copy(update={"items": items})
