from enum import Enum, IntEnum
from typing import Any, Literal
from pydantic import BaseModel, Field, ConfigDict


class LSPModel(BaseModel):
    """Base model with camelCase aliases, constructible by field name."""
    model_config = ConfigDict(populate_by_name=True)

    def to_lsp(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Position(LSPModel):
    line: int
    character: int


class Range(LSPModel):
    start: Position
    end: Position

    @classmethod
    def of(cls, start_line: int, start_char: int, end_line: int, end_char: int) -> "Range":
        return cls(
            start=Position(line=start_line, character=start_char),
            end=Position(line=end_line, character=end_char),
        )


class Location(LSPModel):
    uri: str
    range: Range


class LocationLink(LSPModel):
    origin_selection_range: Range | None = Field(default=None, alias="originSelectionRange")
    target_uri: str = Field(alias="targetUri")
    target_range: Range = Field(alias="targetRange")
    target_selection_range: Range = Field(alias="targetSelectionRange")


class TextDocumentIdentifier(LSPModel):
    uri: str


class OptionalVersionedTextDocumentIdentifier(TextDocumentIdentifier):
    version: int | None = None


class TextEdit(LSPModel):
    range: Range
    new_text: str = Field(alias="newText")
    annotation_id: str | None = Field(default=None, alias="annotationId")


class TextDocumentEdit(LSPModel):
    text_document: OptionalVersionedTextDocumentIdentifier = Field(alias="textDocument")
    edits: list[TextEdit]


class CreateFileOptions(LSPModel):
    overwrite: bool | None = None
    ignore_if_exists: bool | None = Field(default=None, alias="ignoreIfExists")


class CreateFile(LSPModel):
    kind: Literal["create"] = "create"
    uri: str
    options: CreateFileOptions | None = None
    annotation_id: str | None = Field(default=None, alias="annotationId")


class RenameFileOptions(LSPModel):
    overwrite: bool | None = None
    ignore_if_exists: bool | None = Field(default=None, alias="ignoreIfExists")


class RenameFile(LSPModel):
    kind: Literal["rename"] = "rename"
    old_uri: str = Field(alias="oldUri")
    new_uri: str = Field(alias="newUri")
    options: RenameFileOptions | None = None
    annotation_id: str | None = Field(default=None, alias="annotationId")


class DeleteFileOptions(LSPModel):
    recursive: bool | None = None
    ignore_if_not_exists: bool | None = Field(default=None, alias="ignoreIfNotExists")


class DeleteFile(LSPModel):
    kind: Literal["delete"] = "delete"
    uri: str
    options: DeleteFileOptions | None = None
    annotation_id: str | None = Field(default=None, alias="annotationId")


class ChangeAnnotation(LSPModel):
    label: str
    needs_confirmation: bool | None = Field(default=None, alias="needsConfirmation")
    description: str | None = None


DocumentChange = TextDocumentEdit | CreateFile | RenameFile | DeleteFile


class WorkspaceEdit(LSPModel):
    changes: dict[str, list[TextEdit]] | None = None
    document_changes: list[DocumentChange] | None = Field(default=None, alias="documentChanges")
    change_annotations: dict[str, ChangeAnnotation] | None = Field(
        default=None, alias="changeAnnotations"
    )


class Command(LSPModel):
    title: str
    command: str
    arguments: list[Any] | None = None


class SymbolKind(IntEnum):
    File = 1
    Module = 2
    Namespace = 3
    Package = 4
    Class = 5
    Method = 6
    Property = 7
    Field = 8
    Constructor = 9
    Enum = 10
    Interface = 11
    Function = 12
    Variable = 13
    Constant = 14
    String = 15
    Number = 16
    Boolean = 17
    Array = 18
    Object = 19
    Key = 20
    Null = 21
    EnumMember = 22
    Struct = 23
    Event = 24
    Operator = 25
    TypeParameter = 26


class SymbolInformation(LSPModel):
    name: str
    kind: SymbolKind
    tags: list[int] | None = None
    deprecated: bool | None = None
    location: Location
    container_name: str | None = Field(default=None, alias="containerName")


class DocumentSymbol(LSPModel):
    name: str
    detail: str | None = None
    kind: SymbolKind
    tags: list[int] | None = None
    deprecated: bool | None = None
    range: Range
    selection_range: Range = Field(alias="selectionRange")
    children: list["DocumentSymbol"] | None = None


class WorkspaceSymbolLocation(LSPModel):
    uri: str


class WorkspaceSymbol(LSPModel):
    name: str
    kind: SymbolKind
    tags: list[int] | None = None
    container_name: str | None = Field(default=None, alias="containerName")
    location: Location | WorkspaceSymbolLocation
    data: Any | None = None


class DiagnosticSeverity(IntEnum):
    Error = 1
    Warning = 2
    Information = 3
    Hint = 4


class DiagnosticRelatedInformation(LSPModel):
    location: Location
    message: str


class CodeDescription(LSPModel):
    href: str


class Diagnostic(LSPModel):
    range: Range
    severity: DiagnosticSeverity | None = None
    code: int | str | None = None
    code_description: CodeDescription | None = Field(default=None, alias="codeDescription")
    source: str | None = None
    message: str
    tags: list[int] | None = None
    related_information: list[DiagnosticRelatedInformation] | None = Field(
        default=None, alias="relatedInformation"
    )
    data: Any | None = None


class MarkupKind(str, Enum):
    PlainText = "plaintext"
    Markdown = "markdown"


class MarkupContent(LSPModel):
    kind: MarkupKind
    value: str


class LanguageString(LSPModel):
    language: str
    value: str


MarkedString = str | LanguageString


class Hover(LSPModel):
    contents: MarkupContent | MarkedString | list[MarkedString]
    range: Range | None = None


class CompletionItemKind(IntEnum):
    Text = 1
    Method = 2
    Function = 3
    Constructor = 4
    Field = 5
    Variable = 6
    Class = 7
    Interface = 8
    Module = 9
    Property = 10
    Unit = 11
    Value = 12
    Enum = 13
    Keyword = 14
    Snippet = 15
    Color = 16
    File = 17
    Reference = 18
    Folder = 19
    EnumMember = 20
    Constant = 21
    Struct = 22
    Event = 23
    Operator = 24
    TypeParameter = 25


class CompletionItemLabelDetails(LSPModel):
    detail: str | None = None
    description: str | None = None


class InsertReplaceEdit(LSPModel):
    new_text: str = Field(alias="newText")
    insert: Range
    replace: Range


class CompletionItem(LSPModel):
    label: str
    label_details: CompletionItemLabelDetails | None = Field(default=None, alias="labelDetails")
    kind: CompletionItemKind | None = None
    tags: list[int] | None = None
    detail: str | None = None
    documentation: MarkupContent | str | None = None
    deprecated: bool | None = None
    preselect: bool | None = None
    sort_text: str | None = Field(default=None, alias="sortText")
    filter_text: str | None = Field(default=None, alias="filterText")
    insert_text: str | None = Field(default=None, alias="insertText")
    insert_text_format: int | None = Field(default=None, alias="insertTextFormat")
    insert_text_mode: int | None = Field(default=None, alias="insertTextMode")
    text_edit: TextEdit | InsertReplaceEdit | None = Field(default=None, alias="textEdit")
    text_edit_text: str | None = Field(default=None, alias="textEditText")
    additional_text_edits: list[TextEdit] | None = Field(default=None, alias="additionalTextEdits")
    commit_characters: list[str] | None = Field(default=None, alias="commitCharacters")
    command: Command | None = None
    data: Any | None = None


class CompletionList(LSPModel):
    is_incomplete: bool = Field(alias="isIncomplete")
    item_defaults: dict[str, Any] | None = Field(default=None, alias="itemDefaults")
    items: list[CompletionItem]


class ParameterInformation(LSPModel):
    label: str | tuple[int, int]
    documentation: MarkupContent | str | None = None


class SignatureInformation(LSPModel):
    label: str
    documentation: MarkupContent | str | None = None
    parameters: list[ParameterInformation] | None = None
    active_parameter: int | None = Field(default=None, alias="activeParameter")


class SignatureHelp(LSPModel):
    signatures: list[SignatureInformation]
    active_signature: int | None = Field(default=None, alias="activeSignature")
    active_parameter: int | None = Field(default=None, alias="activeParameter")


class SignatureHelpTriggerKind(IntEnum):
    Invoked = 1
    TriggerCharacter = 2
    ContentChange = 3


class SignatureHelpContext(LSPModel):
    trigger_kind: SignatureHelpTriggerKind = Field(alias="triggerKind")
    trigger_character: str | None = Field(default=None, alias="triggerCharacter")
    is_retrigger: bool = Field(alias="isRetrigger")
    active_signature_help: SignatureHelp | None = Field(default=None, alias="activeSignatureHelp")


class FormattingOptions(LSPModel, extra="allow"):
    tab_size: int = Field(alias="tabSize")
    insert_spaces: bool = Field(alias="insertSpaces")
    trim_trailing_whitespace: bool | None = Field(default=None, alias="trimTrailingWhitespace")
    insert_final_newline: bool | None = Field(default=None, alias="insertFinalNewline")
    trim_final_newlines: bool | None = Field(default=None, alias="trimFinalNewlines")


class CallHierarchyItem(LSPModel):
    name: str
    kind: SymbolKind
    tags: list[int] | None = None
    detail: str | None = None
    uri: str
    range: Range
    selection_range: Range = Field(alias="selectionRange")
    data: Any | None = None


class CallHierarchyIncomingCall(LSPModel):
    from_: CallHierarchyItem = Field(alias="from")
    from_ranges: list[Range] = Field(alias="fromRanges")


class CallHierarchyOutgoingCall(LSPModel):
    to: CallHierarchyItem
    from_ranges: list[Range] = Field(alias="fromRanges")


class TypeHierarchyItem(LSPModel):
    name: str
    kind: SymbolKind
    tags: list[int] | None = None
    detail: str | None = None
    uri: str
    range: Range
    selection_range: Range = Field(alias="selectionRange")
    data: Any | None = None


class CodeLens(LSPModel):
    range: Range
    command: Command | None = None
    data: Any | None = None


class DocumentHighlightKind(IntEnum):
    Text = 1
    Read = 2
    Write = 3


class DocumentHighlight(LSPModel):
    range: Range
    kind: DocumentHighlightKind | None = None


class DocumentLink(LSPModel):
    range: Range
    target: str | None = None
    tooltip: str | None = None
    data: Any | None = None


class FoldingRange(LSPModel):
    start_line: int = Field(alias="startLine")
    start_character: int | None = Field(default=None, alias="startCharacter")
    end_line: int = Field(alias="endLine")
    end_character: int | None = Field(default=None, alias="endCharacter")
    kind: str | None = None
    collapsed_text: str | None = Field(default=None, alias="collapsedText")


class SelectionRange(LSPModel):
    range: Range
    parent: "SelectionRange | None" = None


class SemanticTokens(LSPModel):
    result_id: str | None = Field(default=None, alias="resultId")
    data: list[int]


class SemanticTokensEdit(LSPModel):
    start: int
    delete_count: int = Field(alias="deleteCount")
    data: list[int] | None = None


class SemanticTokensDelta(LSPModel):
    result_id: str | None = Field(default=None, alias="resultId")
    edits: list[SemanticTokensEdit]


class InlayHintLabelPart(LSPModel):
    value: str
    tooltip: MarkupContent | str | None = None
    location: Location | None = None
    command: Command | None = None


class InlayHintKind(IntEnum):
    Type = 1
    Parameter = 2


class InlayHint(LSPModel):
    position: Position
    label: str | list[InlayHintLabelPart]
    kind: InlayHintKind | None = None
    text_edits: list[TextEdit] | None = Field(default=None, alias="textEdits")
    tooltip: MarkupContent | str | None = None
    padding_left: bool | None = Field(default=None, alias="paddingLeft")
    padding_right: bool | None = Field(default=None, alias="paddingRight")
    data: Any | None = None


class CodeActionTriggerKind(IntEnum):
    Invoked = 1
    Automatic = 2


class CodeActionContext(LSPModel):
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    only: list[str] | None = None
    trigger_kind: CodeActionTriggerKind | None = Field(default=None, alias="triggerKind")


class CodeActionDisabled(LSPModel):
    reason: str


class CodeAction(LSPModel):
    title: str
    kind: str | None = None
    diagnostics: list[Diagnostic] | None = None
    is_preferred: bool | None = Field(default=None, alias="isPreferred")
    disabled: CodeActionDisabled | None = None
    edit: WorkspaceEdit | None = None
    command: Command | None = None
    data: Any | None = None


# Pull diagnostics. `kind` tags the report variant.

class FullDocumentDiagnosticReport(LSPModel):
    kind: Literal["full"] = "full"
    result_id: str | None = Field(default=None, alias="resultId")
    items: list[Diagnostic]


class UnchangedDocumentDiagnosticReport(LSPModel):
    kind: Literal["unchanged"] = "unchanged"
    result_id: str = Field(alias="resultId")


RelatedDocuments = dict[str, FullDocumentDiagnosticReport | UnchangedDocumentDiagnosticReport]


class RelatedFullDocumentDiagnosticReport(FullDocumentDiagnosticReport):
    related_documents: RelatedDocuments | None = Field(default=None, alias="relatedDocuments")


class RelatedUnchangedDocumentDiagnosticReport(UnchangedDocumentDiagnosticReport):
    related_documents: RelatedDocuments | None = Field(default=None, alias="relatedDocuments")


class WorkspaceFullDocumentDiagnosticReport(FullDocumentDiagnosticReport):
    uri: str
    version: int | None = None


class WorkspaceUnchangedDocumentDiagnosticReport(UnchangedDocumentDiagnosticReport):
    uri: str
    version: int | None = None


class WorkspaceDiagnosticReport(LSPModel):
    items: list[WorkspaceFullDocumentDiagnosticReport | WorkspaceUnchangedDocumentDiagnosticReport]


class PreviousResultId(LSPModel):
    uri: str
    value: str


class Color(LSPModel):
    red: float
    green: float
    blue: float
    alpha: float


class ColorInformation(LSPModel):
    range: Range
    color: Color


class ColorPresentation(LSPModel):
    label: str
    text_edit: TextEdit | None = Field(default=None, alias="textEdit")
    additional_text_edits: list[TextEdit] | None = Field(default=None, alias="additionalTextEdits")


class LinkedEditingRanges(LSPModel):
    ranges: list[Range]
    word_pattern: str | None = Field(default=None, alias="wordPattern")


class UniquenessLevel(str, Enum):
    Document = "document"
    Project = "project"
    Group = "group"
    Scheme = "scheme"
    Global = "global"


class MonikerKind(str, Enum):
    Import = "import"
    Export = "export"
    Local = "local"


class Moniker(LSPModel):
    scheme: str
    identifier: str
    unique: UniquenessLevel
    kind: MonikerKind | None = None


# =============================================================================
# LSP Response Type Aliases
# =============================================================================

GotoResponse = Location | list[Location] | list[LocationLink]
CompletionResponse = list[CompletionItem] | CompletionList
DocumentSymbolResponse = list[DocumentSymbol] | list[SymbolInformation]
WorkspaceSymbolResponse = list[SymbolInformation] | list[WorkspaceSymbol]
SemanticTokensFullDeltaResponse = SemanticTokens | SemanticTokensDelta
CodeActionResponse = list[Command | CodeAction]
DocumentDiagnosticReport = RelatedFullDocumentDiagnosticReport | RelatedUnchangedDocumentDiagnosticReport
