"""Document link kinds: documentLink and documentLink/resolve."""

from ..driver.injection import DestructureJson
from ..lsp.types import DocumentLink
from ..normalize import each, normalize_document_link
from .base import KindSpec, RequestKind, register

DOCUMENT_LINK = register(KindSpec(
    RequestKind.DOCUMENT_LINK,
    "Document Link",
    list[DocumentLink],
    normalize=each(normalize_document_link),
))

DOCUMENT_LINK_RESOLVE = register(KindSpec(
    RequestKind.DOCUMENT_LINK_RESOLVE,
    "Document Link Resolve",
    DocumentLink,
    text_document=False,
    normalize=normalize_document_link,
))


def document_link_injections(link: DocumentLink) -> list:
    data = link.to_lsp()
    return [DestructureJson.of("document_link", list(data), data)]
