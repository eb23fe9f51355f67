"""Call hierarchy kinds: prepare, incoming calls, outgoing calls."""

from ..driver.injection import DestructureJson
from ..lsp.types import CallHierarchyIncomingCall, CallHierarchyItem, CallHierarchyOutgoingCall
from ..normalize import (
    each,
    normalize_call_hierarchy_item,
    normalize_incoming_call,
    normalize_outgoing_call,
)
from .base import KindSpec, RequestKind, register

PREPARE_CALL_HIERARCHY = register(KindSpec(
    RequestKind.PREPARE_CALL_HIERARCHY,
    "Prepare Call Hierarchy",
    list[CallHierarchyItem],
    needs_cursor=True,
    normalize=each(normalize_call_hierarchy_item),
))

INCOMING_CALLS = register(KindSpec(
    RequestKind.INCOMING_CALLS,
    "Incoming Calls",
    list[CallHierarchyIncomingCall],
    text_document=False,
    normalize=each(normalize_incoming_call),
))

OUTGOING_CALLS = register(KindSpec(
    RequestKind.OUTGOING_CALLS,
    "Outgoing Calls",
    list[CallHierarchyOutgoingCall],
    text_document=False,
    normalize=each(normalize_outgoing_call),
))


def call_item_injections(item: CallHierarchyItem) -> list:
    return [DestructureJson.of("call_hierarchy", ["item"], {"item": item.to_lsp()})]
