"""Type hierarchy kinds: prepare, supertypes, subtypes."""

from ..driver.injection import DestructureJson
from ..lsp.types import TypeHierarchyItem
from ..normalize import each, normalize_type_hierarchy_item
from .base import KindSpec, RequestKind, register

PREPARE_TYPE_HIERARCHY = register(KindSpec(
    RequestKind.PREPARE_TYPE_HIERARCHY,
    "Prepare Type Hierarchy",
    list[TypeHierarchyItem],
    needs_cursor=True,
    normalize=each(normalize_type_hierarchy_item),
))

TYPE_HIERARCHY_SUPERTYPES = register(KindSpec(
    RequestKind.TYPE_HIERARCHY_SUPERTYPES,
    "Type Hierarchy Supertypes",
    list[TypeHierarchyItem],
    text_document=False,
    normalize=each(normalize_type_hierarchy_item),
))

TYPE_HIERARCHY_SUBTYPES = register(KindSpec(
    RequestKind.TYPE_HIERARCHY_SUBTYPES,
    "Type Hierarchy Subtypes",
    list[TypeHierarchyItem],
    text_document=False,
    normalize=each(normalize_type_hierarchy_item),
))


def type_item_injections(item: TypeHierarchyItem) -> list:
    return [DestructureJson.of("type_hierarchy", ["item"], {"item": item.to_lsp()})]
