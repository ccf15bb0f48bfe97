"""Resolves configured field names against the AccuWork schema."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping

from lxml import etree

from accubridge_core.errors import InvalidCategoryFieldType, SchemaFieldNotFound
from accubridge_core.issues.models import FieldRole, SchemaInfo
from accubridge_core.reply import ReplyDocument

logger = logging.getLogger(__name__)

REQUIRED_ROLES = (
    FieldRole.ISSUE_ID,
    FieldRole.RELEASE,
    FieldRole.TITLE,
    FieldRole.DESCRIPTION,
    FieldRole.STATUS,
)

CHOOSE_FIELD_TYPE = "choose"


def _find_field(document: ReplyDocument, role: FieldRole, name: str | None) -> etree._Element:
    if not name:
        raise SchemaFieldNotFound(role.value, name)
    element = document.select_one("//field[@name=$name]", name=name)
    if element is None:
        raise SchemaFieldNotFound(role.value, name)
    return element


def _field_id(document: ReplyDocument, element: etree._Element, role: FieldRole) -> int:
    fid = document.attr(element, "fid")
    try:
        return int(fid)
    except ValueError:
        raise SchemaFieldNotFound(role.value, document.attr(element, "name")) from None


def _values(document: ReplyDocument, element: etree._Element) -> tuple[str, ...]:
    return tuple(document.text(v) for v in document.select_from(element, "./value"))


def resolve_schema(
    document: ReplyDocument,
    field_names: Mapping[FieldRole, str],
    category_field: str | None = None,
) -> SchemaInfo:
    """Map each required role to its numeric field ID.

    Raises SchemaFieldNotFound for the first role whose configured name is not
    a ``<field>`` in the schema, and InvalidCategoryFieldType when the
    category field is not a "Choose" field.
    """
    field_ids: dict[FieldRole, int] = {}
    valid_statuses: tuple[str, ...] = ()
    for role in REQUIRED_ROLES:
        element = _find_field(document, role, field_names.get(role))
        field_ids[role] = _field_id(document, element, role)
        if role is FieldRole.STATUS:
            valid_statuses = _values(document, element)

    category_id = None
    category_label = None
    category_values: tuple[str, ...] = ()
    if category_field:
        element = _find_field(document, FieldRole.CATEGORY, category_field)
        field_type = document.attr(element, "type")
        if field_type.lower() != CHOOSE_FIELD_TYPE:
            raise InvalidCategoryFieldType(category_field, field_type)
        category_id = _field_id(document, element, FieldRole.CATEGORY)
        category_label = document.attr(element, "label") or category_field
        category_values = _values(document, element)
        field_ids[FieldRole.CATEGORY] = category_id

    return SchemaInfo(
        field_ids=field_ids,
        valid_statuses=valid_statuses,
        category_field_id=category_id,
        category_display_name=category_label,
        valid_category_values=category_values,
    )


class SchemaCache:
    """Holds the first successfully resolved schema for a provider's lifetime.

    A failed resolution leaves the cache empty so the next call retries.
    Remote schema changes are not seen until a new cache is created.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._schema: SchemaInfo | None = None

    @property
    def value(self) -> SchemaInfo | None:
        return self._schema

    def get_or_resolve(self, resolve: Callable[[], SchemaInfo]) -> SchemaInfo:
        schema = self._schema
        if schema is not None:
            return schema
        with self._lock:
            if self._schema is None:
                self._schema = resolve()
                logger.debug("AccuWork schema resolved: %s", self._schema.field_ids)
            return self._schema
