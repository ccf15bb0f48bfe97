"""AccuWork ``xml -l`` query documents and result extraction."""

from __future__ import annotations

from lxml import etree

from accubridge_core.issues.models import FieldRole, Issue, SchemaInfo
from accubridge_core.reply import ReplyDocument


def field_condition(field_id: int, value: str) -> str:
    """Raw AccuWork boolean expression ``<fid> == "<value>"``."""
    return f'{field_id} == "{value}"'


def build_query_document(
    depot: str,
    release_condition: str | None = None,
    category_condition: str | None = None,
) -> bytes:
    """Serialize a ``queryIssue`` document.

    Two conditions are combined under ``AND``; a single condition is written
    as bare text; with none, every issue in the depot matches.
    """
    query = etree.Element("queryIssue", issueDB=depot)
    if release_condition is not None and category_condition is not None:
        query.set("useAltQuery", "false")
        conjunction = etree.SubElement(query, "AND")
        etree.SubElement(conjunction, "condition").text = release_condition
        etree.SubElement(conjunction, "condition").text = category_condition
    elif release_condition is not None:
        query.text = release_condition
    elif category_condition is not None:
        query.text = category_condition
    return etree.tostring(query, xml_declaration=False, encoding="utf-8")


def read_field_value(document: ReplyDocument, issue: etree._Element, field_id: int) -> str | None:
    matches = document.select_from(issue, "./*[@fid=$fid]", fid=str(field_id))
    if not matches:
        return None
    return document.text(matches[0])


def read_issues(document: ReplyDocument, schema: SchemaInfo, release: str | None) -> list[Issue]:
    """One Issue per ``<issue>`` element; *release* comes from the query."""
    issues = []
    for element in document.select("//issue"):
        issues.append(
            Issue(
                id=read_field_value(document, element, schema.field_id(FieldRole.ISSUE_ID)),
                status=read_field_value(document, element, schema.field_id(FieldRole.STATUS)),
                title=read_field_value(document, element, schema.field_id(FieldRole.TITLE)),
                description=read_field_value(
                    document, element, schema.field_id(FieldRole.DESCRIPTION)
                ),
                release=release,
            )
        )
    return issues
