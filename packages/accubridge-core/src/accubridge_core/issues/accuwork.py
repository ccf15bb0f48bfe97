"""AccuWork issue tracking provider built on the accurev command-line client."""

from __future__ import annotations

import logging
import os
import tempfile

from accubridge_core.client import AccuRevClient
from accubridge_core.config.models import AccuWorkConfig
from accubridge_core.issues.base import IssueTrackingProvider
from accubridge_core.issues.models import Category, FieldRole, Issue, SchemaInfo
from accubridge_core.issues.query import build_query_document, field_condition, read_issues
from accubridge_core.issues.schema import SchemaCache, resolve_schema

logger = logging.getLogger(__name__)


class AccuWorkProvider(IssueTrackingProvider):
    """Queries AccuWork issues through ``accurev xml``.

    Field names from the config are resolved to numeric field IDs once per
    provider instance.
    """

    def __init__(self, client: AccuRevClient, config: AccuWorkConfig) -> None:
        self.client = client
        self.config = config
        self._schema = SchemaCache()

    @property
    def field_names(self) -> dict[FieldRole, str]:
        fields = self.config.fields
        return {
            FieldRole.ISSUE_ID: fields.issue_id,
            FieldRole.RELEASE: fields.release,
            FieldRole.TITLE: fields.title,
            FieldRole.DESCRIPTION: fields.description,
            FieldRole.STATUS: fields.status,
        }

    def ensure_schema(self) -> SchemaInfo:
        """Log in and return the cached schema, fetching it on first use."""
        self.client.login()
        return self._schema.get_or_resolve(self._fetch_schema)

    def _fetch_schema(self) -> SchemaInfo:
        document = self.client.call("getconfig", "-p", self.config.depot, "-r", "schema.xml")
        return resolve_schema(document, self.field_names, self.config.filter_category)

    @property
    def category_type_names(self) -> list[str]:
        if not self.config.filter_category:
            return []
        schema = self.ensure_schema()
        return [schema.category_display_name or self.config.filter_category]

    def is_available(self) -> bool:
        return self.client.is_available()

    def validate_connection(self) -> None:
        self.ensure_schema()

    def query_issues(self, release: str | None = None, category: str | None = None) -> list[Issue]:
        """Issues matching the optional release and category filters.

        Filtering by *category* requires ``accuwork.filter_category``.
        """
        if category and not self.config.filter_category:
            raise ValueError(
                f"Cannot filter by category {category!r}: accuwork.filter_category is not configured."
            )
        schema = self.ensure_schema()

        release_condition = (
            field_condition(schema.field_id(FieldRole.RELEASE), release) if release else None
        )
        category_condition = None
        if category:
            category_condition = field_condition(schema.field_id(FieldRole.CATEGORY), category)

        query = build_query_document(self.config.depot, release_condition, category_condition)
        fd, query_path = tempfile.mkstemp(prefix="accubridge-query-", suffix=".xml")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(query)
            document = self.client.call("xml", "-l", query_path)
        finally:
            os.unlink(query_path)

        issues = read_issues(document, schema, release)
        logger.info("AccuWork returned %d issue(s) for release %r", len(issues), release)
        return issues

    def get_issues(self, release_number: str | None) -> list[Issue]:
        category = None
        if self.config.filter_category and self.config.category_id_filter:
            category = self.config.category_id_filter[0]
        return self.query_issues(release_number, category)

    def is_issue_closed(self, issue: Issue) -> bool:
        if not self.config.closed_statuses:
            return False
        return issue.status in self.config.closed_statuses

    def get_categories(self) -> list[Category]:
        if not self.config.filter_category:
            return []
        schema = self.ensure_schema()
        return [Category(id=name, name=name) for name in schema.valid_category_values]
