"""Data models for AccuWork issue tracking."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel


class FieldRole(str, Enum):
    """Logical roles a configured AccuWork field can play."""

    ISSUE_ID = "Issue ID"
    RELEASE = "Target Release"
    TITLE = "Title"
    DESCRIPTION = "Description"
    STATUS = "Status"
    CATEGORY = "Filter category"


@dataclass(frozen=True)
class SchemaInfo:
    """Field IDs and value domains resolved from an AccuWork schema."""

    field_ids: dict[FieldRole, int]
    valid_statuses: tuple[str, ...] = ()
    category_field_id: int | None = None
    category_display_name: str | None = None
    valid_category_values: tuple[str, ...] = field(default=())

    def field_id(self, role: FieldRole) -> int:
        return self.field_ids[role]


class Issue(BaseModel):
    """An AccuWork issue as reported to the host."""

    id: str | None = None
    status: str | None = None
    title: str | None = None
    description: str | None = None
    release: str | None = None


class Category(BaseModel):
    """A value of the configured category ("Choose") field."""

    id: str
    name: str
