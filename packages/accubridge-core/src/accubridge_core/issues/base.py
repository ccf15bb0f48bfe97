"""Abstract issue tracking interface for accubridge."""

from abc import ABC, abstractmethod

from accubridge_core.issues.models import Category, Issue


class IssueTrackingProvider(ABC):
    """Abstract base class for issue tracking providers."""

    @abstractmethod
    def is_available(self) -> bool:
        ...

    @abstractmethod
    def validate_connection(self) -> None:
        """Raise if the configured connection or field mapping does not work."""
        ...

    @abstractmethod
    def get_issues(self, release_number: str | None) -> list[Issue]:
        """Issues targeted at *release_number* (all issues when empty)."""
        ...

    @abstractmethod
    def is_issue_closed(self, issue: Issue) -> bool:
        ...

    @abstractmethod
    def get_categories(self) -> list[Category]:
        """Categories the issue list can be filtered by; empty if unsupported."""
        ...
