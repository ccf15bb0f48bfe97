"""Issue tracking side of accubridge (AccuWork)."""

from accubridge_core.config.models import AccuRevConfig, AccuWorkConfig
from accubridge_core.issues.accuwork import AccuWorkProvider
from accubridge_core.issues.base import IssueTrackingProvider
from accubridge_core.issues.models import Category, FieldRole, Issue, SchemaInfo
from accubridge_core.issues.query import build_query_document, read_issues
from accubridge_core.issues.schema import SchemaCache, resolve_schema
from accubridge_core.vcs import create_client


def create_issue_tracking_provider(
    accurev: AccuRevConfig, accuwork: AccuWorkConfig
) -> AccuWorkProvider:
    """Create an AccuWork provider; the depot name is required."""
    if not accuwork.depot:
        raise ValueError("AccuWork depot not configured. Set accuwork.depot in accubridge.yaml.")
    return AccuWorkProvider(create_client(accurev), accuwork)


__all__ = [
    "AccuWorkProvider",
    "Category",
    "FieldRole",
    "Issue",
    "IssueTrackingProvider",
    "SchemaCache",
    "SchemaInfo",
    "build_query_document",
    "create_issue_tracking_provider",
    "read_issues",
    "resolve_schema",
]
