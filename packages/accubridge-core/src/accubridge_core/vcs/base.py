"""Abstract source control interface for accubridge."""

from abc import ABC, abstractmethod
from pathlib import Path

from accubridge_core.vcs.models import DirectoryListing, TreeNode


class SourceControlProvider(ABC):
    """Abstract base class for source control providers.

    Defines what the host platform needs to browse a depot and stage files
    from it.
    """

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the provider can run in the current environment."""
        ...

    @abstractmethod
    def validate_connection(self) -> None:
        """Raise if the configured connection does not work."""
        ...

    @abstractmethod
    def list_streams(self) -> TreeNode:
        """Return the stream hierarchy rooted at the depot's root stream."""
        ...

    @abstractmethod
    def get_directory_entry_info(self, source_path: str) -> DirectoryListing | None:
        """List one directory level of *source_path*.

        Args:
            source_path: ``<...>/:<stream>/<dir>/...``; empty for the root.
        """
        ...

    @abstractmethod
    def get_latest(self, source_path: str, target_path: str | Path) -> None:
        """Copy the latest version of *source_path* into *target_path*."""
        ...
