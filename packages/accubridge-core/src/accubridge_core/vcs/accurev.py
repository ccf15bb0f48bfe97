"""AccuRev source control provider built on the accurev command-line client."""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path

from accubridge_core.client import AccuRevClient
from accubridge_core.vcs.base import SourceControlProvider
from accubridge_core.vcs.models import DirectoryListing, TreeNode
from accubridge_core.vcs.paths import resolve_path
from accubridge_core.vcs.tree import (
    build_stream_tree,
    materialize_directory,
    populate_files,
)

logger = logging.getLogger(__name__)


class AccuRevProvider(SourceControlProvider):
    """Browses streams and directories and pops files from AccuRev.

    Trees are rebuilt from accurev output on every call; nothing is cached.
    """

    def __init__(
        self,
        client: AccuRevClient,
        separator: str = "\\",
        epoch_timestamps: bool = False,
    ) -> None:
        self.client = client
        self.separator = separator
        self.epoch_timestamps = epoch_timestamps

    @property
    def root_path_prefix(self) -> str:
        """Depot-relative root, e.g. ``\\.\\``."""
        return f"{self.separator}.{self.separator}"

    def is_available(self) -> bool:
        return self.client.is_available()

    def validate_connection(self) -> None:
        self.client.login()
        self.list_streams()

    def list_streams(self) -> TreeNode:
        document = self.client.call("show", "-fx", "streams")
        return build_stream_tree(document)

    def list_files(self, node: TreeNode, stream: str, path: str, recurse: bool = False) -> TreeNode:
        """Populate *node* with the contents of *path* in *stream*.

        With *recurse*, every sub-directory is listed in turn using its full
        location.
        """
        self.client.login()
        pending = [(node, path)]
        while pending:
            current, current_path = pending.pop()
            document = self.client.call("files", "-fx", "-s", stream, current_path)
            subdirs = populate_files(current, document, self.epoch_timestamps)
            if recurse:
                pending.extend((d, d.location) for d in subdirs)
        return node

    def get_directory_entry_info(self, source_path: str) -> DirectoryListing | None:
        if not source_path:
            return DirectoryListing(path="", directories=[self.list_streams().name])

        parsed = resolve_path(source_path)
        streams = self.list_streams()

        def expand(node: TreeNode) -> None:
            self.list_files(node, parsed.stream, node.location or self.root_path_prefix)

        listing = materialize_directory(streams, parsed, expand, path=source_path)
        if listing is None:
            logger.info("No such directory: %s", source_path)
        return listing

    def get_latest(self, source_path: str, target_path: str | Path) -> None:
        if not source_path:
            raise ValueError("source_path is required")
        parsed = resolve_path(source_path)
        relative = parsed.relative_path(self.separator)
        target = Path(target_path)

        self.client.login()
        with tempfile.TemporaryDirectory(prefix="accubridge-") as staging:
            self.client.call(
                "pop", "-fx", "-O", "-R", "-v", parsed.stream,
                "-L", staging, self.root_path_prefix + relative,
            )
            popped = Path(staging).joinpath(*parsed.remainder)
            _copy_into(popped, target)
        logger.info("Got latest %s into %s", source_path, target)


def _copy_into(source: Path, target: Path) -> None:
    """Copy a popped file or directory tree into *target*."""
    if source.is_dir():
        shutil.copytree(source, target, dirs_exist_ok=True)
    elif source.is_file():
        target.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, target / source.name)
    else:
        raise FileNotFoundError(f"accurev pop produced nothing at {source}")
