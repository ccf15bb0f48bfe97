"""Source control side of accubridge: streams, directories, get latest."""

import os

from accubridge_core.client import AccuRevClient
from accubridge_core.config.models import AccuRevConfig
from accubridge_core.runner import ProcessRunner
from accubridge_core.vcs.accurev import AccuRevProvider
from accubridge_core.vcs.base import SourceControlProvider
from accubridge_core.vcs.models import (
    DirectoryListing,
    FileEntry,
    NodeKind,
    ParsedPath,
    TreeNode,
)
from accubridge_core.vcs.paths import resolve_path
from accubridge_core.vcs.tree import build_stream_tree, find_node, materialize_directory


def create_client(config: AccuRevConfig) -> AccuRevClient:
    """Build an AccuRevClient, reading the password from config.password_env."""
    password = os.environ.get(config.password_env, "") if config.password_env else ""
    runner = ProcessRunner(config.exe_path, timeout=config.timeout)
    return AccuRevClient(runner, username=config.username, password=password)


def create_source_control_provider(config: AccuRevConfig) -> AccuRevProvider:
    return AccuRevProvider(
        create_client(config),
        separator=config.path_separator,
        epoch_timestamps=config.epoch_timestamps,
    )


__all__ = [
    "AccuRevProvider",
    "DirectoryListing",
    "FileEntry",
    "NodeKind",
    "ParsedPath",
    "SourceControlProvider",
    "TreeNode",
    "build_stream_tree",
    "create_client",
    "create_source_control_provider",
    "find_node",
    "materialize_directory",
    "resolve_path",
]
