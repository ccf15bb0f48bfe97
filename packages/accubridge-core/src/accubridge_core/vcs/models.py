"""Data models for the AccuRev stream/directory namespace."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field

STREAM_MARKER = ":"
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class NodeKind(str, Enum):
    STREAM = "stream"
    DIRECTORY = "directory"
    FILE = "file"


@dataclass
class TreeNode:
    """A stream, directory or file in the namespace tree.

    Children are keyed by name, so a name is unique among its siblings.
    """

    name: str
    kind: NodeKind = NodeKind.DIRECTORY
    children: dict[str, TreeNode] = field(default_factory=dict)
    size: int = 0
    last_modified: datetime = EPOCH
    location: str = ""

    def add_stream(self, name: str) -> TreeNode:
        return self._add(TreeNode(name=name, kind=NodeKind.STREAM))

    def add_directory(self, name: str, location: str = "") -> TreeNode:
        existing = self.children.get(name)
        if existing is not None and existing.kind is not NodeKind.FILE:
            return existing
        return self._add(TreeNode(name=name, kind=NodeKind.DIRECTORY, location=location))

    def add_file(
        self,
        name: str,
        size: int = 0,
        last_modified: datetime = EPOCH,
        location: str = "",
    ) -> TreeNode:
        return self._add(
            TreeNode(
                name=name,
                kind=NodeKind.FILE,
                size=size,
                last_modified=last_modified,
                location=location,
            )
        )

    def _add(self, node: TreeNode) -> TreeNode:
        self.children[node.name] = node
        return node

    @property
    def directories(self) -> list[TreeNode]:
        """Child streams and directories, in insertion order."""
        return [c for c in self.children.values() if c.kind is not NodeKind.FILE]

    @property
    def files(self) -> list[TreeNode]:
        return [c for c in self.children.values() if c.kind is NodeKind.FILE]

    def walk(self) -> Iterator[TreeNode]:
        """Pre-order traversal of this node and its descendants."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(list(node.children.values())))

    def to_listing(self, path: str) -> DirectoryListing:
        """One-level directory listing of this node."""
        return DirectoryListing(
            path=path,
            directories=[d.name for d in self.directories],
            files=[
                FileEntry(name=f.name, size=f.size, last_modified=f.last_modified)
                for f in self.files
            ],
        )


@dataclass(frozen=True)
class ParsedPath:
    """A source path split at its stream marker segment."""

    marker_segment: str
    remainder: tuple[str, ...] = ()

    @property
    def stream(self) -> str:
        return self.marker_segment[len(STREAM_MARKER):]

    def relative_path(self, separator: str = "\\") -> str:
        return separator.join(self.remainder)


class FileEntry(BaseModel):
    """A file record in a directory listing."""

    name: str
    size: int = Field(default=0, ge=0)
    last_modified: datetime = EPOCH
    attributes: str = "normal"


class DirectoryListing(BaseModel):
    """One level of the namespace: sub-directory names plus file records."""

    path: str
    directories: list[str] = Field(default_factory=list)
    files: list[FileEntry] = Field(default_factory=list)
