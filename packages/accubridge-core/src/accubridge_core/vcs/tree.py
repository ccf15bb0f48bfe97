"""Builds stream and directory trees from accurev XML replies."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from datetime import datetime, timezone

from accubridge_core.errors import NoRootStream
from accubridge_core.reply import ReplyDocument
from accubridge_core.vcs.models import (
    EPOCH,
    STREAM_MARKER,
    DirectoryListing,
    NodeKind,
    ParsedPath,
    TreeNode,
)
from accubridge_core.vcs.paths import leaf_name

logger = logging.getLogger(__name__)


def build_stream_tree(document: ReplyDocument) -> TreeNode:
    """Arrange ``<stream>`` elements into their basis hierarchy.

    The single stream without a basis is the root. Stream node names carry
    the ``:`` marker.
    """
    roots: list[str] = []
    children_by_basis: dict[str, list[str]] = defaultdict(list)
    for element in document.select("//stream"):
        name = document.attr(element, "name")
        basis = document.attr(element, "basis")
        if basis:
            children_by_basis[basis].append(name)
        else:
            roots.append(name)

    if len(roots) != 1:
        raise NoRootStream(len(roots))

    root = TreeNode(name=STREAM_MARKER + roots[0], kind=NodeKind.STREAM)
    attached = {roots[0]}
    stack: list[tuple[str, TreeNode]] = [(roots[0], root)]
    while stack:
        name, node = stack.pop()
        for child_name in children_by_basis.get(name, ()):
            if child_name in attached:
                logger.warning("Stream %s listed more than once; ignoring repeat", child_name)
                continue
            attached.add(child_name)
            stack.append((child_name, node.add_stream(STREAM_MARKER + child_name)))

    orphans = sum(len(v) for v in children_by_basis.values()) - (len(attached) - 1)
    if orphans > 0:
        logger.debug("%d stream(s) not reachable from root %s", orphans, roots[0])
    return root


def find_node(root: TreeNode, name: str) -> TreeNode | None:
    """First node named *name* in pre-order, or None."""
    for node in root.walk():
        if node.name == name:
            return node
    return None


def parse_size(value: str) -> int:
    """File size in bytes; 0 when missing or unparseable."""
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return 0


def parse_mod_time(value: str, epoch_timestamps: bool = False) -> datetime:
    """Unix seconds to an aware UTC datetime; the epoch when unparseable."""
    if epoch_timestamps or not value:
        return EPOCH
    try:
        return datetime.fromtimestamp(int(value), tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        logger.debug("Unparseable modTime %r", value)
        return EPOCH


def populate_files(
    node: TreeNode, document: ReplyDocument, epoch_timestamps: bool = False
) -> list[TreeNode]:
    """Attach each ``<element>`` of a ``files`` reply under *node*.

    Returns the directory nodes that were added so the caller can descend.
    """
    subdirs: list[TreeNode] = []
    for element in document.select("//element"):
        location = document.attr(element, "location")
        name = leaf_name(location)
        if not name:
            continue
        if document.attr(element, "dir").lower() == "yes":
            subdirs.append(node.add_directory(name, location=location))
        else:
            node.add_file(
                name,
                size=parse_size(document.attr(element, "size")),
                last_modified=parse_mod_time(document.attr(element, "modTime"), epoch_timestamps),
                location=location,
            )
    return subdirs


def materialize_directory(
    root: TreeNode,
    parsed: ParsedPath,
    expand: Callable[[TreeNode], None],
    path: str = "",
) -> DirectoryListing | None:
    """Load only the directories along *parsed* and list the last one.

    *expand* populates a node's immediate children. Returns None when the
    stream or any segment of the remainder does not exist.
    """
    node = find_node(root, parsed.marker_segment)
    if node is None:
        return None
    expand(node)
    for segment in parsed.remainder:
        child = node.children.get(segment)
        if child is None or child.kind is NodeKind.FILE:
            return None
        expand(child)
        node = child
    return node.to_listing(path)
