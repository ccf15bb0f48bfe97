"""Source path parsing: ``<segment>/.../:<stream>/<segment>/...``."""

from __future__ import annotations

import re

from accubridge_core.errors import InvalidPath
from accubridge_core.vcs.models import STREAM_MARKER, ParsedPath

_SPLIT_RE = re.compile(r"[/\\]")


def split_segments(path: str) -> list[str]:
    return _SPLIT_RE.split(path)


def resolve_path(path: str) -> ParsedPath:
    """Split *path* at its stream marker segment.

    Segments are scanned from the end, so when several segments start with
    the marker the last one names the stream. Empty segments after it are
    dropped from the remainder.
    """
    segments = split_segments(path)
    for index in range(len(segments) - 1, -1, -1):
        if segments[index].startswith(STREAM_MARKER):
            remainder = tuple(s for s in segments[index + 1:] if s)
            return ParsedPath(marker_segment=segments[index], remainder=remainder)
    raise InvalidPath(path)


def leaf_name(location: str) -> str:
    """Last segment of a depot location (either separator)."""
    return split_segments(location)[-1]
