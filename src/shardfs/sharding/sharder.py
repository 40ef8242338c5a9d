"""Logical -> physical path sharding.

Every segment of a logical path is renamed to ``MARKER + segment`` and
prefixed with a number of bucket directories cut from the SHA-1 hex
digest of the segment. Non-final segments are always directories; the
final segment uses directory or leaf parameters depending on what the
caller is addressing.

Example (default ShardConfig, ``a/b/c.txt`` addressed as a file)::

    a      -> sha1("a")[3:6]/_a
    b      -> sha1("b")[3:6]/_b
    c.txt  -> h[6:8]/h[4:6]/h[2:4]/_c.txt      (h = sha1("c.txt"))

Bucket ``level`` reads ``prefix_len`` characters at offset
``level * prefix_len``; level ``fanout`` is the outermost directory.
Offset 0 is never used. Existing trees depend on this exact layout.
"""

import hashlib
import logging

from ..core.config import ShardConfig
from ..errors import InvalidPathError

logger = logging.getLogger(__name__)

MARKER = "_"
"""Prefix identifying a real (non-bucket) segment in a physical path."""

SEPARATOR = "/"


def segment_digest(segment: str) -> str:
    """Hex SHA-1 of a segment's UTF-8 bytes."""
    return hashlib.sha1(segment.encode("utf-8")).hexdigest()


def normalize(path: str) -> str:
    """Strip a single leading slash."""
    if path.startswith(SEPARATOR):
        return path[1:]
    return path


def validate_segment(segment: str, path: str, allow_marker: bool = False) -> None:
    """Reject segments that cannot survive the physical round trip.

    A backslash is read as a separator by some backends, which would split
    the segment and bury it one level below where listings look.

    Raises:
        InvalidPathError: If the segment contains a backslash, or begins
            with the marker while ``allow_marker`` is off
    """
    if "\\" in segment:
        raise InvalidPathError(f"Path segment {segment!r} in {path!r} contains a backslash")
    if not allow_marker and segment.startswith(MARKER):
        raise InvalidPathError(
            f"Path segment {segment!r} in {path!r} starts with reserved marker {MARKER!r}"
        )


def shard_segment(segment: str, fanout: int, prefix_len: int) -> str:
    """Physical form of one segment: bucket directories then the marked name."""
    digest = segment_digest(segment)
    parts = [digest[level * prefix_len:level * prefix_len + prefix_len] for level in range(fanout, 0, -1)]
    parts.append(MARKER + segment)
    return SEPARATOR.join(parts)


def to_physical(path: str, is_directory: bool, config: ShardConfig, allow_marker: bool = False) -> str:
    """Map a logical path to its physical sharded path.

    Args:
        path: Logical path, optionally with one leading slash
        is_directory: Whether the final segment is addressed as a directory
        config: Sharding parameters
        allow_marker: Accept segments that begin with the marker. Only the
            marker stripped by the translator is removed again, so such
            segments still round-trip; this is how a facade stacked under
            another one receives the outer physical paths.

    Returns:
        Physical path without a leading slash ("" for the root)

    Raises:
        InvalidPathError: If a segment is rejected by validate_segment
    """
    path = normalize(path)
    if not path:
        return ""

    segments = path.split(SEPARATOR)
    last = len(segments) - 1
    physical = []
    for i, segment in enumerate(segments):
        validate_segment(segment, path, allow_marker)
        fanout, prefix_len = config.params_for(is_directory or i < last)
        physical.append(shard_segment(segment, fanout, prefix_len))
    return SEPARATOR.join(physical)


class PathSharder:
    """Binds to_physical to one ShardConfig."""

    def __init__(self, config: ShardConfig | None = None, allow_marker: bool = False):
        self.config = config or ShardConfig()
        self.allow_marker = allow_marker

    def directory(self, path: str) -> str:
        """Physical path of ``path`` addressed as a directory."""
        physical = to_physical(path, True, self.config, self.allow_marker)
        logger.debug(f"Sharded directory {path!r} -> {physical!r}")
        return physical

    def leaf(self, path: str) -> str:
        """Physical path of ``path`` addressed as a file."""
        physical = to_physical(path, False, self.config, self.allow_marker)
        logger.debug(f"Sharded leaf {path!r} -> {physical!r}")
        return physical

    def candidates(self, path: str) -> list[str]:
        """Both physical interpretations of ``path``, longest first."""
        forms = {self.leaf(path), self.directory(path)}
        return sorted((form for form in forms if form), key=len, reverse=True)
