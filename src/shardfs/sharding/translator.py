"""Physical -> logical metadata translation.

Bucket segments never start with the marker, so dropping every unmarked
segment of a physical path and stripping the marker from the rest
recovers the logical path exactly.
"""

import dataclasses
import logging

from ..errors import MalformedShardEntryError
from ..services.storage.metadata import Metadata
from .sharder import MARKER, SEPARATOR

logger = logging.getLogger(__name__)


def logical_path(physical: str) -> str:
    """Recover the logical path from a physical one.

    Raises:
        MalformedShardEntryError: If no segment carries the marker
    """
    segments = [part[len(MARKER):] for part in physical.split(SEPARATOR) if part.startswith(MARKER)]
    if not segments:
        raise MalformedShardEntryError(f"No marked segment in physical path {physical!r}")
    return SEPARATOR.join(segments)


def _unmark(name: str | None) -> str | None:
    if name and name.startswith(MARKER):
        return name[len(MARKER):]
    return name


def to_logical(metadata: Metadata) -> Metadata:
    """Rewrite a backend record into logical coordinates.

    Name attributes are recomputed; size, timestamp, visibility, mimetype
    and type are kept. The original record is attached as ``inner``.

    A record without any marked segment is not part of a sharded tree;
    it is reported as the root, with empty names, rather than failing
    the caller.
    """
    try:
        path = logical_path(metadata.path)
    except MalformedShardEntryError as e:
        logger.warning(f"Treating foreign entry as root: {e}")
        # Physical names of a foreign entry are bucket-level names
        return dataclasses.replace(
            metadata, path="", basename="", filename=None, extension=None, dirname="", inner=metadata
        )

    return dataclasses.replace(
        metadata,
        path=path,
        basename=_unmark(metadata.basename),
        filename=_unmark(metadata.filename),
        dirname=path.rpartition(SEPARATOR)[0],
        inner=metadata,
    )
