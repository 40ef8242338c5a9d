"""Logical directory listing over a sharded physical tree.

A logical directory's children sit a fixed number of bucket levels below
its physical directory: ``dir_fanout`` levels for subdirectories and
``file_fanout`` levels for files. Each role is walked separately, so a
tree may shard directories and files differently.
"""

import logging
from collections.abc import Iterator

from ..services.storage.base import StorageBackend
from ..services.storage.metadata import TYPE_DIR, TYPE_FILE, Metadata
from .sharder import MARKER, PathSharder
from .translator import to_logical

logger = logging.getLogger(__name__)


class RecursiveLister:
    """Enumerates logical entries through a backend's non-recursive listing.

    Order: each subdirectory, followed by its subtree when recursive, then
    the files of the directory.
    """

    def __init__(self, backend: StorageBackend, sharder: PathSharder):
        self.backend = backend
        self.sharder = sharder

    def iter_contents(self, directory: str = "", recursive: bool = False) -> Iterator[Metadata]:
        """Yield logical entries of ``directory``.

        Args:
            directory: Logical directory ("" for the root)
            recursive: Descend into discovered logical subdirectories

        Yields:
            Metadata records in logical coordinates
        """
        config = self.sharder.config
        physical = self.sharder.directory(directory)

        directories = self._descend(physical, TYPE_DIR, config.dir_fanout)
        for entry in directories:
            yield entry
            if recursive:
                yield from self.iter_contents(entry.path, recursive=True)

        yield from self._descend(physical, TYPE_FILE, config.file_fanout)

    def list_contents(self, directory: str = "", recursive: bool = False) -> list[Metadata]:
        """Materialized iter_contents."""
        return list(self.iter_contents(directory, recursive))

    def _descend(self, directory: str, entry_type: str, depth: int) -> list[Metadata]:
        """Collect marked entries of ``entry_type`` found ``depth`` bucket levels down."""
        found = []
        for metadata in self.backend.list_contents(directory, False):
            if depth > 0:
                if metadata.is_dir:
                    found.extend(self._descend(metadata.path, entry_type, depth - 1))
            elif metadata.basename.startswith(MARKER) and metadata.type == entry_type:
                found.append(to_logical(metadata))
        logger.debug(f"Found {len(found)} {entry_type} entries under {directory!r} at depth {depth}")
        return found
