"""Sharded filesystem facade.

``ShardedFilesystem`` wraps any StorageBackend. Callers use logical paths;
every call is forwarded with the physical sharded path, and whatever the
backend reports back (metadata, listings, error messages) is rewritten
into logical coordinates.

Usage::

    from shardfs import ShardedFilesystem
    from shardfs.services.storage import LocalFileBackend

    fs = ShardedFilesystem(LocalFileBackend("/srv/blobs"), {"hash_parts_for_files": 2})
    fs.write("reports/2024/q1.pdf", data)
    fs.list_contents("reports", recursive=True)
"""

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any, BinaryIO

from ..core.config import ShardConfig
from ..errors import AlreadyExistsError, NotFoundError, RootViolationError, StorageError
from ..sharding.lister import RecursiveLister
from ..sharding.sharder import PathSharder
from ..sharding.translator import to_logical
from .storage.base import StorageBackend
from .storage.metadata import Metadata

logger = logging.getLogger(__name__)


class ShardedFilesystem:
    """Logical view over a sharded physical tree.

    Leaf role (the final segment addressed as a file) is used for every
    operation except create_dir, delete_dir and listing, which address
    directories. ``has`` and ``get_metadata`` take ``is_directory`` to
    probe a directory instead.
    """

    def __init__(
        self,
        backend: StorageBackend,
        config: ShardConfig | Mapping[str, Any] | None = None,
        allow_marker: bool = False,
    ):
        """Initialize the facade.

        Args:
            backend: Storage backend addressed with physical paths
            config: ShardConfig, or the adapter options mapping
                (hash_parts_for_directories, hash_parts_for_files,
                hash_part_length_for_directories, hash_part_length_for_files)
            allow_marker: Accept logical segments starting with the marker.
                Set on a facade stacked under another one, which receives
                the outer facade's physical paths.
        """
        self.backend = backend
        self.config = ShardConfig.from_options(config)
        self.sharder = PathSharder(self.config, allow_marker)
        self.lister = RecursiveLister(backend, self.sharder)

    # --- Path helpers ---

    def locate(self, path: str, is_directory: bool = False) -> str:
        """Physical path used for ``path`` in the given role."""
        if is_directory:
            return self.sharder.directory(path)
        return self.sharder.leaf(path)

    def _role(self, is_directory: bool) -> dict[str, bool]:
        """Role keyword for a stacked facade; other backends have one form per path."""
        if is_directory and isinstance(self.backend, ShardedFilesystem):
            return {"is_directory": True}
        return {}

    def _remap(self, error: StorageError, path: str) -> StorageError:
        """Same error kind with physical forms of ``path`` replaced by ``path``."""
        message = str(error)
        for physical in self.sharder.candidates(path):
            message = message.replace(physical, path)
        if isinstance(error, RootViolationError):
            return type(error)(message)
        return type(error)(path, message)

    @contextmanager
    def _logical_errors(self, path: str, new_path: str | None = None):
        """Rewrite path-carrying backend errors into logical coordinates.

        Not-found and root violations refer to ``path``; already-exists
        refers to ``new_path`` when the operation has a destination.
        """
        try:
            yield
        except (NotFoundError, RootViolationError) as e:
            raise self._remap(e, path) from e
        except AlreadyExistsError as e:
            raise self._remap(e, path if new_path is None else new_path) from e

    # --- Reading ---

    def has(self, path: str, is_directory: bool = False) -> bool:
        return self.backend.has(self.locate(path, is_directory), **self._role(is_directory))

    def read(self, path: str) -> bytes:
        with self._logical_errors(path):
            return self.backend.read(self.locate(path))

    def read_stream(self, path: str) -> BinaryIO:
        with self._logical_errors(path):
            return self.backend.read_stream(self.locate(path))

    def iter_contents(self, directory: str = "", recursive: bool = False) -> Iterator[Metadata]:
        """Lazily yield logical entries of a directory."""
        return self.lister.iter_contents(directory, recursive)

    def list_contents(self, directory: str = "", recursive: bool = False) -> list[Metadata]:
        """List logical entries of a directory.

        Directories come first, each followed by its subtree when
        recursive, then the directory's files.
        """
        return self.lister.list_contents(directory, recursive)

    def get_metadata(self, path: str, is_directory: bool = False) -> Metadata | None:
        with self._logical_errors(path):
            metadata = self.backend.get_metadata(
                self.locate(path, is_directory), **self._role(is_directory)
            )
        if metadata is None:
            return None
        return to_logical(metadata)

    def get_size(self, path: str) -> int | None:
        with self._logical_errors(path):
            return self.backend.get_size(self.locate(path))

    def get_mimetype(self, path: str) -> str | None:
        with self._logical_errors(path):
            return self.backend.get_mimetype(self.locate(path))

    def get_timestamp(self, path: str) -> int | None:
        with self._logical_errors(path):
            return self.backend.get_timestamp(self.locate(path))

    def get_visibility(self, path: str) -> str | None:
        with self._logical_errors(path):
            return self.backend.get_visibility(self.locate(path))

    # --- Writing ---

    def write(self, path: str, contents: bytes, config: dict[str, Any] | None = None) -> bool:
        with self._logical_errors(path):
            return self.backend.write(self.locate(path), contents, config)

    def write_stream(self, path: str, resource: BinaryIO, config: dict[str, Any] | None = None) -> bool:
        with self._logical_errors(path):
            return self.backend.write_stream(self.locate(path), resource, config)

    def update(self, path: str, contents: bytes, config: dict[str, Any] | None = None) -> bool:
        with self._logical_errors(path):
            return self.backend.update(self.locate(path), contents, config)

    def update_stream(self, path: str, resource: BinaryIO, config: dict[str, Any] | None = None) -> bool:
        with self._logical_errors(path):
            return self.backend.update_stream(self.locate(path), resource, config)

    def put(self, path: str, contents: bytes, config: dict[str, Any] | None = None) -> bool:
        with self._logical_errors(path):
            return self.backend.put(self.locate(path), contents, config)

    def put_stream(self, path: str, resource: BinaryIO, config: dict[str, Any] | None = None) -> bool:
        with self._logical_errors(path):
            return self.backend.put_stream(self.locate(path), resource, config)

    def read_and_delete(self, path: str) -> bytes:
        with self._logical_errors(path):
            return self.backend.read_and_delete(self.locate(path))

    def rename(self, path: str, new_path: str) -> bool:
        with self._logical_errors(path, new_path):
            return self.backend.rename(self.locate(path), self.locate(new_path))

    def copy(self, path: str, new_path: str) -> bool:
        with self._logical_errors(path, new_path):
            return self.backend.copy(self.locate(path), self.locate(new_path))

    def delete(self, path: str) -> bool:
        with self._logical_errors(path):
            return self.backend.delete(self.locate(path))

    def delete_dir(self, dirname: str) -> bool:
        with self._logical_errors(dirname):
            return self.backend.delete_dir(self.locate(dirname, is_directory=True))

    def create_dir(self, dirname: str, config: dict[str, Any] | None = None) -> bool:
        with self._logical_errors(dirname):
            return self.backend.create_dir(self.locate(dirname, is_directory=True), config)

    def set_visibility(self, path: str, visibility: str) -> bool:
        with self._logical_errors(path):
            return self.backend.set_visibility(self.locate(path), visibility)
