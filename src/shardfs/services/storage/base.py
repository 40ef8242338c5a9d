"""Storage backend protocol and shared filesystem semantics.

``StorageBackend`` is the contract the sharded filesystem forwards to.
``BaseBackend`` implements the contract's checks once (normalisation,
presence/absence assertions, root protection, write-or-update, stream
fallbacks) on top of a handful of primitives that concrete backends
provide.
"""

import io
import logging
from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Protocol, runtime_checkable

from ...errors import AlreadyExistsError, NotFoundError, RootViolationError, StorageError
from .metadata import VISIBILITY_PRIVATE, VISIBILITY_PUBLIC, Metadata

logger = logging.getLogger(__name__)


@runtime_checkable
class StorageBackend(Protocol):
    """Protocol for hierarchical storage backends.

    Paths are slash-delimited and relative to the backend root. Failures
    are reported as NotFoundError, AlreadyExistsError, RootViolationError
    or another StorageError; the first two embed the offending path in
    their message.

    Implementations include:
    - InMemoryBackend: dict-backed store (tests, scratch use)
    - LocalFileBackend: local filesystem
    - ShardedFilesystem: sharding layer over another backend (an inner
      facade needs allow_marker=True)
    """

    def has(self, path: str) -> bool:
        """Check whether a file or directory exists at path."""
        ...

    def read(self, path: str) -> bytes:
        """Read a file.

        Raises:
            NotFoundError: If path doesn't exist
        """
        ...

    def read_stream(self, path: str) -> BinaryIO:
        """Open a file for binary reading."""
        ...

    def write(self, path: str, contents: bytes, config: dict[str, Any] | None = None) -> bool:
        """Write a new file.

        Args:
            path: File path
            contents: Bytes to store
            config: Options, e.g. {"visibility": "private"}

        Raises:
            AlreadyExistsError: If path already exists
        """
        ...

    def write_stream(self, path: str, resource: BinaryIO, config: dict[str, Any] | None = None) -> bool:
        """Write a new file from a binary stream."""
        ...

    def update(self, path: str, contents: bytes, config: dict[str, Any] | None = None) -> bool:
        """Replace the contents of an existing file.

        Raises:
            NotFoundError: If path doesn't exist
        """
        ...

    def update_stream(self, path: str, resource: BinaryIO, config: dict[str, Any] | None = None) -> bool:
        """Replace an existing file from a binary stream."""
        ...

    def put(self, path: str, contents: bytes, config: dict[str, Any] | None = None) -> bool:
        """Create or replace a file."""
        ...

    def put_stream(self, path: str, resource: BinaryIO, config: dict[str, Any] | None = None) -> bool:
        """Create or replace a file from a binary stream."""
        ...

    def read_and_delete(self, path: str) -> bytes:
        """Read a file, then delete it."""
        ...

    def rename(self, path: str, new_path: str) -> bool:
        """Move a file.

        Raises:
            NotFoundError: If path doesn't exist
            AlreadyExistsError: If new_path exists
        """
        ...

    def copy(self, path: str, new_path: str) -> bool:
        """Copy a file.

        Raises:
            NotFoundError: If path doesn't exist
            AlreadyExistsError: If new_path exists
        """
        ...

    def delete(self, path: str) -> bool:
        """Delete a file.

        Raises:
            NotFoundError: If path doesn't exist
        """
        ...

    def delete_dir(self, dirname: str) -> bool:
        """Delete a directory and everything below it.

        Raises:
            RootViolationError: If dirname is the root
        """
        ...

    def create_dir(self, dirname: str, config: dict[str, Any] | None = None) -> bool:
        """Create a directory (and missing parents)."""
        ...

    def list_contents(self, directory: str = "", recursive: bool = False) -> list[Metadata]:
        """List entries below a directory."""
        ...

    def get_metadata(self, path: str) -> Metadata | None:
        """Return metadata for a path.

        Raises:
            NotFoundError: If path doesn't exist
        """
        ...

    def get_size(self, path: str) -> int | None:
        """Return a file's size in bytes."""
        ...

    def get_mimetype(self, path: str) -> str | None:
        """Return a file's MIME type."""
        ...

    def get_timestamp(self, path: str) -> int | None:
        """Return a path's modification time (epoch seconds)."""
        ...

    def get_visibility(self, path: str) -> str | None:
        """Return "public" or "private"."""
        ...

    def set_visibility(self, path: str, visibility: str) -> bool:
        """Change a path's visibility."""
        ...


def normalize_path(path: str) -> str:
    """Normalize a backend path.

    Drops empty and "." segments, resolves "..", and strips leading and
    trailing slashes.

    Raises:
        StorageError: If ".." climbs above the root
    """
    parts: list[str] = []
    for part in path.replace("\\", "/").split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            if not parts:
                raise StorageError(f"Path is outside of the defined root, path: [{path}]")
            parts.pop()
            continue
        parts.append(part)
    return "/".join(parts)


def check_visibility(visibility: str) -> str:
    """Validate a visibility value."""
    if visibility not in (VISIBILITY_PUBLIC, VISIBILITY_PRIVATE):
        raise ValueError(f"Invalid visibility: {visibility!r} (expected 'public' or 'private')")
    return visibility


class BaseBackend(ABC):
    """Shared implementation of the StorageBackend contract.

    Subclasses implement the underscore primitives below; they receive
    normalized paths and may assume presence/absence has been checked.
    """

    # --- Primitives ---

    @abstractmethod
    def _exists(self, path: str) -> bool:
        ...

    @abstractmethod
    def _read(self, path: str) -> bytes:
        ...

    @abstractmethod
    def _write(self, path: str, contents: bytes, visibility: str | None) -> None:
        """Store contents; visibility None keeps the current value (or public)."""
        ...

    @abstractmethod
    def _rename(self, path: str, new_path: str) -> None:
        ...

    @abstractmethod
    def _copy(self, path: str, new_path: str) -> None:
        ...

    @abstractmethod
    def _delete(self, path: str) -> None:
        ...

    @abstractmethod
    def _delete_dir(self, dirname: str) -> bool:
        ...

    @abstractmethod
    def _create_dir(self, dirname: str, visibility: str) -> None:
        ...

    @abstractmethod
    def _list_contents(self, directory: str, recursive: bool) -> list[Metadata]:
        ...

    @abstractmethod
    def _get_metadata(self, path: str) -> Metadata:
        ...

    @abstractmethod
    def _set_visibility(self, path: str, visibility: str) -> None:
        ...

    # --- Assertions ---

    def _assert_present(self, path: str) -> None:
        if not path or not self._exists(path):
            raise NotFoundError(path)

    def _assert_absent(self, path: str) -> None:
        if path and self._exists(path):
            raise AlreadyExistsError(path)

    @staticmethod
    def _visibility_option(config: dict[str, Any] | None) -> str | None:
        visibility = (config or {}).get("visibility")
        return check_visibility(visibility) if visibility is not None else None

    # --- StorageBackend ---

    def has(self, path: str) -> bool:
        path = normalize_path(path)
        return bool(path) and self._exists(path)

    def read(self, path: str) -> bytes:
        path = normalize_path(path)
        self._assert_present(path)
        return self._read(path)

    def read_stream(self, path: str) -> BinaryIO:
        return io.BytesIO(self.read(path))

    def write(self, path: str, contents: bytes, config: dict[str, Any] | None = None) -> bool:
        path = normalize_path(path)
        self._assert_absent(path)
        self._write(path, contents, self._visibility_option(config) or VISIBILITY_PUBLIC)
        logger.debug(f"Wrote {len(contents)} bytes to {path}")
        return True

    def write_stream(self, path: str, resource: BinaryIO, config: dict[str, Any] | None = None) -> bool:
        return self.write(path, resource.read(), config)

    def update(self, path: str, contents: bytes, config: dict[str, Any] | None = None) -> bool:
        path = normalize_path(path)
        self._assert_present(path)
        self._write(path, contents, self._visibility_option(config))
        logger.debug(f"Updated {path} with {len(contents)} bytes")
        return True

    def update_stream(self, path: str, resource: BinaryIO, config: dict[str, Any] | None = None) -> bool:
        return self.update(path, resource.read(), config)

    def put(self, path: str, contents: bytes, config: dict[str, Any] | None = None) -> bool:
        if self.has(path):
            return self.update(path, contents, config)
        return self.write(path, contents, config)

    def put_stream(self, path: str, resource: BinaryIO, config: dict[str, Any] | None = None) -> bool:
        return self.put(path, resource.read(), config)

    def read_and_delete(self, path: str) -> bytes:
        contents = self.read(path)
        self.delete(path)
        return contents

    def rename(self, path: str, new_path: str) -> bool:
        path = normalize_path(path)
        new_path = normalize_path(new_path)
        self._assert_present(path)
        self._assert_absent(new_path)
        self._rename(path, new_path)
        logger.debug(f"Renamed {path} -> {new_path}")
        return True

    def copy(self, path: str, new_path: str) -> bool:
        path = normalize_path(path)
        new_path = normalize_path(new_path)
        self._assert_present(path)
        self._assert_absent(new_path)
        self._copy(path, new_path)
        logger.debug(f"Copied {path} -> {new_path}")
        return True

    def delete(self, path: str) -> bool:
        path = normalize_path(path)
        self._assert_present(path)
        self._delete(path)
        logger.debug(f"Deleted {path}")
        return True

    def delete_dir(self, dirname: str) -> bool:
        dirname = normalize_path(dirname)
        if not dirname:
            raise RootViolationError()
        return self._delete_dir(dirname)

    def create_dir(self, dirname: str, config: dict[str, Any] | None = None) -> bool:
        dirname = normalize_path(dirname)
        self._create_dir(dirname, self._visibility_option(config) or VISIBILITY_PUBLIC)
        return True

    def list_contents(self, directory: str = "", recursive: bool = False) -> list[Metadata]:
        directory = normalize_path(directory)
        return sorted(self._list_contents(directory, recursive), key=lambda m: m.path)

    def get_metadata(self, path: str) -> Metadata | None:
        path = normalize_path(path)
        self._assert_present(path)
        return self._get_metadata(path)

    def get_size(self, path: str) -> int | None:
        return self.get_metadata(path).size

    def get_mimetype(self, path: str) -> str | None:
        return self.get_metadata(path).mimetype

    def get_timestamp(self, path: str) -> int | None:
        return self.get_metadata(path).timestamp

    def get_visibility(self, path: str) -> str | None:
        return self.get_metadata(path).visibility

    def set_visibility(self, path: str, visibility: str) -> bool:
        path = normalize_path(path)
        self._assert_present(path)
        self._set_visibility(path, check_visibility(visibility))
        return True
