"""In-memory storage backend for testing.

Thread-safe dict store with the same observable semantics as the local
filesystem backend: writing a file creates its parent directories, and
directories are listed alongside files.
"""

import mimetypes
import threading
import time
from dataclasses import dataclass

from ...errors import StorageError
from .base import BaseBackend
from .metadata import TYPE_DIR, TYPE_FILE, VISIBILITY_PUBLIC, Metadata


@dataclass
class _Blob:
    contents: bytes
    timestamp: int
    visibility: str


@dataclass
class _Dir:
    timestamp: int
    visibility: str


def _parents(path: str) -> list[str]:
    """All ancestor directories of path, outermost first."""
    parts = path.split("/")[:-1]
    return ["/".join(parts[: i + 1]) for i in range(len(parts))]


class InMemoryBackend(BaseBackend):
    """In-memory storage backend."""

    def __init__(self):
        """Initialize empty store with thread safety."""
        self._files: dict[str, _Blob] = {}
        self._dirs: dict[str, _Dir] = {}
        self._lock = threading.RLock()

    def _ensure_parents(self, path: str, now: int) -> None:
        for parent in _parents(path):
            if parent in self._files:
                raise StorageError(f"Parent of {path} is a file: {parent}")
            self._dirs.setdefault(parent, _Dir(now, VISIBILITY_PUBLIC))

    def _exists(self, path: str) -> bool:
        with self._lock:
            return path in self._files or path in self._dirs

    def _read(self, path: str) -> bytes:
        with self._lock:
            if path not in self._files:
                raise StorageError(f"Not a file: {path}")
            return self._files[path].contents

    def _write(self, path: str, contents: bytes, visibility: str | None) -> None:
        with self._lock:
            if path in self._dirs:
                raise StorageError(f"Path is a directory: {path}")
            now = int(time.time())
            self._ensure_parents(path, now)
            current = self._files.get(path)
            if visibility is None:
                visibility = current.visibility if current else VISIBILITY_PUBLIC
            self._files[path] = _Blob(bytes(contents), now, visibility)

    def _rename(self, path: str, new_path: str) -> None:
        with self._lock:
            if path not in self._files:
                raise StorageError(f"Not a file: {path}")
            self._ensure_parents(new_path, int(time.time()))
            self._files[new_path] = self._files.pop(path)

    def _copy(self, path: str, new_path: str) -> None:
        with self._lock:
            if path not in self._files:
                raise StorageError(f"Not a file: {path}")
            blob = self._files[path]
            self._ensure_parents(new_path, int(time.time()))
            self._files[new_path] = _Blob(blob.contents, blob.timestamp, blob.visibility)

    def _delete(self, path: str) -> None:
        with self._lock:
            if path not in self._files:
                raise StorageError(f"Not a file: {path}")
            del self._files[path]

    def _delete_dir(self, dirname: str) -> bool:
        with self._lock:
            if dirname not in self._dirs:
                return False
            prefix = dirname + "/"
            for store in (self._files, self._dirs):
                for key in [k for k in store if k == dirname or k.startswith(prefix)]:
                    del store[key]
            return True

    def _create_dir(self, dirname: str, visibility: str) -> None:
        with self._lock:
            if dirname in self._files:
                raise StorageError(f"Path is a file: {dirname}")
            now = int(time.time())
            self._ensure_parents(dirname, now)
            self._dirs.setdefault(dirname, _Dir(now, visibility))

    def _list_contents(self, directory: str, recursive: bool) -> list[Metadata]:
        with self._lock:
            prefix = directory + "/" if directory else ""
            paths = [p for p in (*self._dirs, *self._files) if p.startswith(prefix) and p != directory]
            if not recursive:
                paths = [p for p in paths if "/" not in p[len(prefix):]]
            return [self._get_metadata(p) for p in paths]

    def _get_metadata(self, path: str) -> Metadata:
        with self._lock:
            if path in self._dirs:
                entry = self._dirs[path]
                return Metadata.for_path(
                    path, TYPE_DIR, timestamp=entry.timestamp, visibility=entry.visibility
                )
            blob = self._files[path]
            return Metadata.for_path(
                path,
                TYPE_FILE,
                size=len(blob.contents),
                timestamp=blob.timestamp,
                visibility=blob.visibility,
                mimetype=mimetypes.guess_type(path)[0] or "application/octet-stream",
            )

    def _set_visibility(self, path: str, visibility: str) -> None:
        with self._lock:
            entry = self._files.get(path) or self._dirs[path]
            entry.visibility = visibility

    def clear(self) -> None:
        """Clear all data (useful for tests)."""
        with self._lock:
            self._files.clear()
            self._dirs.clear()
