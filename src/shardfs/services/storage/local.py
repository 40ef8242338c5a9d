"""Local filesystem backend.

Stores files below a root directory. Visibility maps onto POSIX
permission bits; writes go through a temp file and rename so readers
never see partial contents.
"""

import logging
import mimetypes
import shutil
import stat
from pathlib import Path
from typing import BinaryIO

from ...errors import StorageError
from ..storage_utils import atomic_rename, atomic_write
from .base import BaseBackend, normalize_path
from .metadata import TYPE_DIR, TYPE_FILE, VISIBILITY_PRIVATE, VISIBILITY_PUBLIC, Metadata

logger = logging.getLogger(__name__)

PERMISSIONS = {
    TYPE_FILE: {VISIBILITY_PUBLIC: 0o644, VISIBILITY_PRIVATE: 0o600},
    TYPE_DIR: {VISIBILITY_PUBLIC: 0o755, VISIBILITY_PRIVATE: 0o700},
}


class LocalFileBackend(BaseBackend):
    """Local filesystem backend implementation.

    Useful for:
    - Development and testing
    - Single-host deployments
    - Inspecting sharded layouts directly on disk
    """

    def __init__(self, root: str | Path = "/tmp/shardfs"):
        """Initialize local backend.

        Args:
            root: Base directory for storage (created if missing)
        """
        self.root = Path(root).expanduser()
        self.root.mkdir(parents=True, exist_ok=True)
        logger.info(f"Initialized local storage at: {self.root}")

    def _full(self, path: str) -> Path:
        return self.root / path if path else self.root

    def _relative(self, full: Path) -> str:
        return full.relative_to(self.root).as_posix()

    def _exists(self, path: str) -> bool:
        return self._full(path).exists()

    def _read(self, path: str) -> bytes:
        full = self._full(path)
        if not full.is_file():
            raise StorageError(f"Not a file: {path}")
        return full.read_bytes()

    def read_stream(self, path: str) -> BinaryIO:
        path = normalize_path(path)
        self._assert_present(path)
        full = self._full(path)
        if not full.is_file():
            raise StorageError(f"Not a file: {path}")
        return full.open("rb")

    def _write(self, path: str, contents: bytes, visibility: str | None) -> None:
        full = self._full(path)
        if full.is_dir():
            raise StorageError(f"Path is a directory: {path}")
        if visibility is None:
            visibility = self._visibility_of(full) if full.exists() else VISIBILITY_PUBLIC
        atomic_write(full, contents, mode=PERMISSIONS[TYPE_FILE][visibility])

    def _rename(self, path: str, new_path: str) -> None:
        atomic_rename(self._full(path), self._full(new_path))

    def _copy(self, path: str, new_path: str) -> None:
        src = self._full(path)
        if not src.is_file():
            raise StorageError(f"Not a file: {path}")
        dst = self._full(new_path)
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, dst)

    def _delete(self, path: str) -> None:
        full = self._full(path)
        if full.is_dir():
            raise StorageError(f"Path is a directory: {path}")
        full.unlink()

    def _delete_dir(self, dirname: str) -> bool:
        full = self._full(dirname)
        if not full.is_dir():
            return False
        shutil.rmtree(full)
        logger.debug(f"Deleted directory {dirname}")
        return True

    def _create_dir(self, dirname: str, visibility: str) -> None:
        full = self._full(dirname)
        if full.is_file():
            raise StorageError(f"Path is a file: {dirname}")
        full.mkdir(parents=True, exist_ok=True)
        full.chmod(PERMISSIONS[TYPE_DIR][visibility])

    def _list_contents(self, directory: str, recursive: bool) -> list[Metadata]:
        base = self._full(directory)
        if not base.is_dir():
            return []
        entries = base.rglob("*") if recursive else base.iterdir()
        return [
            self._get_metadata(self._relative(entry))
            for entry in entries
            if not self._is_temp_file(entry)
        ]

    @staticmethod
    def _is_temp_file(entry: Path) -> bool:
        # In-flight atomic_write temp files
        return entry.name.startswith(".") and entry.name.endswith(".tmp")

    def _get_metadata(self, path: str) -> Metadata:
        full = self._full(path)
        st = full.stat()
        visibility = self._visibility_of(full)
        if full.is_dir():
            return Metadata.for_path(
                path, TYPE_DIR, timestamp=int(st.st_mtime), visibility=visibility
            )
        return Metadata.for_path(
            path,
            TYPE_FILE,
            size=int(st.st_size),
            timestamp=int(st.st_mtime),
            visibility=visibility,
            mimetype=mimetypes.guess_type(full.name)[0] or "application/octet-stream",
        )

    def _set_visibility(self, path: str, visibility: str) -> None:
        full = self._full(path)
        entry_type = TYPE_DIR if full.is_dir() else TYPE_FILE
        full.chmod(PERMISSIONS[entry_type][visibility])

    @staticmethod
    def _visibility_of(full: Path) -> str:
        mode = stat.S_IMODE(full.stat().st_mode)
        return VISIBILITY_PUBLIC if mode & stat.S_IROTH else VISIBILITY_PRIVATE
