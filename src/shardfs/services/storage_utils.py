"""Storage utilities for atomic operations and safe file handling."""

import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def atomic_write(path: str | Path, content: bytes, mode: int | None = None) -> None:
    """Write file atomically using temp file + rename.

    Readers never see partial writes. The file is written next to its
    target then renamed over it.

    Args:
        path: Target file path
        content: Bytes to write
        mode: Optional permission bits applied before the rename

    Raises:
        OSError: If write or rename fails
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    # Temp file in the same directory so the rename stays on one filesystem
    with tempfile.NamedTemporaryFile(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
    ) as tmp:
        tmp_path = Path(tmp.name)
        try:
            tmp.write(content)
            tmp.flush()
            os.fsync(tmp.fileno())
            if mode is not None:
                os.chmod(tmp_path, mode)

            tmp_path.replace(path)
            logger.debug(f"Atomically wrote {len(content)} bytes to {path}")

        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise


def atomic_rename(src: str | Path, dst: str | Path) -> None:
    """Atomically rename/move a file, creating the destination directory.

    Args:
        src: Source path
        dst: Destination path
    """
    src = Path(src)
    dst = Path(dst)
    dst.parent.mkdir(parents=True, exist_ok=True)
    src.replace(dst)
