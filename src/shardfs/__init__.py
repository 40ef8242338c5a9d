"""shardfs - hash-sharded directory layout over pluggable storage backends."""

__version__ = "0.1.0"

# Make key components available at package level
from .core.config import ShardConfig
from .errors import (
    AlreadyExistsError,
    InvalidPathError,
    NotFoundError,
    RootViolationError,
    ShardFSError,
    StorageError,
)
from .services.sharded import ShardedFilesystem
from .services.storage.metadata import Metadata

__all__ = [
    "AlreadyExistsError",
    "InvalidPathError",
    "Metadata",
    "NotFoundError",
    "RootViolationError",
    "ShardConfig",
    "ShardFSError",
    "ShardedFilesystem",
    "StorageError",
    "__version__",
]
