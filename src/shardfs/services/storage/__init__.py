"""Storage backends for shardfs."""

from .base import BaseBackend, StorageBackend
from .local import LocalFileBackend
from .memory import InMemoryBackend
from .metadata import Metadata


def get_backend(backend_type: str = "local", **kwargs) -> StorageBackend:
    """Factory function to get a specific storage backend.

    Args:
        backend_type: One of "local", "memory"
        **kwargs: Backend-specific configuration

    Returns:
        Storage backend instance

    Raises:
        ValueError: If backend_type is unknown

    Examples:
        >>> backend = get_backend("local", root="/tmp/shards")
        >>> backend = get_backend("memory")
    """
    if backend_type == "local":
        return LocalFileBackend(**kwargs)
    elif backend_type == "memory":
        return InMemoryBackend()
    else:
        raise ValueError(f"Unknown backend type: {backend_type}")


__all__ = [
    "BaseBackend",
    "InMemoryBackend",
    "LocalFileBackend",
    "Metadata",
    "StorageBackend",
    "get_backend",
]
