"""Error types for shardfs."""


class ShardFSError(Exception):
    """Base exception for shardfs errors."""
    pass


class StorageError(ShardFSError):
    """Generic storage backend failure."""
    pass


class NotFoundError(StorageError):
    """Path does not exist in the backend."""

    def __init__(self, path: str, message: str | None = None):
        self.path = path
        super().__init__(message or f"File not found at path: {path}")


class AlreadyExistsError(StorageError):
    """Path already exists in the backend."""

    def __init__(self, path: str, message: str | None = None):
        self.path = path
        super().__init__(message or f"File already exists at path: {path}")


class RootViolationError(StorageError):
    """Attempt to delete the storage root."""

    def __init__(self, message: str | None = None):
        super().__init__(message or "Root directories can not be deleted")


class InvalidPathError(ShardFSError, ValueError):
    """Logical path cannot be represented in a sharded tree."""
    pass


class MalformedShardEntryError(ShardFSError):
    """Physical record carries no marked segment (foreign or corrupt entry)."""
    pass


class ConfigError(ShardFSError):
    """Configuration error."""
    pass


class ConfigNotFoundError(ConfigError):
    """Raised when configuration file is not found."""
    pass
