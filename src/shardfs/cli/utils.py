"""Shared utilities for CLI commands."""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer

from ..core.config import ShardFSConfig
from ..core.paths import DEFAULT_STORAGE_ROOT
from ..errors import ConfigNotFoundError, ShardFSError
from ..services.sharded import ShardedFilesystem
from ..services.storage import get_backend
from .display import error, info


def get_config_or_exit(path: Path | None = None, command_name: str | None = None) -> ShardFSConfig:
    """Load configuration or exit with a helpful message.

    Args:
        path: Explicit configuration file, if given
        command_name: Optional command name for better error context

    Raises:
        typer.Exit: If the configuration file doesn't exist
    """
    try:
        return ShardFSConfig.load(path)
    except ConfigNotFoundError as e:
        error(f"Error: {e}")
        if command_name:
            info(f"(Required for 'shardfs {command_name}')")
        raise typer.Exit(1)


def load_config(path: Path | None = None) -> ShardFSConfig:
    """Load configuration, falling back to defaults when no file exists."""
    if path is not None:
        return get_config_or_exit(path)
    return ShardFSConfig.load_or_create()


def build_filesystem(config: ShardFSConfig) -> ShardedFilesystem:
    """Create the sharded filesystem described by a configuration."""
    backend = get_backend(config.backend.type, root=config.backend.root or DEFAULT_STORAGE_ROOT)
    return ShardedFilesystem(backend, config.sharding)


@contextmanager
def handle_storage_errors() -> Iterator[None]:
    """Turn shardfs errors into a red message and exit code 1."""
    try:
        yield
    except ShardFSError as e:
        error(str(e))
        raise typer.Exit(1)
