"""Core configuration and paths for shardfs."""

from .config import BackendConfig, ShardConfig, ShardFSConfig

__all__ = ["BackendConfig", "ShardConfig", "ShardFSConfig"]
