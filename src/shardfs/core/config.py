"""shardfs configuration management.

Two layers live here:

- ``ShardConfig``: the immutable sharding parameters handed to a
  ``ShardedFilesystem`` at construction. It accepts either its own field
  names or the adapter option keys (``hash_parts_for_directories`` etc.)
  so the same options mapping that configures a backend can configure
  sharding.
- ``ShardFSConfig``: the YAML project configuration used by the CLI,
  stored in ~/.shardfs/config.yaml unless SHARDFS_CONFIG points elsewhere.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from ..errors import ConfigNotFoundError
from .config_base import ConfigModel

# Hex length of a SHA-1 digest; bucket substrings must fall inside it.
DIGEST_HEX_LENGTH = 40

CONFIG_HASH_PARTS_FOR_DIRECTORIES = "hash_parts_for_directories"
CONFIG_HASH_PARTS_FOR_FILES = "hash_parts_for_files"
CONFIG_HASH_PART_LENGTH_FOR_DIRECTORIES = "hash_part_length_for_directories"
CONFIG_HASH_PART_LENGTH_FOR_FILES = "hash_part_length_for_files"


class ShardConfig(BaseModel):
    """Sharding parameters, fixed for the lifetime of a filesystem.

    A fanout of 0 disables bucket levels for that role; the segment is
    still renamed with the marker.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    dir_fanout: int = Field(
        1, ge=0, validation_alias=AliasChoices("dir_fanout", CONFIG_HASH_PARTS_FOR_DIRECTORIES)
    )
    """Bucket levels prepended to a directory-role segment."""

    file_fanout: int = Field(
        3, ge=0, validation_alias=AliasChoices("file_fanout", CONFIG_HASH_PARTS_FOR_FILES)
    )
    """Bucket levels prepended to a leaf-role segment."""

    dir_prefix_len: int = Field(
        3,
        ge=0,
        validation_alias=AliasChoices("dir_prefix_len", CONFIG_HASH_PART_LENGTH_FOR_DIRECTORIES),
    )
    """Hex characters per directory bucket."""

    file_prefix_len: int = Field(
        2,
        ge=0,
        validation_alias=AliasChoices("file_prefix_len", CONFIG_HASH_PART_LENGTH_FOR_FILES),
    )
    """Hex characters per leaf bucket."""

    @model_validator(mode="after")
    def check_digest_bounds(self) -> "ShardConfig":
        """Every bucket must read a non-empty slice of the digest."""
        for role, fanout, length in (
            ("directory", self.dir_fanout, self.dir_prefix_len),
            ("file", self.file_fanout, self.file_prefix_len),
        ):
            if fanout == 0:
                continue
            if length == 0:
                raise ValueError(f"{role} prefix length must be positive when {role} fanout is {fanout}")
            if (fanout + 1) * length > DIGEST_HEX_LENGTH:
                raise ValueError(
                    f"{role} sharding reads past the digest: "
                    f"({fanout} + 1) * {length} > {DIGEST_HEX_LENGTH}"
                )
        return self

    @classmethod
    def from_options(cls, options: "ShardConfig | Mapping[str, Any] | None" = None) -> "ShardConfig":
        """Coerce adapter options into a ShardConfig.

        Args:
            options: None for defaults, an existing ShardConfig, or a mapping
                of field names / adapter option keys. Unrelated keys are ignored.

        Returns:
            ShardConfig instance
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        return cls.model_validate(dict(options))

    def params_for(self, is_directory: bool) -> tuple[int, int]:
        """Return (fanout, prefix length) for a role."""
        if is_directory:
            return self.dir_fanout, self.dir_prefix_len
        return self.file_fanout, self.file_prefix_len


class BackendConfig(BaseModel):
    """Storage backend selection."""

    type: Literal["local"] = "local"
    """Backend implementation. In-memory stores do not outlive a CLI command,
    so only persistent backends are offered here."""

    root: str | None = None
    """Root directory for the local backend (default: ~/.shardfs/data)."""


class ShardFSConfig(ConfigModel):
    """Main configuration model for the shardfs CLI."""

    backend: BackendConfig = Field(default_factory=BackendConfig)
    """Backend settings."""

    sharding: ShardConfig = Field(default_factory=ShardConfig)
    """Sharding parameters."""

    @classmethod
    def load(cls, path: Path | None = None) -> "ShardFSConfig":
        """Load configuration from file.

        Raises:
            ConfigNotFoundError: If configuration file doesn't exist
        """
        config_path = path or cls.get_config_path()
        if not config_path.exists():
            raise ConfigNotFoundError(
                f"Configuration not found at {config_path}\n"
                "Run 'shardfs config init' to create configuration"
            )
        return cls.from_yaml(config_path)

    @classmethod
    def load_or_create(cls, path: Path | None = None) -> "ShardFSConfig":
        """Load configuration from file or fall back to defaults."""
        return cls.load_or_default(path or cls.get_config_path())

    @staticmethod
    def get_config_path() -> Path:
        """Get the configuration file path."""
        from .paths import get_config_path

        return get_config_path()

    def save(self, path: Path | None = None) -> Path:
        """Save configuration, creating the parent directory if needed."""
        config_path = path or self.get_config_path()
        self.to_yaml(config_path)
        return config_path
