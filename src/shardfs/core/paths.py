"""Centralized path management for shardfs.

All default locations used by the CLI come from here.
"""

import os
from pathlib import Path

SHARDFS_HOME = Path.home() / ".shardfs"

# Configuration file
CONFIG_FILE = SHARDFS_HOME / "config.yaml"

# Default root for the local backend when none is configured
DEFAULT_STORAGE_ROOT = SHARDFS_HOME / "data"


def get_config_path() -> Path:
    """Resolve the configuration file path.

    SHARDFS_CONFIG takes precedence over ~/.shardfs/config.yaml.

    Returns:
        Path to the configuration file (may not exist)
    """
    override = os.environ.get("SHARDFS_CONFIG", "").strip()
    if override:
        return Path(override).expanduser()
    return CONFIG_FILE
