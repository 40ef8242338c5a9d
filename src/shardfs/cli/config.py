"""Configuration management CLI commands."""

from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.syntax import Syntax

from ..core.config import BackendConfig, ShardConfig, ShardFSConfig
from .common_options import config_option, yes_option
from .display import console, error, info, section, success, warning
from .utils import get_config_or_exit

app = typer.Typer(help="Manage shardfs configuration")


@app.command()
def init(
    root: Optional[Path] = typer.Option(None, "--root", help="Root directory for the local backend"),
    dir_fanout: int = typer.Option(1, "--dir-fanout", help="Bucket levels for directories"),
    file_fanout: int = typer.Option(3, "--file-fanout", help="Bucket levels for files"),
    dir_prefix_len: int = typer.Option(3, "--dir-prefix-len", help="Hex characters per directory bucket"),
    file_prefix_len: int = typer.Option(2, "--file-prefix-len", help="Hex characters per file bucket"),
    config: Optional[Path] = config_option("Where to write the configuration"),
    yes: bool = yes_option("Overwrite an existing configuration without asking"),
):
    """Initialize configuration file.

    Sharding parameters cannot change once data has been written: the
    layout of an existing tree depends on them.

    Example:
        shardfs config init --root /srv/blobs --file-fanout 2
    """
    try:
        new_config = ShardFSConfig(
            backend=BackendConfig(root=str(root) if root else None),
            sharding=ShardConfig(
                dir_fanout=dir_fanout,
                file_fanout=file_fanout,
                dir_prefix_len=dir_prefix_len,
                file_prefix_len=file_prefix_len,
            ),
        )
    except ValidationError as e:
        error("Invalid configuration")
        for err in e.errors():
            info(f"  {' → '.join(str(loc) for loc in err['loc'])}: {err['msg']}")
        raise typer.Exit(1)

    config_path = config or ShardFSConfig.get_config_path()
    if config_path.exists() and not yes:
        overwrite = typer.confirm(f"{config_path} already exists. Overwrite?", default=False)
        if not overwrite:
            warning("Configuration not saved")
            raise typer.Exit(0)

    new_config.save(config_path)
    success(f"Configuration saved to {config_path}")


@app.command()
def show(config: Optional[Path] = config_option()):
    """Display current configuration."""
    loaded = get_config_or_exit(config, "config show")
    config_path = config or ShardFSConfig.get_config_path()

    syntax = Syntax(loaded.to_yaml_string(), "yaml", theme="monokai", line_numbers=False)
    section(f"Configuration from {config_path}")
    console.print(syntax)


@app.command()
def path():
    """Print the configuration file location."""
    info(str(ShardFSConfig.get_config_path()))
