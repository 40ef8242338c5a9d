"""File commands operating on the logical view of a sharded store.

Plain functions; cli.main registers them as top-level commands.
"""

import sys
from pathlib import Path
from typing import Optional

import typer

from ..services.storage.metadata import VISIBILITY_PRIVATE, VISIBILITY_PUBLIC
from .common_options import config_option, directory_option, recursive_option, yes_option
from .display import console, info, info_dict, metadata_details, metadata_table, success, warning
from .utils import build_filesystem, handle_storage_errors, load_config


def locate(
    path: str = typer.Argument(..., help="Logical path"),
    is_directory: bool = directory_option(),
    config: Optional[Path] = config_option(),
):
    """Print the physical path a logical path maps to.

    Example:
        shardfs locate reports/2024/q1.pdf
        shardfs locate reports --dir
    """
    fs = build_filesystem(load_config(config))
    with handle_storage_errors():
        info(fs.locate(path, is_directory))


def list_contents(
    directory: str = typer.Argument("", help="Logical directory (default: root)"),
    recursive: bool = recursive_option(),
    config: Optional[Path] = config_option(),
):
    """List a logical directory."""
    fs = build_filesystem(load_config(config))
    with handle_storage_errors():
        entries = fs.list_contents(directory, recursive=recursive)

    if not entries:
        warning(f"No entries in '{directory or '/'}'")
        return
    console.print(metadata_table(entries, title=directory or "/"))


def stat(
    path: str = typer.Argument(..., help="Logical path"),
    is_directory: bool = directory_option(),
    config: Optional[Path] = config_option(),
):
    """Show metadata for a path."""
    fs = build_filesystem(load_config(config))
    with handle_storage_errors():
        metadata = fs.get_metadata(path, is_directory=is_directory)
    if metadata is None:
        warning(f"No metadata for '{path}'")
        raise typer.Exit(1)
    info_dict(metadata_details(metadata), indent="")


def cat(
    path: str = typer.Argument(..., help="Logical path"),
    config: Optional[Path] = config_option(),
):
    """Write a file's contents to stdout."""
    fs = build_filesystem(load_config(config))
    with handle_storage_errors():
        contents = fs.read(path)
    sys.stdout.buffer.write(contents)
    sys.stdout.flush()


def put(
    path: str = typer.Argument(..., help="Logical path"),
    source: Optional[Path] = typer.Option(
        None, "--file", "-f", help="Local file to upload (default: stdin)", exists=True, dir_okay=False
    ),
    text: Optional[str] = typer.Option(None, "--text", "-t", help="Literal contents"),
    private: bool = typer.Option(False, "--private", help="Store with private visibility"),
    config: Optional[Path] = config_option(),
):
    """Create or replace a file."""
    if source is not None and text is not None:
        raise typer.BadParameter("Use either --file or --text, not both")
    if source is not None:
        contents = source.read_bytes()
    elif text is not None:
        contents = text.encode("utf-8")
    else:
        contents = sys.stdin.buffer.read()

    fs = build_filesystem(load_config(config))
    visibility = VISIBILITY_PRIVATE if private else VISIBILITY_PUBLIC
    with handle_storage_errors():
        fs.put(path, contents, {"visibility": visibility})
    success(f"Stored {len(contents)} bytes at {path}")


def rm(
    path: str = typer.Argument(..., help="Logical path"),
    config: Optional[Path] = config_option(),
):
    """Delete a file."""
    fs = build_filesystem(load_config(config))
    with handle_storage_errors():
        fs.delete(path)
    success(f"Deleted {path}")


def mkdir(
    directory: str = typer.Argument(..., help="Logical directory"),
    config: Optional[Path] = config_option(),
):
    """Create a directory."""
    fs = build_filesystem(load_config(config))
    with handle_storage_errors():
        fs.create_dir(directory)
    success(f"Created {directory}")


def rmdir(
    directory: str = typer.Argument(..., help="Logical directory"),
    yes: bool = yes_option(),
    config: Optional[Path] = config_option(),
):
    """Delete a directory and everything below it."""
    if not yes and not typer.confirm(f"Delete '{directory}' and all of its contents?", default=False):
        warning("Nothing deleted")
        raise typer.Exit(0)

    fs = build_filesystem(load_config(config))
    with handle_storage_errors():
        deleted = fs.delete_dir(directory)
    if not deleted:
        warning(f"No directory at {directory}")
        raise typer.Exit(1)
    success(f"Deleted {directory}")


def mv(
    source: str = typer.Argument(..., help="Logical source path"),
    destination: str = typer.Argument(..., help="Logical destination path"),
    config: Optional[Path] = config_option(),
):
    """Rename a file."""
    fs = build_filesystem(load_config(config))
    with handle_storage_errors():
        fs.rename(source, destination)
    success(f"Renamed {source} -> {destination}")


def cp(
    source: str = typer.Argument(..., help="Logical source path"),
    destination: str = typer.Argument(..., help="Logical destination path"),
    config: Optional[Path] = config_option(),
):
    """Copy a file."""
    fs = build_filesystem(load_config(config))
    with handle_storage_errors():
        fs.copy(source, destination)
    success(f"Copied {source} -> {destination}")
