"""shardfs CLI entry point."""

import logging
import os
import sys

import typer

from .display import error, info, warning

# Create main CLI app
app = typer.Typer(
    name="shardfs",
    help="Hash-sharded directory layout over pluggable storage backends",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

# Import sub-commands
from . import config as config_cli, files  # noqa: E402

app.add_typer(config_cli.app, name="config", help="⚙️ Configure shardfs settings")

# File commands live at the top level (shardfs ls, shardfs put, ...)
app.command()(files.locate)
app.command(name="ls")(files.list_contents)
for command in (files.stat, files.cat, files.put, files.rm, files.mkdir, files.rmdir, files.mv, files.cp):
    app.command()(command)


@app.callback()
def configure_logging(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
):
    """Hash-sharded directory layout over pluggable storage backends."""
    level = "DEBUG" if verbose else os.getenv("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


@app.command()
def version():
    """Show shardfs version."""
    from ..versions import get_version

    info(f"shardfs version: {get_version()}")


def main():
    """Main CLI entry point."""
    try:
        app()
    except KeyboardInterrupt:
        warning("\nInterrupted by user")
        raise typer.Exit(1)
    except Exception as e:
        error(f"Error: {e}")
        raise typer.Exit(1)


if __name__ == "__main__":
    main()
