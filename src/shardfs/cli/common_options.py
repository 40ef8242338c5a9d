"""Common Typer options shared across CLI commands."""

import typer


def config_option(help_text: str = "Configuration file (YAML)") -> typer.Option:
    """Create a standard configuration file option.

    Defaults to SHARDFS_CONFIG or ~/.shardfs/config.yaml when omitted.

    Args:
        help_text: Custom help text

    Returns:
        Configured Typer Option
    """
    return typer.Option(
        None,
        "--config",
        "-c",
        help=help_text,
        file_okay=True,
        dir_okay=False,
    )


def directory_option(help_text: str = "Address the path as a directory") -> typer.Option:
    """Create a standard directory-role flag."""
    return typer.Option(False, "--dir", "-d", help=help_text)


def recursive_option(help_text: str = "Recurse into subdirectories") -> typer.Option:
    """Create a standard recursive flag."""
    return typer.Option(False, "--recursive", "-r", help=help_text)


def yes_option(help_text: str = "Skip confirmation prompt") -> typer.Option:
    """Create a standard yes/skip confirmation option."""
    return typer.Option(False, "--yes", "-y", help=help_text)
