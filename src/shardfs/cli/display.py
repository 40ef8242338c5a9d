"""Consolidated display utilities for CLI commands."""

from datetime import datetime
from typing import Any

from rich.console import Console
from rich.table import Table

from ..services.storage.metadata import Metadata

console = Console()
err_console = Console(stderr=True)


def success(message: str) -> None:
    """Print success message."""
    console.print(f"[green]✓ {message}[/green]")


def warning(message: str) -> None:
    """Print warning message."""
    err_console.print(f"[yellow]⚠️  {message}[/yellow]")


def error(message: str) -> None:
    """Print error message."""
    err_console.print(f"[red]❌ {message}[/red]")


def info(message: str) -> None:
    """Print info message."""
    console.print(message)


def section(title: str) -> None:
    """Print section header."""
    console.print(f"\n[bold]{title}[/bold]")


def info_dict(data: dict[str, Any], indent: str = "  ") -> None:
    """Print a dictionary as indented key-value pairs."""
    for key, value in data.items():
        console.print(f"{indent}{key}: {value}")


def _format_timestamp(timestamp: int | None) -> str:
    if timestamp is None:
        return "-"
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M:%S")


def metadata_table(entries: list[Metadata], title: str | None = None) -> Table:
    """Build a listing table for logical entries."""
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Type", style="dim", width=4)
    table.add_column("Path", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Modified")
    table.add_column("Visibility")

    for entry in entries:
        table.add_row(
            entry.type,
            entry.path + ("/" if entry.is_dir else ""),
            "-" if entry.size is None else str(entry.size),
            _format_timestamp(entry.timestamp),
            entry.visibility or "-",
        )
    return table


def metadata_details(entry: Metadata) -> dict[str, Any]:
    """Key-value view of a record for info_dict."""
    details = {
        "Path": entry.path,
        "Type": entry.type,
        "Basename": entry.basename,
        "Dirname": entry.dirname or "(root)",
        "Size": entry.size if entry.size is not None else "-",
        "MIME type": entry.mimetype or "-",
        "Modified": _format_timestamp(entry.timestamp),
        "Visibility": entry.visibility or "-",
    }
    if entry.inner is not None:
        details["Physical path"] = entry.inner.path
    return details
