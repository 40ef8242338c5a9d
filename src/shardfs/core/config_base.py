"""YAML-backed pydantic models for shardfs configuration files.

Loading problems (missing file, bad YAML, invalid values) are reported on
stderr with rich and end the command with exit code 1; callers in the CLI
never see a traceback for a broken configuration file.
"""

from pathlib import Path
from typing import Any, NoReturn, TypeVar

import typer
import yaml
from pydantic import BaseModel, ValidationError
from rich.console import Console

from ..services.storage_utils import atomic_write

T = TypeVar("T", bound="ConfigModel")
console = Console(stderr=True)


def _fail(headline: str, *details: str) -> NoReturn:
    console.print(headline)
    for line in details:
        console.print(line)
    raise typer.Exit(1)


class ConfigModel(BaseModel):
    """Pydantic model that round-trips through a YAML file."""

    @classmethod
    def from_yaml(cls: type[T], path: Path) -> T:
        """Load and validate a configuration file.

        An empty file yields the model defaults.

        Raises:
            typer.Exit: If the file is missing, unreadable, not YAML, or invalid
        """
        data = cls._read_yaml(path)
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            cls._report_invalid(e, path)

    @classmethod
    def load_or_default(cls: type[T], path: Path | None, **defaults) -> T:
        """Load ``path`` when it exists, otherwise build from ``defaults``."""
        if path is not None and path.exists():
            return cls.from_yaml(path)
        return cls(**defaults)

    def to_yaml(self, path: Path) -> None:
        """Write the configuration, replacing any existing file atomically."""
        atomic_write(path, self.to_yaml_string().encode("utf-8"))

    def to_yaml_string(self) -> str:
        return yaml.safe_dump(self._plain(), default_flow_style=False, sort_keys=False)

    def _plain(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def _read_yaml(cls, path: Path) -> dict[str, Any]:
        if not path.exists():
            _fail(f"[red]Configuration file not found:[/red] {path}")
        try:
            data = yaml.safe_load(path.read_text())
        except yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            where = f"  Line {mark.line + 1}, Column {mark.column + 1}" if mark else ""
            _fail(f"[red]Invalid YAML syntax in:[/red] {path.name}", where, f"\n[dim]{e}[/dim]")
        except OSError as e:
            _fail(f"[red]Error reading configuration file:[/red] {path}", f"[dim]{e}[/dim]")

        if data is None:
            return {}
        if not isinstance(data, dict):
            _fail(f"[red]Expected a mapping at the top of[/red] {path.name}, got {type(data).__name__}")
        return data

    @classmethod
    def _report_invalid(cls, error: ValidationError, path: Path) -> NoReturn:
        lines = []
        for err in error.errors():
            field_path = " → ".join(str(loc) for loc in err["loc"]) or "(top level)"
            if err["type"] == "missing":
                lines.append(f"  [yellow]Missing required field:[/yellow] {field_path}")
            else:
                lines.append(f"  [yellow]{field_path}:[/yellow] {err['msg']}")
        lines.append("\n[dim]Sharding values must match the layout of any existing tree[/dim]")
        _fail(f"[red]Invalid {cls.__name__} configuration:[/red] {path.name}\n", *lines)
