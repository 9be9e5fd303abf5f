"""Rich console output utilities for the benchstage CLI.

Results are printed as JSON on stdout; status lines use Rich markup and
respect the NO_COLOR environment variable and the --no-color flag.
"""

from __future__ import annotations

import json
import os
from typing import Any

from pydantic import BaseModel
from rich.console import Console
from rich.table import Table

# Rich respects NO_COLOR on its own; --no-color is handled in set_no_color
_force_no_color = os.environ.get("NO_COLOR") is not None


def create_console(no_color: bool = False, *, stderr: bool = False) -> Console:
    """Create a Rich Console instance with appropriate color settings.

    Args:
        no_color: If True, disable colored output. Also respects NO_COLOR env var.
        stderr: If True, write to stderr instead of stdout.

    Returns:
        Configured Console instance.
    """
    force_terminal = None
    if no_color or _force_no_color:
        force_terminal = False
    return Console(
        force_terminal=force_terminal,
        no_color=no_color or _force_no_color,
        stderr=stderr,
    )


console = create_console()
err_console = create_console(stderr=True)


def success(message: str, **kwargs: Any) -> None:
    """Print a success message with green checkmark.

    Example:
        >>> success("Staged imdb/1mb")
        ✓ Staged imdb/1mb
    """
    err_console.print(f"[green]✓[/green] {message}", **kwargs)


def error(message: str, **kwargs: Any) -> None:
    """Print an error message with red X."""
    err_console.print(f"[red]✗[/red] {message}", **kwargs)


def warning(message: str, **kwargs: Any) -> None:
    """Print a warning message with yellow triangle."""
    err_console.print(f"[yellow]⚠[/yellow] {message}", **kwargs)


def print_json(data: BaseModel | dict[str, Any] | list[Any], **kwargs: Any) -> None:
    """Print a result as JSON on stdout.

    Pydantic models are dumped in JSON mode so datetimes and computed
    fields render the same way they serialize.

    Example:
        >>> print_json(manifest)
        {
          "dataset": "imdb",
          ...
        }
    """
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")
    console.print_json(json.dumps(data), **kwargs)


def print_datasets(datasets: list[dict[str, Any]]) -> None:
    """Render the dataset listing as a table."""
    table = Table(title="Datasets")
    table.add_column("id", style="bold")
    table.add_column("name")
    table.add_column("family")
    table.add_column("tables")
    table.add_column("description")
    for dataset in datasets:
        table.add_row(
            dataset["id"],
            dataset["name"],
            dataset["family"],
            ", ".join(dataset["tables"]),
            dataset["description"],
        )
    console.print(table)


def set_no_color(no_color: bool) -> None:
    """Update the global consoles to enable/disable colors."""
    global console, err_console
    console = create_console(no_color=no_color)
    err_console = create_console(no_color=no_color, stderr=True)
