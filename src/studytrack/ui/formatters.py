"""Output formatters for the StudyTrack CLI."""

import json
from typing import Any

import yaml
from rich.table import Table

from studytrack.utils.ui.console import get_console

console = get_console()


def format_output(data: Any, output_format: str = "pretty") -> None:
    """Print *data* as JSON or YAML; other formats are left to the caller."""
    if output_format == "json":
        print(json.dumps(data, indent=2, default=str))
    elif output_format == "yaml":
        print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))
    else:
        raise ValueError(f"Unsupported output format: {output_format}")


def format_duration(seconds: float) -> str:
    """Format seconds as ``1h 05m``, ``12m 30s`` or ``45s``."""
    seconds = int(max(0, seconds))
    hours, rem = divmod(seconds, 3600)
    mins, secs = divmod(rem, 60)
    if hours > 0:
        return f"{hours}h {mins:02d}m"
    if mins > 0:
        return f"{mins}m {secs:02d}s"
    return f"{secs}s"


def format_clock(seconds: float) -> str:
    """Format seconds as ``MM:SS`` (or ``H:MM:SS`` past an hour)."""
    seconds = int(max(0, seconds))
    hours, rem = divmod(seconds, 3600)
    mins, secs = divmod(rem, 60)
    if hours:
        return f"{hours}:{mins:02d}:{secs:02d}"
    return f"{mins:02d}:{secs:02d}"


def render_progress_bar(value: float, max_value: float, width: int = 10) -> str:
    """Render a progress bar using block characters."""
    if max_value <= 0:
        ratio = 0.0
    else:
        ratio = min(value / max_value, 1.0)
    filled = int(ratio * width)
    return "█" * filled + "░" * (width - filled)


def simple_table(title: str, columns: list[str], rows: list[list[str]]) -> Table:
    """Build a rich table with the first column highlighted."""
    table = Table(title=title, show_header=True)
    for i, column in enumerate(columns):
        if i == 0:
            table.add_column(column, style="cyan")
        else:
            table.add_column(column, justify="right" if i == len(columns) - 1 else "left")
    for row in rows:
        table.add_row(*row)
    return table


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")
