"""Configuration management commands."""

import typer
from rich.prompt import Confirm

from studytrack.services.config_service import get_config_service
from studytrack.ui.formatters import format_error, format_output, format_success
from studytrack.utils.exit_codes import ERROR_GENERAL, ERROR_INVALID_ARGS, ERROR_NOT_FOUND
from studytrack.utils.ui.console import get_console

app = typer.Typer(help="Configuration management commands")
console = get_console()


@app.command("show")
def show_config(
    output: str = typer.Option(
        None, "--output", "-o", help="json or yaml (default: output.format)"
    ),
) -> None:
    """Show the current configuration."""
    svc = get_config_service()
    output = output or svc.config.output.format
    if output == "pretty":
        output = "yaml"
    try:
        format_output(svc.config.model_dump(), output)
    except ValueError as e:
        format_error(str(e))
        raise typer.Exit(ERROR_INVALID_ARGS) from e


@app.command("get")
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., timer.work_minutes)"),
) -> None:
    """Get a configuration value."""
    try:
        value = get_config_service().get(key)
    except KeyError as e:
        format_error(f"Configuration key '{key}' not found")
        raise typer.Exit(ERROR_NOT_FOUND) from e
    console.print(value)


@app.command("set")
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., timer.work_minutes)"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """Set a configuration value."""
    try:
        get_config_service().set(key, value)
    except KeyError as e:
        format_error(f"Configuration key '{key}' not found")
        raise typer.Exit(ERROR_NOT_FOUND) from e
    except ValueError as e:
        format_error(f"Invalid value for '{key}': {e}")
        raise typer.Exit(ERROR_INVALID_ARGS) from e
    except RuntimeError as e:
        format_error(str(e))
        raise typer.Exit(ERROR_GENERAL) from e
    format_success(f"Configuration '{key}' set to '{value}'")


@app.command("reset")
def reset_config(
    key: str = typer.Argument(None, help="Configuration key to reset"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if not yes:
        target = f"'{key}'" if key else "all settings"
        if not Confirm.ask(f"Reset {target} to defaults?", default=False):
            console.print("[dim]Cancelled[/dim]")
            return

    try:
        get_config_service().reset(key)
    except KeyError as e:
        format_error(f"Configuration key '{key}' not found")
        raise typer.Exit(ERROR_NOT_FOUND) from e
    except RuntimeError as e:
        format_error(str(e))
        raise typer.Exit(ERROR_GENERAL) from e
    format_success("Configuration reset")
