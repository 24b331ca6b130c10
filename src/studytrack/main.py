"""Main entry point for the StudyTrack CLI."""

import typer

from studytrack import __version__
from studytrack.commands import config
from studytrack.commands.history_command import history, stats, subjects
from studytrack.commands.session_commands import pomodoro, study
from studytrack.services.config_service import get_config_service
from studytrack.utils.ui.console import get_console

app = typer.Typer(
    name="studytrack",
    help="Track study sessions and Pomodoro cycles from the terminal",
    no_args_is_help=True,
)

console = get_console()


@app.callback()
def configure_output() -> None:
    # Applies output.color to the shared console
    console.no_color = not get_config_service().config.output.color


# Add subcommands
app.add_typer(config.app, name="config", help="Configuration management")

# Add top-level commands
app.command("study")(study)
app.command("pomodoro")(pomodoro)
app.command("history")(history)
app.command("stats")(stats)
app.command("subjects")(subjects)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]StudyTrack[/bold] version [cyan]{__version__}[/cyan]")


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
