"""History and statistics commands."""

import typer

from studytrack.models.study_session import StudySubject
from studytrack.services.config_service import get_config_service
from studytrack.services.engine_factory import create_history
from studytrack.ui.formatters import (
    format_duration,
    format_error,
    format_output,
    render_progress_bar,
    simple_table,
)
from studytrack.utils.exit_codes import ERROR_INVALID_ARGS
from studytrack.utils.ui.console import get_console

console = get_console()

_OUTPUT_FORMATS = ("pretty", "json", "yaml")


def _resolve_output(output: str | None) -> str:
    if output is None:
        output = get_config_service().config.output.format
    if output not in _OUTPUT_FORMATS:
        format_error(f"Output must be one of: {', '.join(_OUTPUT_FORMATS)}")
        raise typer.Exit(ERROR_INVALID_ARGS)
    return output


def history(
    subject: str = typer.Option(None, "--subject", "-s", help="Filter by subject"),
    limit: int = typer.Option(20, "--limit", "-n", help="Number of sessions to show"),
    output: str = typer.Option(
        None, "--output", "-o", help="pretty, json or yaml (default: output.format)"
    ),
) -> None:
    """Show recorded study sessions, newest first."""
    output = _resolve_output(output)
    sessions = create_history().get_recent_sessions(limit=limit, subject=subject)

    if output != "pretty":
        format_output([s.to_dict() for s in sessions], output)
        return

    if not sessions:
        console.print("[yellow]No study sessions recorded[/yellow]")
        return

    rows = [
        [
            s.start_time.astimezone().strftime("%Y-%m-%d %H:%M"),
            s.subject[:30],
            str(s.pomodoro_cycles) if s.pomodoro_cycles else "—",
            format_duration(s.total_duration()),
        ]
        for s in sessions
    ]
    console.print(
        simple_table(
            f"Study Sessions ({len(sessions)})",
            ["Started", "Subject", "Pomodoros", "Duration"],
            rows,
        )
    )


def stats(
    days: int = typer.Option(7, "--days", "-d", help="Number of days to analyze"),
    output: str = typer.Option(
        None, "--output", "-o", help="pretty, json or yaml (default: output.format)"
    ),
) -> None:
    """Show study time totals, overall and per subject."""
    output = _resolve_output(output)
    session_history = create_history()
    recent = session_history.get_stats(days=days)
    summary = {
        "all_time_seconds": session_history.total_study_time(),
        "today": session_history.get_daily_summary(),
        "recent": recent,
    }

    if output != "pretty":
        format_output(summary, output)
        return

    console.print(f"\n[bold cyan]📊 Study Statistics (last {days} days)[/bold cyan]\n")
    console.print(f"Sessions: [bold]{recent['total_sessions']}[/bold]")
    console.print(f"Study time: [bold]{format_duration(recent['total_seconds'])}[/bold]")
    console.print(f"Average session: {format_duration(recent['avg_session_seconds'])}")
    console.print(f"Pomodoros: {recent['pomodoro_cycles']}")
    console.print(
        f"Today: {format_duration(summary['today']['total_seconds'])}"
        f"  •  All time: {format_duration(summary['all_time_seconds'])}\n"
    )

    by_subject = recent["by_subject"]
    if by_subject:
        top = max(by_subject.values())
        rows = [
            [name, render_progress_bar(seconds, top, 20), format_duration(seconds)]
            for name, seconds in sorted(by_subject.items(), key=lambda kv: -kv[1])
        ]
        console.print(simple_table("By Subject", ["Subject", "", "Time"], rows))


def subjects() -> None:
    """List preset study subjects."""
    for subject in StudySubject:
        console.print(f"• {subject.value}")
