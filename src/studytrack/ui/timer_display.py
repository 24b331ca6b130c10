"""Live timer display for study and Pomodoro sessions."""

from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from studytrack.models.study_session import StudySession
from studytrack.models.timer_mode import Paused, Pomodoro, Running, Stopped
from studytrack.services.timer_engine import EngineSnapshot

from .formatters import format_clock, format_duration, render_progress_bar


class TimerDisplay:
    """Renders engine snapshots as a rich panel."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def render(self, snapshot: EngineSnapshot) -> Panel:
        """Build the panel for one snapshot."""
        match snapshot.mode:
            case Running():
                title, color = "📚  Studying", "cyan"
            case Pomodoro(is_work_period=True):
                title, color = "🍅  Work", "red"
            case Pomodoro(is_work_period=False):
                title, color = "☕  Break", "green"
            case Paused():
                title, color = "⏸  Paused", "yellow"
            case Stopped():
                title, color = "Stopped", "dim"

        components = []
        session = snapshot.current_session
        if session is not None:
            components.append(Text(session.subject[:50], style="bold white", justify="center"))
            components.append(Text(""))

        if snapshot.phase_duration is not None:
            # Pomodoro counts down the phase
            clock = format_clock(snapshot.phase_remaining)
            bar = render_progress_bar(snapshot.elapsed_time, snapshot.phase_duration, 40)
        else:
            clock = format_clock(snapshot.elapsed_time)
            bar = None

        components.append(Text(clock, style=f"bold {color}", justify="center"))

        if bar is not None:
            components.append(Text(""))
            components.append(Text(bar, style="dim", justify="center"))

        if session is not None and session.pomodoro_cycles:
            components.append(Text(""))
            components.append(
                Text(
                    f"🍅 × {session.pomodoro_cycles}   cycles completed: {snapshot.completed_cycles}",
                    style="dim",
                    justify="center",
                )
            )

        return Panel(
            Align.center(Group(*components), vertical="middle"),
            title=Text(title, style=f"bold {color}"),
            subtitle=self._hints(snapshot),
            border_style=color,
            padding=(1, 4),
        )

    @staticmethod
    def _hints(snapshot: EngineSnapshot) -> str | None:
        match snapshot.mode:
            case Paused():
                return "'r' resume • 'q' finish"
            case Running() | Pomodoro():
                return "'p' pause • 'q' finish"
            case Stopped():
                return None


def show_session_summary(session: StudySession, console: Console | None = None) -> None:
    """Show a summary panel after a session has been recorded."""
    console = console or Console()

    lines = [
        "[bold green]🎉 Session recorded[/bold green]",
        "",
        f"Subject: {session.subject}",
        f"Duration: {format_duration(session.total_duration())}",
    ]
    if session.pomodoro_cycles:
        lines.append(f"Pomodoros: {session.pomodoro_cycles}")

    console.print(Panel("\n".join(lines), border_style="green", padding=(1, 2)))
