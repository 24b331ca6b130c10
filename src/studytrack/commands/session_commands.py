"""Study and Pomodoro session commands.

Both commands host a SessionTimerEngine on an asyncio event loop, render its
snapshots live and record the session when it finishes or is interrupted.
"""

import asyncio
from collections.abc import Callable

import typer
from rich.live import Live

from studytrack.models.study_session import StudySession
from studytrack.services.engine_factory import create_engine
from studytrack.services.timer_engine import EngineSnapshot, SessionTimerEngine
from studytrack.ui.formatters import format_warning
from studytrack.ui.keyboard import KeyboardHandler
from studytrack.ui.timer_display import TimerDisplay, show_session_summary
from studytrack.utils.exit_codes import ERROR_INVALID_ARGS
from studytrack.utils.logger import get_logger
from studytrack.utils.ui.console import get_console

console = get_console()
logger = get_logger("cli")

_POLL_SECONDS = 0.1


async def drive_engine(
    engine: SessionTimerEngine,
    start: Callable[[], object],
    finished: Callable[[EngineSnapshot], bool],
    finish: Callable[[], None],
    display: TimerDisplay | None = None,
) -> None:
    """
    Run *start* on the event loop and keep ticking until *finished* says so.

    *finish* ends the session; it runs on the loop before this coroutine
    returns, including when the run is cancelled by Ctrl-C.

    Keys: 'p' pauses, 'r' resumes, 'q' or 's' finishes early.
    """
    display = display or TimerDisplay(console)
    done = asyncio.Event()
    keyboard = KeyboardHandler()

    try:
        with Live(
            display.render(engine.snapshot()),
            console=console,
            refresh_per_second=4,
            transient=True,
        ) as live:

            def on_change(snapshot: EngineSnapshot) -> None:
                live.update(display.render(snapshot))
                if finished(snapshot):
                    done.set()

            unsubscribe = engine.subscribe(on_change)
            try:
                start()
                while not done.is_set():
                    key = keyboard.get_key()
                    if key == "p":
                        engine.pause_session()
                    elif key == "r":
                        engine.resume_session()
                    elif key in ("q", "s"):
                        break
                    try:
                        await asyncio.wait_for(done.wait(), _POLL_SECONDS)
                    except asyncio.TimeoutError:
                        continue
            finally:
                unsubscribe()
                finish()
    finally:
        keyboard.stop()


def _run(engine: SessionTimerEngine, start, finished, finish) -> None:
    try:
        asyncio.run(drive_engine(engine, start, finished, finish))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        logger.info("Session interrupted by user")
        # No-op when the session already ended while the loop unwound
        finish()


def study(
    subject: str = typer.Argument(..., help="What you are studying"),
    minutes: float = typer.Option(
        None, "--minutes", "-m", help="Stop automatically after this many minutes"
    ),
) -> None:
    """Time a study session; Ctrl-C or 'q' ends it."""
    if minutes is not None and minutes <= 0:
        console.print("[red]--minutes must be positive[/red]")
        raise typer.Exit(ERROR_INVALID_ARGS)

    engine = create_engine()
    limit = minutes * 60 if minutes is not None else None
    recorded: list[StudySession] = []

    def finished(snapshot: EngineSnapshot) -> bool:
        return limit is not None and snapshot.elapsed_time >= limit

    def finish() -> None:
        try:
            session = engine.end_current_session()
        except RuntimeError as e:
            format_warning(f"Session was not recorded: {e}")
            return
        if session is not None:
            recorded.append(session)

    console.print(f"[bold green]📚 Studying {subject}[/bold green]")
    _run(engine, lambda: engine.start_new_session(subject), finished, finish)

    if recorded:
        show_session_summary(recorded[-1], console)


def pomodoro(
    work: float = typer.Option(None, "--work", "-w", help="Work phase in minutes"),
    break_: float = typer.Option(None, "--break", "-b", help="Break phase in minutes"),
    cycles: int = typer.Option(
        0, "--cycles", "-c", help="Stop after this many work/break cycles (0 = no limit)"
    ),
) -> None:
    """Run Pomodoro work/break cycles; Ctrl-C or 'q' ends the session."""
    for name, value in (("--work", work), ("--break", break_)):
        if value is not None and value <= 0:
            console.print(f"[red]{name} must be positive[/red]")
            raise typer.Exit(ERROR_INVALID_ARGS)
    if cycles < 0:
        console.print("[red]--cycles cannot be negative[/red]")
        raise typer.Exit(ERROR_INVALID_ARGS)

    engine = create_engine()
    if work is not None:
        engine.work_duration = work * 60
    if break_ is not None:
        engine.break_duration = break_ * 60
    recorded: list[tuple[StudySession, int]] = []

    def finished(snapshot: EngineSnapshot) -> bool:
        return cycles > 0 and snapshot.completed_cycles >= cycles

    def finish() -> None:
        completed = engine.completed_cycles
        try:
            session = engine.stop_pomodoro()
        except RuntimeError as e:
            format_warning(f"Session was not recorded: {e}")
            return
        if session is not None:
            recorded.append((session, completed))

    console.print(
        f"[bold red]🍅 Pomodoro[/bold red] "
        f"{engine.work_duration / 60:g}m work / {engine.break_duration / 60:g}m break"
    )
    _run(engine, engine.start_pomodoro, finished, finish)

    if recorded:
        session, completed = recorded[-1]
        show_session_summary(session, console)
        console.print(f"[dim]Cycles completed: {completed}[/dim]")
