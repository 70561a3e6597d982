"""Terminal rendering of the timer state."""

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .state import Phase, TimerState

_PHASE_COLORS = {
    Phase.IDLE: "dim",
    Phase.WORKING: "red",
    Phase.ON_BREAK: "green",
}


def progress_bar(fraction: float, width: int = 30) -> str:
    """Text progress bar for a fraction in [0, 1]."""
    fraction = min(1.0, max(0.0, fraction))
    filled = int(width * fraction)
    return "▓" * filled + "░" * (width - filled)


def render_status(state: TimerState) -> Panel:
    """Panel showing phase, countdown, task and progress."""
    color = _PHASE_COLORS[state.phase]
    if state.awaiting_reflection:
        heading = Text("Time's up!", style="bold red", justify="center")
    elif state.paused:
        heading = Text(f"{state.phase.label} (paused)", style="bold yellow", justify="center")
    else:
        heading = Text(state.phase.label, style=f"bold {color}", justify="center")

    components = [
        heading,
        Text(state.display_time, style=f"bold {color}", justify="center"),
    ]
    if state.current_task and state.phase != Phase.IDLE:
        components.append(Text(state.current_task[:50], style="dim", justify="center"))
    if state.phase != Phase.IDLE:
        pct = int(state.progress * 100)
        components.append(
            Text(f"{progress_bar(state.progress)}  {pct}%", style="dim", justify="center")
        )

    return Panel(Group(*components), title=state.title, border_style=color, padding=(0, 2))


def show_status(state: TimerState, console: Console) -> None:
    console.print(render_status(state))
