"""Terminal display for session results.

Plain-text result lines, optionally colored, and the in-place
progress bar drawn while trials complete.
"""

from __future__ import annotations

import sys
import threading
from typing import TextIO

import click

from bestof.bench.results import Result
from bestof.formatting import convert_duration, unit_name

BAR_WIDTH = 50

# Label -> foreground color; anything else is blue.
_LABEL_COLORS: dict[str, str] = {
    "Best": "green",
    "Worst": "red",
    "Average": "yellow",
    "Median": "cyan",
}


def stream_is_terminal(stream: TextIO | None = None) -> bool:
    """True if *stream* (default stdout) is attached to a terminal."""
    stream = stream if stream is not None else sys.stdout
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


# ---------------------------------------------------------------------------
# Result lines
# ---------------------------------------------------------------------------


def format_result_line(result: Result, unit: str, *, use_colors: bool = False) -> str:
    """Format one result, e.g. ``'Best: 0.012345 seconds'``."""
    value = convert_duration(result.value_ns, unit)
    name = unit_name(unit)
    if not use_colors:
        return f"{result.label}: {value:.6f} {name}"

    color = _LABEL_COLORS.get(result.label, "blue")
    label = click.style(f"{result.label}:", fg=color, bold=True)
    number = click.style(f"{value:.6f}", fg=color)
    return f"{label} {number} {name}"


def format_results(results: list[Result], unit: str, *, use_colors: bool = False) -> str:
    """Format all results, one per line."""
    return "\n".join(format_result_line(r, unit, use_colors=use_colors) for r in results)


# ---------------------------------------------------------------------------
# Progress bar
# ---------------------------------------------------------------------------


def render_progress_bar(current: int, total: int, *, use_colors: bool = False) -> str:
    """Render one frame of the progress bar (without the leading ``\\r``).

    One character per 2% over a fixed width; the percentage is the
    integer part of ``current / total``.
    """
    percent = int(current / total * 100) if total else 100
    filled = min(percent // 2, BAR_WIDTH)

    if use_colors:
        bar = click.style("█" * filled, fg="green") + " " * (BAR_WIDTH - filled)
        return f"[{bar}] " + click.style(f"{percent}%", fg="yellow")
    return f"[{'=' * filled}{' ' * (BAR_WIDTH - filled)}] {percent}%"


class ProgressBar:
    """Redraws a progress bar in place as trials complete.

    Instances are callable with ``(completed, total)`` and can be
    passed directly as the scheduler's progress callback. Writes to
    stderr by default so stdout stays clean for results.
    """

    def __init__(
        self,
        total: int,
        *,
        use_colors: bool = False,
        stream: TextIO | None = None,
    ) -> None:
        self.total = total
        self.use_colors = use_colors
        self.stream = stream if stream is not None else sys.stderr
        self._lock = threading.Lock()

    def start(self) -> None:
        """Draw the initial empty frame."""
        self(0, self.total)

    def __call__(self, completed: int, total: int) -> None:
        with self._lock:
            frame = render_progress_bar(completed, total, use_colors=self.use_colors)
            self.stream.write("\r" + frame)
            if completed >= total:
                self.stream.write("\n")
            self.stream.flush()
