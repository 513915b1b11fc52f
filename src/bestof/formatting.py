"""Shared duration helpers for best-of.

Provides unit conversion for reported durations, parsing of
human-written delay values such as ``250ms`` or ``1m30s``, and a
compact human-readable formatter for log lines.
"""

from __future__ import annotations

import math
import re

NS_PER_SECOND = 1_000_000_000

# Output unit code -> (nanoseconds per unit, display name).
UNITS: dict[str, tuple[int, str]] = {
    "m": (60 * NS_PER_SECOND, "minutes"),
    "s": (NS_PER_SECOND, "seconds"),
    "ms": (1_000_000, "milliseconds"),
    "us": (1_000, "microseconds"),
    "ns": (1, "nanoseconds"),
}

# Suffixes accepted by parse_duration, in seconds.
_DURATION_SUFFIXES: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def _check_unit(unit: str) -> tuple[int, str]:
    try:
        return UNITS[unit]
    except KeyError:
        valid = ", ".join(UNITS)
        raise ValueError(f"Unknown output format: {unit!r} (expected one of: {valid})") from None


def convert_duration(duration_ns: int, unit: str) -> float:
    """Convert a duration in nanoseconds to a float in *unit*.

    Raises:
        ValueError: If *unit* is not one of :data:`UNITS`.
    """
    per_unit, _ = _check_unit(unit)
    return duration_ns / per_unit


def unit_name(unit: str) -> str:
    """Return the display name of an output unit (``"ms"`` -> ``"milliseconds"``)."""
    return _check_unit(unit)[1]


def parse_duration(text: str | float | int) -> float:
    """Parse a delay value into seconds.

    Accepts Go-style duration strings made of one or more
    ``<number><unit>`` parts (``"250ms"``, ``"1m30s"``, ``"1.5s"``),
    ``"0"``, or a bare number meaning seconds.

    Raises:
        ValueError: If the value is malformed or negative.
    """
    if isinstance(text, (int, float)):
        if not math.isfinite(text):
            raise ValueError(f"Invalid duration: {text!r}")
        if text < 0:
            raise ValueError(f"Duration cannot be negative: {text}")
        return float(text)

    value = text.strip()
    if not value:
        raise ValueError("Duration cannot be empty.")
    if value.startswith("-"):
        raise ValueError(f"Duration cannot be negative: {text}")
    value = value.lstrip("+")

    try:
        seconds = float(value)
    except ValueError:
        pass
    else:
        if not math.isfinite(seconds):
            raise ValueError(f"Invalid duration: {text!r}")
        return seconds

    total = 0.0
    pos = 0
    for match in _DURATION_PART.finditer(value):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _DURATION_SUFFIXES[match.group(2)]
        pos = match.end()
    if pos == 0 or pos != len(value):
        raise ValueError(f"Invalid duration: {text!r}")
    return total


def format_duration(seconds: float) -> str:
    """Format seconds with an adaptive unit.

    Examples: ``'850ns'``, ``'12.40ms'``, ``'3.21s'``, ``'2m05s'``.
    """
    if seconds < 1e-6:
        return f"{seconds * 1e9:.0f}ns"
    if seconds < 1e-3:
        return f"{seconds * 1e6:.0f}µs"
    if seconds < 1:
        return f"{seconds * 1000:.2f}ms"
    if seconds < 60:
        return f"{seconds:.2f}s"
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}m{secs:02d}s"
