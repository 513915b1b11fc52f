"""Result data structures for a benchmarking session.

Hierarchy::

    SessionReport (one best-of invocation)
      → trials: list[Trial]      (index order, one per requested run)
      → results: list[Result]    (Best, Worst, Average, [percentiles])

All durations are integer nanoseconds.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

STATUS_OK = "ok"
STATUS_EXIT_ERROR = "exit_error"
STATUS_LAUNCH_ERROR = "launch_error"


# ---------------------------------------------------------------------------
# Trial-level result
# ---------------------------------------------------------------------------


@dataclass
class Trial:
    """One timed execution of the target command."""

    index: int  # 0-based, fixes the sample slot
    duration_ns: int = 0
    status: str = STATUS_OK  # "ok", "exit_error", "launch_error"
    exit_code: int | None = None  # None if the process never started
    error: str = ""

    @property
    def failed(self) -> bool:
        return self.status != STATUS_OK

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "index": self.index,
            "duration_ns": self.duration_ns,
            "status": self.status,
            "exit_code": self.exit_code,
            "error": self.error,
        }


# ---------------------------------------------------------------------------
# Summary statistic
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Result:
    """A labeled summary statistic, e.g. ``Result("Best", 1_250_000)``."""

    label: str
    value_ns: int

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "value_ns": self.value_ns}


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


@dataclass
class SessionReport:
    """Everything one benchmarking session produced."""

    trials: list[Trial] = field(default_factory=list)
    results: list[Result] = field(default_factory=list)

    @property
    def sample(self) -> list[int]:
        """Per-trial durations in trial index order."""
        return [t.duration_ns for t in self.trials]

    @property
    def failed_trials(self) -> int:
        return sum(1 for t in self.trials if t.failed)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "trials": [t.to_dict() for t in self.trials],
            "results": [r.to_dict() for r in self.results],
            "failed_trials": self.failed_trials,
        }
