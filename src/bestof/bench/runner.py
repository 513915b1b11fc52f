"""Concurrent trial scheduler.

Orchestrates:
1. Configuration validation (fatal errors abort before any trial)
2. Bounded-parallel execution of N trials, one thread per trial,
   gated by a semaphore of ``concurrency`` permits
3. Progress reporting in completion order
4. Summary statistics over the collected sample

Each trial thread owns exactly one pre-allocated slot of the result
list, so the only synchronized state is the permit pool and the
progress counter. The scheduler returns once every permit has been
handed back, which is the join barrier for the session.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from bestof.bench.config import SessionConfig, check_config
from bestof.bench.results import STATUS_LAUNCH_ERROR, SessionReport, Trial
from bestof.bench.stats import summarize
from bestof.bench.timing import run_trial
from bestof.formatting import format_duration

log = logging.getLogger("bestof")

# Called as progress(completed, total) once per finished trial.
ProgressCallback = Callable[[int, int], None]


# ---------------------------------------------------------------------------
# TrialScheduler
# ---------------------------------------------------------------------------


class TrialScheduler:
    """Runs the trials of a session with at most ``concurrency`` in flight.

    Usage::

        config = SessionConfig(command=["sleep", "0.1"], trials=5, concurrency=2)
        trials = TrialScheduler(config).run()
    """

    def __init__(
        self,
        config: SessionConfig,
        progress_callback: ProgressCallback | None = None,
    ) -> None:
        self.config = config
        self.progress = progress_callback
        self._progress_lock = threading.Lock()
        self._completed = 0

    def run(self) -> list[Trial]:
        """Execute every trial and return them in index order.

        Raises:
            ValueError: If the trial count, concurrency or delay is invalid.
        """
        config = self.config
        if config.trials < 1:
            raise ValueError(f"Number of runs must be at least 1 (got {config.trials}).")
        if config.concurrency < 1:
            raise ValueError(f"Concurrency must be at least 1 (got {config.concurrency}).")
        if config.delay_s < 0:
            raise ValueError(f"Wait time cannot be negative (got {config.delay_s}).")
        if not config.command:
            raise ValueError("No command given to benchmark.")

        log.debug(
            "Running %s %d times (concurrency %d, wait %.3fs)",
            config.program,
            config.trials,
            config.concurrency,
            config.delay_s,
        )

        started = time.monotonic()
        self._permits = threading.BoundedSemaphore(config.concurrency)
        slots: list[Trial | None] = [None] * config.trials
        self._completed = 0

        for index in range(config.trials):
            # Wait for a free slot.
            self._permits.acquire()
            thread = threading.Thread(
                target=self._run_one,
                args=(index, slots),
                name=f"bestof-trial-{index}",
                daemon=True,
            )
            try:
                thread.start()
            except BaseException:
                self._permits.release()
                raise

        # Join barrier: every permit comes back only after its trial finished.
        for _ in range(config.concurrency):
            self._permits.acquire()
        for _ in range(config.concurrency):
            self._permits.release()

        trials = [trial for trial in slots if trial is not None]
        if len(trials) != config.trials:
            raise RuntimeError(f"Only {len(trials)} of {config.trials} trials were recorded.")
        log.debug("Ran %d trials in %s", len(trials), format_duration(time.monotonic() - started))
        return trials

    def _run_one(self, index: int, slots: list[Trial | None]) -> None:
        """Thread body: time one trial, record it, report progress."""
        try:
            try:
                trial = run_trial(
                    index,
                    self.config.command,
                    quiet=self.config.quiet,
                    delay_s=self.config.delay_s,
                )
            except Exception as exc:  # noqa: BLE001
                log.error("Trial %d failed unexpectedly: %s", index, exc)
                trial = Trial(index=index, status=STATUS_LAUNCH_ERROR, error=str(exc))
            slots[index] = trial
            self._advance_progress()
        finally:
            self._permits.release()

    def _advance_progress(self) -> None:
        with self._progress_lock:
            self._completed += 1
            if self.progress is not None:
                self.progress(self._completed, self.config.trials)


# ---------------------------------------------------------------------------
# Functional entry points
# ---------------------------------------------------------------------------


def run_trials(
    config: SessionConfig,
    progress_callback: ProgressCallback | None = None,
) -> list[Trial]:
    """Run all trials described by *config*; see :class:`TrialScheduler`."""
    return TrialScheduler(config, progress_callback).run()


def schedule(
    command: str,
    args: list[str],
    trial_count: int,
    concurrency_limit: int,
    quiet: bool = False,
    inter_trial_delay: float = 0.0,
    progress_callback: ProgressCallback | None = None,
) -> list[int]:
    """Run ``command args...`` *trial_count* times and return the sample.

    Returns:
        Per-trial durations in nanoseconds, indexed by trial number.
        Failed trials are included with their elapsed time.
    """
    config = SessionConfig(
        command=[command, *args],
        trials=trial_count,
        concurrency=concurrency_limit,
        quiet=quiet,
        delay_s=inter_trial_delay,
    )
    return [t.duration_ns for t in run_trials(config, progress_callback)]


def run_session(
    config: SessionConfig,
    progress_callback: ProgressCallback | None = None,
    *,
    validate: bool = True,
) -> SessionReport:
    """Validate *config*, run every trial and summarize the sample.

    Pass ``validate=False`` when the caller already ran
    :func:`~bestof.bench.config.check_config`.

    Raises:
        ValueError: If the configuration is invalid. No trial is run.
    """
    if validate:
        check_config(config)

    trials = run_trials(config, progress_callback)
    report = SessionReport(trials=trials)
    report.results = summarize(
        report.sample,
        config.percentiles,
        method=config.percentile_method,
    )

    if report.failed_trials:
        log.warning("%d of %d trials failed", report.failed_trials, len(trials))
    return report
