"""Timing capture for a single trial.

Measures the wall-clock time from just before the child process is
started until it exits (or fails to start), using the monotonic
``time.perf_counter_ns`` clock.
"""

from __future__ import annotations

import subprocess
import time

from bestof.bench.results import (
    STATUS_EXIT_ERROR,
    STATUS_LAUNCH_ERROR,
    STATUS_OK,
    Trial,
)
from bestof.logging import get_logger

log = get_logger("timing")


def describe_exit(returncode: int) -> str:
    """Describe a non-zero return code the way a shell would."""
    if returncode < 0:
        return f"signal: terminated by signal {-returncode}"
    return f"exit status {returncode}"


def run_trial(
    index: int,
    command: list[str],
    *,
    quiet: bool = False,
    delay_s: float = 0.0,
) -> Trial:
    """Execute *command* once and time it.

    The delay is slept before the timer starts, so it never shows up
    in the measured duration. When *quiet* is set the child's stdout
    and stderr are discarded; otherwise they are inherited from the
    harness.

    A command that cannot be started or exits non-zero still yields a
    Trial with the elapsed time up to the failure; a notice is logged
    at ERROR.

    Args:
        index: 0-based trial number.
        command: Executable followed by its arguments.
        quiet: Discard the child's output.
        delay_s: Seconds to sleep before starting the timer.
    """
    if delay_s > 0:
        time.sleep(delay_s)

    stream = subprocess.DEVNULL if quiet else None
    trial = Trial(index=index)

    start = time.perf_counter_ns()
    try:
        proc = subprocess.run(
            command,
            stdin=subprocess.DEVNULL,
            stdout=stream,
            stderr=stream,
            check=False,
        )
    except OSError as exc:
        trial.duration_ns = time.perf_counter_ns() - start
        trial.status = STATUS_LAUNCH_ERROR
        trial.error = str(exc)
        log.error("Failed to run command: %s", exc)
        return trial
    trial.duration_ns = time.perf_counter_ns() - start

    trial.exit_code = proc.returncode
    if proc.returncode != 0:
        trial.status = STATUS_EXIT_ERROR
        trial.error = describe_exit(proc.returncode)
        log.error("Command %s exited with error: %s", command[0], trial.error)
    else:
        trial.status = STATUS_OK

    log.debug("Trial %d finished in %d ns (%s)", index, trial.duration_ns, trial.status)
    return trial
