"""Logging setup for best-of.

Trial notices (launch failures, non-zero exits, the failed-trial
summary) are log records on the ``bestof`` logger. They go to stderr
so they never mix with the results printed on stdout, and are shown
in color when the session has colors enabled. An optional file
handler always logs at DEBUG without color.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

_LOGGER_NAME = "bestof"
_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
_CONSOLE_FORMAT = "%(levelname)-8s %(message)s"

_LEVEL_COLORS: dict[int, str] = {
    logging.ERROR: "red",
    logging.WARNING: "yellow",
}


class ConsoleFormatter(logging.Formatter):
    """Formatter that colors warnings and errors for a terminal."""

    def __init__(self, *, use_colors: bool = False) -> None:
        super().__init__(_CONSOLE_FORMAT)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        color = _LEVEL_COLORS.get(record.levelno)
        if self.use_colors and color:
            return click.style(text, fg=color)
        return text


def setup_logging(
    *,
    verbose: bool = False,
    use_colors: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure and return the ``bestof`` logger.

    Args:
        verbose: Show DEBUG records (per-trial timings) on the console.
        use_colors: Color warnings and errors on the console.
        log_file: If provided, also log at DEBUG to this path.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(logging.DEBUG if verbose else logging.INFO)
    console.setFormatter(ConsoleFormatter(use_colors=use_colors))
    logger.addHandler(console)

    if log_file is not None:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(fh)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a named child logger under the ``bestof`` namespace."""
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")
