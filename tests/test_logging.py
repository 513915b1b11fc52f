"""Tests for bestof.logging — logger setup."""

from __future__ import annotations

import logging
import tempfile
import unittest
from pathlib import Path

import click

from bestof.logging import ConsoleFormatter, get_logger, setup_logging


def _record(level: int, msg: str) -> logging.LogRecord:
    return logging.LogRecord("bestof.timing", level, __file__, 1, msg, None, None)


class TestSetupLogging(unittest.TestCase):
    """Tests for setup_logging() and get_logger()."""

    def tearDown(self) -> None:
        logger = logging.getLogger("bestof")
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    def test_console_levels(self) -> None:
        self.assertEqual(setup_logging().handlers[0].level, logging.INFO)
        self.assertEqual(setup_logging(verbose=True).handlers[0].level, logging.DEBUG)

    def test_reconfigure_replaces_handlers(self) -> None:
        setup_logging()
        logger = setup_logging()
        self.assertEqual(len(logger.handlers), 1)

    def test_console_uses_color_setting(self) -> None:
        logger = setup_logging(use_colors=True)
        formatter = logger.handlers[0].formatter
        self.assertIsInstance(formatter, ConsoleFormatter)
        self.assertTrue(formatter.use_colors)

    def test_log_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bestof.log"
            logger = setup_logging(use_colors=True, log_file=path)
            get_logger("timing").debug("trial detail")
            get_logger("timing").error("Failed to run command: boom")
            for handler in logger.handlers:
                handler.flush()
            text = path.read_text()
            self.tearDown()
        self.assertIn("trial detail", text)
        self.assertNotIn("\x1b[", text)

    def test_get_logger_namespace(self) -> None:
        self.assertEqual(get_logger("runner").name, "bestof.runner")


class TestConsoleFormatter(unittest.TestCase):
    """Tests for ConsoleFormatter."""

    def test_plain(self) -> None:
        text = ConsoleFormatter().format(_record(logging.ERROR, "Failed to run command: x"))
        self.assertEqual(text, "ERROR    Failed to run command: x")

    def test_error_is_red(self) -> None:
        text = ConsoleFormatter(use_colors=True).format(_record(logging.ERROR, "oops"))
        self.assertIn("\x1b[31m", text)
        self.assertEqual(click.unstyle(text), "ERROR    oops")

    def test_warning_is_yellow(self) -> None:
        text = ConsoleFormatter(use_colors=True).format(_record(logging.WARNING, "1 of 3 failed"))
        self.assertIn("\x1b[33m", text)

    def test_info_is_never_colored(self) -> None:
        text = ConsoleFormatter(use_colors=True).format(_record(logging.INFO, "hello"))
        self.assertEqual(text, "INFO     hello")


if __name__ == "__main__":
    unittest.main()
