"""Tests for bestof.bench.display — result lines and the progress bar."""

from __future__ import annotations

import io
import unittest

import click

from bestof.bench.display import (
    BAR_WIDTH,
    ProgressBar,
    format_result_line,
    format_results,
    render_progress_bar,
    stream_is_terminal,
)
from bestof.bench.results import Result


class TestFormatResultLine(unittest.TestCase):
    """Tests for format_result_line() and format_results()."""

    def test_plain(self) -> None:
        line = format_result_line(Result("Best", 1_500_000), "ms")
        self.assertEqual(line, "Best: 1.500000 milliseconds")

    def test_seconds(self) -> None:
        line = format_result_line(Result("95th percentile", 2_000_000_000), "s")
        self.assertEqual(line, "95th percentile: 2.000000 seconds")

    def test_colored_contains_ansi(self) -> None:
        line = format_result_line(Result("Worst", 1_000_000), "ms", use_colors=True)
        self.assertIn("\x1b[", line)
        self.assertEqual(click.unstyle(line), "Worst: 1.000000 milliseconds")

    def test_colors_by_label(self) -> None:
        red = format_result_line(Result("Worst", 1), "ns", use_colors=True)
        green = format_result_line(Result("Best", 1), "ns", use_colors=True)
        blue = format_result_line(Result("99th percentile", 1), "ns", use_colors=True)
        self.assertIn("\x1b[31m", red)
        self.assertIn("\x1b[32m", green)
        self.assertIn("\x1b[34m", blue)

    def test_unknown_unit_raises(self) -> None:
        with self.assertRaises(ValueError):
            format_result_line(Result("Best", 1), "weeks")

    def test_format_results_one_line_each(self) -> None:
        text = format_results([Result("Best", 1_000), Result("Worst", 2_000)], "us")
        self.assertEqual(
            text.splitlines(),
            ["Best: 1.000000 microseconds", "Worst: 2.000000 microseconds"],
        )


class TestRenderProgressBar(unittest.TestCase):
    """Tests for render_progress_bar()."""

    def test_empty(self) -> None:
        self.assertEqual(render_progress_bar(0, 10), "[" + " " * BAR_WIDTH + "] 0%")

    def test_half(self) -> None:
        frame = render_progress_bar(5, 10)
        self.assertEqual(frame, "[" + "=" * 25 + " " * 25 + "] 50%")

    def test_full(self) -> None:
        self.assertEqual(render_progress_bar(10, 10), "[" + "=" * BAR_WIDTH + "] 100%")

    def test_two_percent_per_character(self) -> None:
        # 1/3 → 33% → 16 characters
        frame = render_progress_bar(1, 3)
        self.assertEqual(frame.count("="), 16)
        self.assertTrue(frame.endswith("] 33%"))

    def test_colored(self) -> None:
        frame = render_progress_bar(10, 10, use_colors=True)
        self.assertIn("█", frame)
        self.assertEqual(click.unstyle(frame), "[" + "█" * BAR_WIDTH + "] 100%")


class TestProgressBar(unittest.TestCase):
    """Tests for ProgressBar."""

    def test_redraws_in_place_and_finishes_with_newline(self) -> None:
        out = io.StringIO()
        bar = ProgressBar(2, stream=out)
        bar.start()
        bar(1, 2)
        bar(2, 2)
        text = out.getvalue()
        self.assertEqual(text.count("\r"), 3)
        self.assertIn("] 0%", text)
        self.assertIn("] 50%", text)
        self.assertTrue(text.endswith("] 100%\n"))
        self.assertEqual(text.count("\n"), 1)

    def test_no_newline_before_complete(self) -> None:
        out = io.StringIO()
        ProgressBar(4, stream=out)(3, 4)
        self.assertNotIn("\n", out.getvalue())


class TestStreamIsTerminal(unittest.TestCase):
    def test_stringio_is_not_a_terminal(self) -> None:
        self.assertFalse(stream_is_terminal(io.StringIO()))


if __name__ == "__main__":
    unittest.main()
