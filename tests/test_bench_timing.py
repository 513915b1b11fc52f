"""Tests for bestof.bench.timing — timing of a single trial."""

from __future__ import annotations

import subprocess
import unittest
from unittest.mock import patch

from bench_test_helpers import MISSING_COMMAND, MS, exit_command, python_command, sleep_command

from bestof.bench.results import STATUS_EXIT_ERROR, STATUS_LAUNCH_ERROR, STATUS_OK
from bestof.bench.timing import describe_exit, run_trial


class TestDescribeExit(unittest.TestCase):
    """Tests for describe_exit()."""

    def test_exit_status(self) -> None:
        self.assertEqual(describe_exit(2), "exit status 2")

    def test_signal(self) -> None:
        self.assertEqual(describe_exit(-9), "signal: terminated by signal 9")


class TestRunTrial(unittest.TestCase):
    """Tests for run_trial()."""

    def test_success(self) -> None:
        trial = run_trial(4, python_command("pass"), quiet=True)
        self.assertEqual(trial.index, 4)
        self.assertEqual(trial.status, STATUS_OK)
        self.assertEqual(trial.exit_code, 0)
        self.assertEqual(trial.error, "")
        self.assertFalse(trial.failed)
        self.assertGreater(trial.duration_ns, 0)

    def test_measures_wall_time(self) -> None:
        trial = run_trial(0, sleep_command(0.2), quiet=True)
        self.assertGreaterEqual(trial.duration_ns, 200 * MS)
        self.assertLess(trial.duration_ns, 5_000 * MS)

    def test_nonzero_exit(self) -> None:
        with self.assertLogs("bestof", level="ERROR") as cm:
            trial = run_trial(0, exit_command(5), quiet=True)
        self.assertEqual(trial.status, STATUS_EXIT_ERROR)
        self.assertEqual(trial.exit_code, 5)
        self.assertEqual(trial.error, "exit status 5")
        self.assertTrue(trial.failed)
        self.assertIn("exited with error: exit status 5", cm.output[0])

    def test_launch_failure(self) -> None:
        with self.assertLogs("bestof", level="ERROR") as cm:
            trial = run_trial(1, [MISSING_COMMAND], quiet=True)
        self.assertEqual(trial.status, STATUS_LAUNCH_ERROR)
        self.assertIsNone(trial.exit_code)
        self.assertGreaterEqual(trial.duration_ns, 0)
        self.assertIn("Failed to run command", cm.output[0])

    def test_quiet_discards_output(self) -> None:
        with patch("bestof.bench.timing.subprocess.run") as mock_run:
            mock_run.return_value = subprocess.CompletedProcess(["x"], 0)
            run_trial(0, ["x"], quiet=True)
        kwargs = mock_run.call_args.kwargs
        self.assertIs(kwargs["stdout"], subprocess.DEVNULL)
        self.assertIs(kwargs["stderr"], subprocess.DEVNULL)

    def test_not_quiet_inherits_output(self) -> None:
        with patch("bestof.bench.timing.subprocess.run") as mock_run:
            mock_run.return_value = subprocess.CompletedProcess(["x"], 0)
            run_trial(0, ["x", "arg"], quiet=False)
        args, kwargs = mock_run.call_args
        self.assertEqual(args[0], ["x", "arg"])
        self.assertIsNone(kwargs["stdout"])
        self.assertIsNone(kwargs["stderr"])

    def test_delay_sleeps_before_timer(self) -> None:
        with (
            patch("bestof.bench.timing.time.sleep") as mock_sleep,
            patch("bestof.bench.timing.subprocess.run") as mock_run,
        ):
            mock_run.return_value = subprocess.CompletedProcess(["x"], 0)
            run_trial(0, ["x"], quiet=True, delay_s=0.25)
        mock_sleep.assert_called_once_with(0.25)

    def test_no_sleep_without_delay(self) -> None:
        with (
            patch("bestof.bench.timing.time.sleep") as mock_sleep,
            patch("bestof.bench.timing.subprocess.run") as mock_run,
        ):
            mock_run.return_value = subprocess.CompletedProcess(["x"], 0)
            run_trial(0, ["x"], quiet=True)
        mock_sleep.assert_not_called()


if __name__ == "__main__":
    unittest.main()
