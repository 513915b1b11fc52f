"""Benchmarking core for best-of.

Runs a command a fixed number of times with bounded concurrency and
summarizes the measured wall-clock durations.
"""
