"""best-of — Measure the execution time of commands."""

__version__ = "0.3.0"
