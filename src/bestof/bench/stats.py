"""Summary statistics over a duration sample.

Computes best (minimum), worst (maximum), integer average and
percentiles of per-trial durations, and assembles them into the
ordered :class:`~bestof.bench.results.Result` list that the
presentation layer renders.

Percentiles use linear interpolation between adjacent order
statistics. Two index conventions are supported:

``linear`` (default)
    ``k = p/100 * (n - 1)``. Equivalent to numpy.percentile with
    method='linear'; the 50th percentile is the conventional median
    for both odd and even ``n``.

``rank``
    ``k = p/100 * n``. When ``k`` is a whole number the order
    statistic at ``k`` is returned (clamped to the last element for
    the 100th percentile); otherwise the value is interpolated
    between positions ``floor(k)`` and ``floor(k) + 1``, falling back
    to the last element at the top of the range.
"""

from __future__ import annotations

import math
from typing import Sequence

from bestof.bench.results import Result

PERCENTILE_METHODS = ("linear", "rank")

# (percentile, label) pairs appended when percentiles are requested.
PERCENTILE_LABELS: tuple[tuple[float, str], ...] = (
    (50, "Median"),
    (90, "90th percentile"),
    (95, "95th percentile"),
    (99, "99th percentile"),
)


def _require_sample(sample: Sequence[int]) -> None:
    if not sample:
        raise ValueError("Cannot compute statistics of an empty sample.")


# ---------------------------------------------------------------------------
# Basic statistics
# ---------------------------------------------------------------------------


def best(sample: Sequence[int]) -> int:
    """Shortest duration in the sample."""
    _require_sample(sample)
    return min(sample)


def worst(sample: Sequence[int]) -> int:
    """Longest duration in the sample."""
    _require_sample(sample)
    return max(sample)


def average(sample: Sequence[int]) -> int:
    """Arithmetic mean, truncated to whole nanoseconds."""
    _require_sample(sample)
    return sum(sample) // len(sample)


# ---------------------------------------------------------------------------
# Percentiles
# ---------------------------------------------------------------------------


def percentile(sample: Sequence[int], p: float, *, method: str = "linear") -> int:
    """Compute the p-th percentile (0 <= p <= 100) of *sample*.

    The sample does not need to be sorted; a sorted copy is used and
    the caller's sequence is left untouched.

    Raises:
        ValueError: On an empty sample, an out-of-range ``p`` or an
            unknown *method*.
    """
    _require_sample(sample)
    if not 0 <= p <= 100:
        raise ValueError(f"Percentile must be between 0 and 100 (got {p}).")
    sorted_v = sorted(sample)
    if method == "linear":
        return _percentile_linear(sorted_v, p)
    if method == "rank":
        return _percentile_rank(sorted_v, p)
    raise ValueError(
        f"Unknown percentile method: {method!r} "
        f"(expected one of: {', '.join(PERCENTILE_METHODS)})"
    )


def _interpolate(lower: int, upper: int, fraction: float) -> int:
    return lower + round((upper - lower) * fraction)


def _percentile_linear(sorted_values: list[int], p: float) -> int:
    """Linear interpolation over ``(n - 1)`` intervals.

    Assumes sorted_values is already sorted in ascending order.
    """
    n = len(sorted_values)
    if n == 1:
        return sorted_values[0]

    k = (n - 1) * p / 100
    f = math.floor(k)
    if f == k:
        return sorted_values[f]
    return _interpolate(sorted_values[f], sorted_values[f + 1], k - f)


def _percentile_rank(sorted_values: list[int], p: float) -> int:
    """Interpolation over ``n`` positions, clamped at the top.

    Assumes sorted_values is already sorted in ascending order.
    """
    n = len(sorted_values)
    index = p / 100 * n
    f = math.floor(index)
    if f == index:
        return sorted_values[min(f, n - 1)]

    lower = sorted_values[f]
    if f >= n - 1:
        return lower
    return _interpolate(lower, sorted_values[f + 1], index - f)


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


def summarize(
    sample: Sequence[int],
    want_percentiles: bool = False,
    *,
    method: str = "linear",
) -> list[Result]:
    """Build the ordered result list for a sample.

    Always yields Best, Worst and Average; with *want_percentiles*
    also Median, 90th, 95th and 99th percentile, in that order.

    Raises:
        ValueError: If the sample is empty.
    """
    _require_sample(sample)
    values = list(sample)

    results = [
        Result("Best", best(values)),
        Result("Worst", worst(values)),
        Result("Average", average(values)),
    ]
    if want_percentiles:
        for p, label in PERCENTILE_LABELS:
            results.append(Result(label, percentile(values, p, method=method)))
    return results
