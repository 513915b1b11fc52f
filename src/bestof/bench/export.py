"""Machine-readable export of session results.

JSON format: one object mapping each result label to its value in
the chosen unit, in result order.

CSV format: a ``Label,Value`` header followed by one row per result.
"""

from __future__ import annotations

import csv
import io
import json

from bestof.bench.results import Result
from bestof.formatting import convert_duration


def export_json(results: list[Result], unit: str) -> str:
    """Export results as a JSON object with fixed 6-decimal values.

    Values are written as ``%.6f`` literals, like the text and CSV
    output, instead of float reprs such as ``0.05`` or ``1e-06``.
    """
    if not results:
        return "{}"
    members = [
        f"  {json.dumps(r.label)}: {convert_duration(r.value_ns, unit):.6f}" for r in results
    ]
    return "{\n" + ",\n".join(members) + "\n}"


def export_csv(results: list[Result], unit: str) -> str:
    """Export results as CSV with a ``Label,Value`` header."""
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(["Label", "Value"])
    for r in results:
        writer.writerow([r.label, f"{convert_duration(r.value_ns, unit):.6f}"])
    return output.getvalue()