from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from ..models.diagnostic import Diagnostic
from ..models.run_result import MonthStat, RunResult
from .normalizers import CENTS

"""Run summary rendering.

Two outputs per run:

- the machine-readable SUMMARY line
  ``SUMMARY dataset=<mode> records=<n> warnings=<w> errors=<e>
  summary_rows_skipped=<s> elapsed_sec=<t>``
- the human-readable report: one INFO line per month, a TOTAL line for datasets
  that carry amounts, then a bounded preview of errors and warnings, each
  followed by ``... and <k> more`` when truncated.
"""

__all__ = [
    "format_elapsed",
    "render_summary_line",
    "render_report",
]

_DISTINCT_LABELS = {"items": "models", "sales": "days"}


def format_elapsed(seconds: float) -> str:
    """Plain decimal without scientific notation; integers without a fraction.

    >>> format_elapsed(2.0)
    '2'
    >>> format_elapsed(0.000123)
    '0.000123'
    """
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{seconds:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: RunResult) -> str:
    return (
        f"SUMMARY dataset={result.dataset} "
        f"records={result.records_written} "
        f"warnings={len(result.warnings)} "
        f"errors={len(result.errors)} "
        f"summary_rows_skipped={result.summary_rows_skipped} "
        f"elapsed_sec={format_elapsed(result.elapsed_seconds)}"
    )


def _totals_line(stats: tuple[MonthStat, ...]) -> str | None:
    amounts = [s.total_amount for s in stats if s.total_amount is not None]
    if not amounts:
        return None
    records = sum(s.record_count for s in stats)
    total = sum(amounts, Decimal(0))
    average = (total / records).quantize(CENTS, rounding=ROUND_HALF_UP) if records else Decimal("0.00")
    return f"TOTAL months={len(stats)} records={records} amount={total} average={average}"


def _preview(
    items: list[Diagnostic], level: int, noun: str, limit: int
) -> list[tuple[int, str]]:
    lines = [(level, d.render()) for d in items[:limit]]
    if len(items) > limit:
        lines.append((level, f"... and {len(items) - limit} more {noun}"))
    return lines


def render_report(result: RunResult, preview_limit: int = 10) -> list[tuple[int, str]]:
    """Report lines as ``(logging level, message)`` pairs, in print order."""
    lines: list[tuple[int, str]] = [
        (logging.INFO, f"Dataset {result.dataset}: {result.normalized_records} records from {result.source_path.name}")
    ]
    distinct_label = _DISTINCT_LABELS.get(result.dataset, "customers")
    for stat in result.month_stats:
        parts = [f"{stat.month_start}", f"records={stat.record_count}"]
        if stat.total_amount is not None:
            parts.append(f"amount={stat.total_amount}")
        parts.append(f"{distinct_label}={stat.distinct_count}")
        lines.append((logging.INFO, " ".join(parts)))
    totals = _totals_line(result.month_stats)
    if totals is not None:
        lines.append((logging.INFO, totals))

    lines += _preview(result.errors, logging.ERROR, "errors", preview_limit)
    lines += _preview(result.warnings, logging.WARNING, "warnings", preview_limit)

    if result.output_path is not None:
        lines.append((logging.INFO, f"Wrote {result.records_written} rows to {result.output_path}"))
    return lines
