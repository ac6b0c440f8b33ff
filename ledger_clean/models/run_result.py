from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from .diagnostic import Diagnostic

"""Run result models for the ledger cleaning pipeline.

RunResult is what the pipeline hands back to the CLI: counts for the SUMMARY
line, per-month statistics for the human-readable report, and the full list of
diagnostics (the CLI decides how many to preview).
"""

__all__ = [
    "MonthStat",
    "RunResult",
]


@dataclass(frozen=True)
class MonthStat:
    """Per-month statistics shown in the run report."""
    month_start: str  # YYYY-MM-01
    record_count: int  # normalized records contributing to the month
    total_amount: Decimal | None = None  # None for datasets without amounts
    distinct_count: int = 0  # customers (bulk) / model numbers (items) / days (sales)


@dataclass(frozen=True)
class RunResult:
    """Aggregated outcome of one pipeline invocation."""
    dataset: str  # run mode name, e.g. "bulk-orders"
    source_path: Path
    output_path: Path | None  # None when nothing was written (inspect mode)
    records_written: int  # output rows (excluding header)
    normalized_records: int  # records produced by the scan
    diagnostics: tuple[Diagnostic, ...]
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    summary_rows_skipped: int = 0  # sales subtotal rows
    month_stats: tuple[MonthStat, ...] = field(default_factory=tuple)

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if not d.is_error]

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.is_error]
