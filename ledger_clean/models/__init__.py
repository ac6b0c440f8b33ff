"""Domain models for the ledger export cleaning pipeline.

This package contains the value types that flow through one run: raw lines,
parsed field rows, month context, normalized records, diagnostics, monthly
aggregates and the run result.
"""

from .aggregate import AggregateFrozenError, MonthlyAggregate
from .diagnostic import Diagnostic, DiagnosticLogEntry, Severity
from .parse_result import FieldValue, Invalid, Missing, Parsed, ParseResult, Present
from .records import (
    MONTH_NAMES,
    BulkOrderRecord,
    FieldRow,
    ItemRecord,
    MonthContext,
    NormalizedRecord,
    RawLine,
    SalesDayRecord,
)
from .run_result import MonthStat, RunResult

__all__ = [
    # Lines and records
    "MONTH_NAMES",
    "RawLine",
    "FieldRow",
    "MonthContext",
    "BulkOrderRecord",
    "ItemRecord",
    "SalesDayRecord",
    "NormalizedRecord",
    # Parse outcomes
    "Parsed",
    "Invalid",
    "ParseResult",
    "Present",
    "Missing",
    "FieldValue",
    # Diagnostics
    "Severity",
    "Diagnostic",
    "DiagnosticLogEntry",
    # Aggregation and results
    "MonthlyAggregate",
    "AggregateFrozenError",
    "MonthStat",
    "RunResult",
]
