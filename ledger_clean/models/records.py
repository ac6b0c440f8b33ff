from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

"""Line, row and record models for the ledger cleaning pipeline.

Lifecycle of one run:
RawLine -> FieldRow -> NormalizedRecord (or a Diagnostic) -> MonthlyAggregate
-> serialized output row. Nothing outlives a single pipeline invocation.
"""

__all__ = [
    "MONTH_NAMES",
    "month_index",
    "RawLine",
    "FieldRow",
    "MonthContext",
    "BulkOrderRecord",
    "ItemRecord",
    "SalesDayRecord",
    "NormalizedRecord",
]

MONTH_NAMES: tuple[str, ...] = (
    "JANUARY", "FEBRUARY", "MARCH", "APRIL", "MAY", "JUNE",
    "JULY", "AUGUST", "SEPTEMBER", "OCTOBER", "NOVEMBER", "DECEMBER",
)


def month_index(month: str) -> int:
    """1-based month number for a full upper-case month name."""
    return MONTH_NAMES.index(month) + 1


@dataclass(frozen=True)
class RawLine:
    """One line of the source as read, before any trimming."""
    text: str
    line_number: int  # 1-based


@dataclass(frozen=True)
class FieldRow:
    """Ordered trimmed field values parsed from one RawLine."""
    fields: tuple[str, ...]
    line_number: int

    def __len__(self) -> int:
        return len(self.fields)

    @property
    def is_empty(self) -> bool:
        return all(f == "" for f in self.fields)


@dataclass(frozen=True)
class MonthContext:
    """Active month section while scanning.

    Attributes:
        month: Full upper-case month name (one of MONTH_NAMES)
        year: Calendar year
    """
    month: str
    year: int

    def __post_init__(self) -> None:
        if self.month not in MONTH_NAMES:
            raise ValueError(f"unknown month name: {self.month!r}")

    @property
    def month_number(self) -> int:
        return month_index(self.month)

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.year, self.month_number)

    @property
    def month_start(self) -> str:
        """First day of the month as YYYY-MM-01."""
        return f"{self.year:04d}-{self.month_number:02d}-01"


@dataclass(frozen=True)
class BulkOrderRecord:
    customer_name: str  # upper-cased, whitespace collapsed
    order_amount: Decimal  # > 0
    model_no: str  # upper-cased, may be empty
    context: MonthContext
    source_line: int

    @property
    def month(self) -> str:
        return self.context.month

    @property
    def year(self) -> int:
        return self.context.year


@dataclass(frozen=True)
class ItemRecord:
    model_no: str  # upper-cased, whitespace collapsed
    category_name: str  # case preserved
    context: MonthContext
    source_line: int

    @property
    def month(self) -> str:
        return self.context.month

    @property
    def year(self) -> int:
        return self.context.year


@dataclass(frozen=True)
class SalesDayRecord:
    day: int  # 1-31, explicit or inherited
    amount: Decimal  # rounded to cents, may be negative
    context: MonthContext
    source_line: int
    inherited_day: bool = False

    @property
    def month(self) -> str:
        return self.context.month

    @property
    def year(self) -> int:
        return self.context.year


NormalizedRecord = BulkOrderRecord | ItemRecord | SalesDayRecord
