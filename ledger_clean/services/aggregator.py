from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from decimal import Decimal
from typing import TypeVar

from ..models.aggregate import AggregateFrozenError, MonthlyAggregate
from ..models.records import BulkOrderRecord, ItemRecord, NormalizedRecord, SalesDayRecord
from ..models.run_result import MonthStat

"""Aggregation of normalized records.

The full record set is materialized before reduction; one export is bounded by
a single spreadsheet. Output order is the cross-run guarantee: (year, month)
ascending, then the dataset tie-break key (customer name or model number).
Python's sort is stable, so equal keys keep source order.
"""

__all__ = [
    "Aggregator",
    "record_amount",
    "order_records",
    "month_stats",
]

R = TypeVar("R", BulkOrderRecord, ItemRecord, SalesDayRecord)


def record_amount(record: NormalizedRecord) -> Decimal:
    if isinstance(record, BulkOrderRecord):
        return record.order_amount
    if isinstance(record, SalesDayRecord):
        return record.amount
    return Decimal("0")


def _record_model(record: NormalizedRecord) -> str | None:
    if isinstance(record, (BulkOrderRecord, ItemRecord)):
        return record.model_no
    return None


class Aggregator:
    """Running sum/count per composite key.

    ``by_customer=False`` keys on (year, month); ``True`` adds customer_name
    (bulk orders only). Aggregates are created on first contribution and frozen
    by finalize().
    """

    def __init__(self, by_customer: bool = False) -> None:
        self.by_customer = by_customer
        self._aggregates: dict[tuple, MonthlyAggregate] = {}
        self._finalized = False

    def add(self, record: NormalizedRecord) -> None:
        if self._finalized:
            raise AggregateFrozenError("aggregator already finalized")
        customer: str | None = None
        if self.by_customer:
            if not isinstance(record, BulkOrderRecord):
                raise TypeError(f"customer aggregation needs bulk order records, got {type(record).__name__}")
            customer = record.customer_name
        key = (*record.context.sort_key, customer) if self.by_customer else record.context.sort_key
        agg = self._aggregates.get(key)
        if agg is None:
            agg = MonthlyAggregate(context=record.context, customer_name=customer)
            self._aggregates[key] = agg
        agg.add(record_amount(record), _record_model(record))

    def add_all(self, records: Iterable[NormalizedRecord]) -> Aggregator:
        for r in records:
            self.add(r)
        return self

    def finalize(self) -> list[MonthlyAggregate]:
        """Freeze every aggregate and return them in output order."""
        result = sorted(self._aggregates.values(), key=lambda a: a.key)
        for agg in result:
            agg.freeze()
        self._finalized = True
        return result


def order_records(records: Sequence[R], tie_key: Callable[[R], str]) -> list[R]:
    return sorted(records, key=lambda r: (r.context.sort_key, tie_key(r)))


def month_stats(records: Sequence[NormalizedRecord]) -> list[MonthStat]:
    """Per-month figures for the run report."""
    by_month: dict[tuple[int, int], list[NormalizedRecord]] = {}
    for r in records:
        by_month.setdefault(r.context.sort_key, []).append(r)
    stats = []
    for key in sorted(by_month):
        group = by_month[key]
        first = group[0]
        if isinstance(first, BulkOrderRecord):
            distinct = len({r.customer_name for r in group})  # type: ignore[union-attr]
        elif isinstance(first, ItemRecord):
            distinct = len({r.model_no for r in group})  # type: ignore[union-attr]
        else:
            distinct = len({r.day for r in group})  # type: ignore[union-attr]
        total = None if isinstance(first, ItemRecord) else sum((record_amount(r) for r in group), Decimal("0"))
        stats.append(
            MonthStat(
                month_start=first.context.month_start,
                record_count=len(group),
                total_amount=total,
                distinct_count=distinct,
            )
        )
    return stats
