from __future__ import annotations

from decimal import Decimal

import pytest

from ledger_clean.models.aggregate import AggregateFrozenError, MonthlyAggregate
from ledger_clean.models.records import BulkOrderRecord, ItemRecord, MonthContext, SalesDayRecord
from ledger_clean.services.aggregator import Aggregator, month_stats, order_records

JAN = MonthContext("JANUARY", 2023)
FEB = MonthContext("FEBRUARY", 2023)
DEC_PREV = MonthContext("DECEMBER", 2022)


def bulk(name: str, amount: str, model: str, ctx: MonthContext, line: int = 1) -> BulkOrderRecord:
    return BulkOrderRecord(name, Decimal(amount), model, ctx, line)


def test_monthly_keys_sorted_by_year_then_month():
    records = [bulk("A", "10", "M1", FEB), bulk("B", "5", "M2", JAN), bulk("C", "1", "", DEC_PREV)]
    aggregates = Aggregator().add_all(records).finalize()
    assert [a.month_start for a in aggregates] == ["2022-12-01", "2023-01-01", "2023-02-01"]
    assert [a.total_amount for a in aggregates] == [Decimal("1"), Decimal("5"), Decimal("10")]
    assert all(a.frozen for a in aggregates)


def test_customer_keys_and_model_numbers_first_seen():
    records = [
        bulk("ZED", "1", "M9", JAN),
        bulk("ACME", "100", "M2", JAN),
        bulk("ACME", "50.50", "", JAN),
        bulk("ACME", "10", "M1", JAN),
        bulk("ACME", "10", "M2", JAN),
    ]
    aggregates = Aggregator(by_customer=True).add_all(records).finalize()
    assert [a.customer_name for a in aggregates] == ["ACME", "ZED"]
    acme = aggregates[0]
    assert acme.total_orders_count == 4
    assert acme.total_amount == Decimal("170.50")
    assert acme.model_numbers == ("M2", "M1")


def test_customer_aggregation_rejects_other_records():
    with pytest.raises(TypeError):
        Aggregator(by_customer=True).add(ItemRecord("M1", "Tools", JAN, 1))


def test_items_count_without_amount():
    aggregates = Aggregator().add_all([ItemRecord("M1", "T", JAN, 1), ItemRecord("M2", "T", JAN, 2)]).finalize()
    assert aggregates[0].total_orders_count == 2
    assert aggregates[0].total_amount == Decimal("0")


def test_frozen_aggregate_rejects_additions():
    agg = MonthlyAggregate(context=JAN)
    agg.add(Decimal("1"), "M1")
    agg.freeze()
    with pytest.raises(AggregateFrozenError):
        agg.add(Decimal("1"))


def test_finalized_aggregator_rejects_additions():
    aggregator = Aggregator()
    aggregator.add(bulk("A", "1", "", JAN))
    aggregator.finalize()
    with pytest.raises(AggregateFrozenError):
        aggregator.add(bulk("B", "1", "", FEB))


def test_order_records_is_stable_within_ties():
    records = [
        bulk("ACME", "1", "first", FEB, 1),
        bulk("BETA", "2", "", JAN, 2),
        bulk("ACME", "3", "second", FEB, 3),
    ]
    ordered = order_records(records, lambda r: r.customer_name)
    assert [r.source_line for r in ordered] == [2, 1, 3]


def test_month_stats():
    records = [
        SalesDayRecord(1, Decimal("10.00"), JAN, 3),
        SalesDayRecord(1, Decimal("5.00"), JAN, 4, inherited_day=True),
        SalesDayRecord(2, Decimal("-1.00"), JAN, 5),
    ]
    [stat] = month_stats(records)
    assert stat.month_start == "2023-01-01"
    assert stat.record_count == 3
    assert stat.total_amount == Decimal("14.00")
    assert stat.distinct_count == 2


def test_month_stats_items_have_no_amount():
    [stat] = month_stats([ItemRecord("M1", "T", JAN, 1), ItemRecord("M1", "T", JAN, 2)])
    assert stat.total_amount is None
    assert stat.distinct_count == 1
