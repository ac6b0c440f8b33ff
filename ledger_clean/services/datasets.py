from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP
from typing import Any

from ..models.records import BulkOrderRecord, ItemRecord, NormalizedRecord
from .aggregator import Aggregator, order_records
from .diagnostics import DiagnosticsCollector
from .normalizers import CENTS, BulkOrderNormalizer, ItemNormalizer, RowNormalizer, SalesNormalizer

"""Dataset registry.

Each run mode names its input shape, the fixed output columns, and how the
normalized records become output rows. Three modes read the bulk orders export
(per order, per month, per customer-month); items and sales have one each.
"""

__all__ = [
    "SECTIONED",
    "SALES",
    "Dataset",
    "DATASETS",
    "get_dataset",
]

SECTIONED = "sectioned"  # standalone month-header lines
SALES = "sales"  # "MONTH OF" markers inside the DATE column

Row = list[Any]
RowBuilder = Callable[[Sequence[NormalizedRecord], DiagnosticsCollector], list[Row]]


@dataclass(frozen=True)
class Dataset:
    name: str
    shape: str
    columns: tuple[str, ...]
    build_rows: RowBuilder
    normalizer: type[RowNormalizer]


def _bulk_orders_rows(records, diagnostics) -> list[Row]:
    ordered: list[BulkOrderRecord] = order_records(list(records), lambda r: r.customer_name)
    return [[r.customer_name, r.order_amount, r.model_no, r.context.month_start] for r in ordered]


def _bulk_monthly_rows(records, diagnostics) -> list[Row]:
    aggregates = Aggregator().add_all(records).finalize()
    return [[a.month_start, a.total_orders_count, a.total_amount] for a in aggregates]


def _bulk_customer_monthly_rows(records, diagnostics) -> list[Row]:
    aggregates = Aggregator(by_customer=True).add_all(records).finalize()
    rows = []
    for a in aggregates:
        average = (a.total_amount / a.total_orders_count).quantize(CENTS, rounding=ROUND_HALF_UP)
        rows.append(
            [
                a.month_start,
                a.customer_name,
                a.total_orders_count,
                a.total_amount,
                average,
                ", ".join(a.model_numbers),
            ]
        )
    return rows


def _items_rows(records, diagnostics) -> list[Row]:
    ordered: list[ItemRecord] = order_records(list(records), lambda r: r.model_no)
    return [[r.context.month_start, r.model_no, r.category_name] for r in ordered]


def _sales_rows(records, diagnostics: DiagnosticsCollector) -> list[Row]:
    aggregates = Aggregator().add_all(records).finalize()
    rows = []
    for a in aggregates:
        revenue = a.total_amount.quantize(CENTS, rounding=ROUND_HALF_UP)
        if revenue < 0:
            diagnostics.run_error(
                "NEGATIVE_REVENUE", f"{a.month_start}: total revenue {revenue} is negative"
            )
        # orders/units/avg/new customers are filled downstream
        rows.append([a.month_start, revenue, 0, 0, 0, 0])
    return rows


DATASETS: dict[str, Dataset] = {
    d.name: d
    for d in (
        Dataset(
            name="bulk-orders",
            shape=SECTIONED,
            columns=("customer_name", "bulk_orders_amount", "model_no", "month_start"),
            build_rows=_bulk_orders_rows,
            normalizer=BulkOrderNormalizer,
        ),
        Dataset(
            name="bulk-monthly",
            shape=SECTIONED,
            columns=("month_start", "bulk_orders_count", "bulk_orders_amount"),
            build_rows=_bulk_monthly_rows,
            normalizer=BulkOrderNormalizer,
        ),
        Dataset(
            name="bulk-customer-monthly",
            shape=SECTIONED,
            columns=(
                "month_start",
                "customer_name",
                "bulk_orders_count",
                "bulk_orders_amount",
                "average_bulk_order_value",
                "model_no",
            ),
            build_rows=_bulk_customer_monthly_rows,
            normalizer=BulkOrderNormalizer,
        ),
        Dataset(
            name="items",
            shape=SECTIONED,
            columns=("month_start", "model_no", "category_name"),
            build_rows=_items_rows,
            normalizer=ItemNormalizer,
        ),
        Dataset(
            name="sales",
            shape=SALES,
            columns=(
                "month_start",
                "total_revenue",
                "total_orders",
                "total_units",
                "avg_order_value",
                "new_customers",
            ),
            build_rows=_sales_rows,
            normalizer=SalesNormalizer,
        ),
    )
}


def get_dataset(name: str) -> Dataset:
    try:
        return DATASETS[name]
    except KeyError:
        raise ValueError(f"unknown dataset {name!r}; choose from {', '.join(DATASETS)}") from None
