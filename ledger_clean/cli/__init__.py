"""Command line entry points."""

from .app import (
    EXIT_FATAL,
    EXIT_SUCCESS,
    clean_bulk_customer_monthly,
    clean_bulk_monthly,
    clean_bulk_orders,
    clean_items,
    clean_sales,
    main,
)

__all__ = [
    "EXIT_SUCCESS",
    "EXIT_FATAL",
    "main",
    "clean_bulk_orders",
    "clean_bulk_monthly",
    "clean_bulk_customer_monthly",
    "clean_items",
    "clean_sales",
]
