from __future__ import annotations

import pytest

from ledger_clean.parsing.classifier import (
    LineKind,
    classify_line,
    is_schema_header,
    match_month_header,
)

BULK_MARKERS = ("CUSTOMER NAME", "ORDER AMOUNT", "MODEL NO")
ITEM_MARKERS = ("MODEL NO", "CATEGORY")


@pytest.mark.parametrize(
    "line,month",
    [
        ("JANUARY", "JANUARY"),
        ("january", "JANUARY"),
        ("  March  ", "MARCH"),
        ("SEPTEMBER 2023 ORDERS", "SEPTEMBER"),
    ],
)
def test_section_header_full_month_names(line, month):
    c = classify_line(line, BULK_MARKERS)
    assert c.kind is LineKind.SECTION_HEADER
    assert c.month == month


def test_abbreviation_is_not_a_section_header():
    assert match_month_header("JAN") is None
    assert classify_line("SEPT", BULK_MARKERS).kind is LineKind.DATA


def test_schema_header_substring_match():
    assert classify_line("Customer Name,Order Amount,Model No.", BULK_MARKERS).kind is LineKind.SCHEMA_HEADER
    assert classify_line("MODEL NO. , CATEGORY NAME", ITEM_MARKERS).kind is LineKind.SCHEMA_HEADER


def test_schema_header_needs_every_marker():
    assert not is_schema_header("Customer Name,Order Amount", BULK_MARKERS)
    assert not is_schema_header("anything", ())


def test_blank_and_data_lines():
    assert classify_line("   ", BULK_MARKERS).kind is LineKind.BLANK
    c = classify_line("ACME,100,M1", BULK_MARKERS)
    assert c.kind is LineKind.DATA
    assert c.month is None
