from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from pathlib import PurePath

from ..models.records import MonthContext

"""Year / month context resolution.

resolve_year() runs once per invocation for the sectioned exports (bulk orders,
items): file name first, then content, then the fallback year. Months for those
exports come from section-header lines and are tracked by the scanner.

The sales export carries "MONTH OF <name>[.] <year>" markers inside its date
column; parse_month_marker() turns such a cell into a MonthContext.
"""

__all__ = [
    "YearResolution",
    "resolve_year",
    "MONTH_MARKER",
    "MONTH_ALIASES",
    "contains_month_marker",
    "parse_month_marker",
    "find_first_month_marker",
]

_YEAR_RE = re.compile(r"(\d{4})")
MONTH_MARKER = "MONTH OF"
_MARKER_RE = re.compile(r"MONTH OF\s+(\w+)\.?\s+(\d{4})", re.IGNORECASE)

MONTH_ALIASES: dict[str, str] = {
    "JANUARY": "JANUARY", "JAN": "JANUARY",
    "FEBRUARY": "FEBRUARY", "FEB": "FEBRUARY",
    "MARCH": "MARCH", "MAR": "MARCH",
    "APRIL": "APRIL", "APR": "APRIL",
    "MAY": "MAY",
    "JUNE": "JUNE", "JUN": "JUNE",
    "JULY": "JULY", "JUL": "JULY",
    "AUGUST": "AUGUST", "AUG": "AUGUST",
    "SEPTEMBER": "SEPTEMBER", "SEP": "SEPTEMBER", "SEPT": "SEPTEMBER",
    "OCTOBER": "OCTOBER", "OCT": "OCTOBER",
    "NOVEMBER": "NOVEMBER", "NOV": "NOVEMBER",
    "DECEMBER": "DECEMBER", "DEC": "DECEMBER",
}


@dataclass(frozen=True)
class YearResolution:
    year: int
    defaulted: bool = False  # neither file name nor content carried a year


def resolve_year(
    source_identifier: str,
    content: str,
    fallback_year: int | None = None,
    today: date | None = None,
) -> YearResolution:
    """Find the active calendar year for a sectioned export.

    Order: first 4-digit run in the file name, first 4-digit run anywhere in the
    content, then ``fallback_year`` or the current year (flagged as defaulted so
    the caller records a warning).
    """
    name = PurePath(source_identifier).name if source_identifier else ""
    match = _YEAR_RE.search(name)
    if match:
        return YearResolution(int(match.group(1)))
    match = _YEAR_RE.search(content)
    if match:
        return YearResolution(int(match.group(1)))
    if fallback_year is not None:
        return YearResolution(fallback_year, defaulted=True)
    return YearResolution((today or date.today()).year, defaulted=True)


def contains_month_marker(cell: str) -> bool:
    return MONTH_MARKER in cell.upper()


def parse_month_marker(cell: str) -> MonthContext | None:
    """Parse "SALES MONTH OF FEB. 2022" style cells; None if unrecognised."""
    match = _MARKER_RE.search(cell)
    if not match:
        return None
    month = MONTH_ALIASES.get(match.group(1).upper())
    if month is None:
        return None
    return MonthContext(month=month, year=int(match.group(2)))


def find_first_month_marker(content: str) -> MonthContext | None:
    """First parseable marker anywhere in the content (used to seed sales scans)."""
    for match in _MARKER_RE.finditer(content):
        month = MONTH_ALIASES.get(match.group(1).upper())
        if month is not None:
            return MonthContext(month=month, year=int(match.group(2)))
    return None
