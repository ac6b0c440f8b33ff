from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from ..models.records import MONTH_NAMES

"""Line classifier for sectioned ledger exports.

Each trimmed line is one of:
- SECTION_HEADER: upper-cased line equals or starts with a full month name
- SCHEMA_HEADER: contains every dataset-specific column-name marker
- BLANK: empty after trimming
- DATA: anything else

Month abbreviations are not section headers here; the sales export embeds its
own "MONTH OF <name> <year>" markers, handled in parsing.context.
"""

__all__ = [
    "LineKind",
    "Classification",
    "match_month_header",
    "is_schema_header",
    "classify_line",
]


class LineKind(Enum):
    SECTION_HEADER = "section_header"
    SCHEMA_HEADER = "schema_header"
    BLANK = "blank"
    DATA = "data"


@dataclass(frozen=True)
class Classification:
    kind: LineKind
    month: str | None = None  # set only for SECTION_HEADER


def match_month_header(line: str) -> str | None:
    """Return the full month name a header line announces, if any."""
    upper = line.strip().upper()
    for month in MONTH_NAMES:
        if upper == month or upper.startswith(month):
            return month
    return None


def is_schema_header(line: str, markers: Iterable[str]) -> bool:
    """Substring containment test so extra spaces or trailing dots still match."""
    upper = line.upper()
    markers = tuple(markers)
    return bool(markers) and all(m.upper() in upper for m in markers)


def classify_line(line: str, schema_markers: Iterable[str]) -> Classification:
    trimmed = line.strip()
    if not trimmed:
        return Classification(LineKind.BLANK)
    month = match_month_header(trimmed)
    if month is not None:
        return Classification(LineKind.SECTION_HEADER, month=month)
    if is_schema_header(trimmed, schema_markers):
        return Classification(LineKind.SCHEMA_HEADER)
    return Classification(LineKind.DATA)
