from __future__ import annotations

import re
from dataclasses import dataclass

from ..models.parse_result import FieldValue, Invalid, Parsed, ParseResult, Present

"""Day-of-month resolution for the sales export.

Daily sales sheets only write the day on the first row of each day; following
rows for the same day leave the DATE cell empty. The resolver remembers the last
explicit day seen in the current month and hands it to those rows. The memory
is cleared whenever the month context changes.
"""

__all__ = [
    "ResolvedDay",
    "parse_day_number",
    "DayInheritanceResolver",
]

_LEADING_INT_RE = re.compile(r"^\s*(\d+)")


@dataclass(frozen=True)
class ResolvedDay:
    day: int
    inherited: bool


def parse_day_number(cell: str) -> ParseResult[int]:
    """Leading integer 1-31 ("5", "05", "5th"); anything else is Invalid."""
    match = _LEADING_INT_RE.match(cell)
    if not match:
        return Invalid(f"Invalid day number: {cell}")
    day = int(match.group(1))
    if not 1 <= day <= 31:
        return Invalid(f"Invalid day number: {cell}")
    return Parsed(day)


class DayInheritanceResolver:
    def __init__(self) -> None:
        self.last_day: int | None = None

    def reset(self) -> None:
        self.last_day = None

    def resolve(self, date_cell: FieldValue) -> ParseResult[ResolvedDay]:
        if isinstance(date_cell, Present):
            parsed = parse_day_number(date_cell.text)
            if isinstance(parsed, Invalid):
                return parsed
            self.last_day = parsed.value
            return Parsed(ResolvedDay(day=parsed.value, inherited=False))
        if self.last_day is None:
            return Invalid("No date provided and no previous day to inherit from")
        return Parsed(ResolvedDay(day=self.last_day, inherited=True))
