from __future__ import annotations

import pytest

from ledger_clean.models.parse_result import Invalid, Missing, Parsed, Present
from ledger_clean.services.day_inheritance import DayInheritanceResolver, ResolvedDay, parse_day_number


@pytest.mark.parametrize("cell,day", [("5", 5), ("05", 5), ("31st", 31), (" 1", 1)])
def test_parse_day_number(cell, day):
    assert parse_day_number(cell) == Parsed(day)


@pytest.mark.parametrize("cell", ["0", "32", "x", "", "-3"])
def test_parse_day_number_invalid(cell):
    assert isinstance(parse_day_number(cell), Invalid)


def test_inherits_last_explicit_day():
    r = DayInheritanceResolver()
    assert r.resolve(Present("5")) == Parsed(ResolvedDay(5, inherited=False))
    assert r.resolve(Missing("date")) == Parsed(ResolvedDay(5, inherited=True))
    assert r.resolve(Present("7")) == Parsed(ResolvedDay(7, inherited=False))
    assert r.resolve(Missing("date")) == Parsed(ResolvedDay(7, inherited=True))


def test_nothing_to_inherit_before_first_day():
    result = DayInheritanceResolver().resolve(Missing("date"))
    assert isinstance(result, Invalid)
    assert "no previous day" in result.reason


def test_invalid_day_keeps_previous_memory():
    r = DayInheritanceResolver()
    r.resolve(Present("4"))
    assert isinstance(r.resolve(Present("zz")), Invalid)
    assert r.last_day == 4


def test_reset_clears_memory():
    r = DayInheritanceResolver()
    r.resolve(Present("4"))
    r.reset()
    assert r.last_day is None
    assert isinstance(r.resolve(Missing("date")), Invalid)
