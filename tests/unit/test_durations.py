from __future__ import annotations

from datetime import timedelta

import pytest

from caseapi.models.duration import DurationUnit, parse_duration_spec
from caseapi.utils.durations import get_duration


@pytest.mark.parametrize(
    ("amount", "unit", "expected"),
    [
        (30, DurationUnit.SECONDS, timedelta(seconds=30)),
        (5, DurationUnit.MINUTES, timedelta(minutes=5)),
        (12, DurationUnit.HOURS, timedelta(hours=12)),
        (3, DurationUnit.DAYS, timedelta(days=3)),
        (2, DurationUnit.WEEKS, timedelta(days=14)),
        (1, DurationUnit.MONTHS, timedelta(days=30)),
        (2, DurationUnit.YEARS, timedelta(days=730)),
    ],
)
def test_get_duration(amount: int, unit: DurationUnit, expected: timedelta) -> None:
    assert get_duration(amount, unit) == expected


def test_missing_unit_is_zero() -> None:
    assert get_duration(10, None) == timedelta(0)


def test_parse_duration_spec() -> None:
    assert parse_duration_spec("12h") == (12, DurationUnit.HOURS)
    assert parse_duration_spec(" 3MO ") == (3, DurationUnit.MONTHS)
    assert parse_duration_spec("1y") == (1, DurationUnit.YEARS)


@pytest.mark.parametrize("spec", ["", "h", "12", "-1d", "5 fortnights"])
def test_parse_duration_spec_rejects(spec: str) -> None:
    with pytest.raises(ValueError):
        parse_duration_spec(spec)


def test_from_suffix() -> None:
    assert DurationUnit.from_suffix("W") is DurationUnit.WEEKS
    assert DurationUnit.from_suffix("x") is None
    assert DurationUnit.from_suffix(None) is None
