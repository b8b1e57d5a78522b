from __future__ import annotations

from datetime import timedelta

from caseapi.models.duration import DurationUnit

_DAYS_PER_UNIT = {
    DurationUnit.WEEKS: 7,
    DurationUnit.MONTHS: 30,
    DurationUnit.YEARS: 365,
}


def get_duration(amount: int, unit: DurationUnit | None) -> timedelta:
    """Convert ``amount`` of ``unit`` to a timedelta.

    Months and years are calendar-agnostic (30 and 365 days). A missing or
    unknown unit yields a zero duration.
    """

    if unit is DurationUnit.SECONDS:
        return timedelta(seconds=amount)
    if unit is DurationUnit.MINUTES:
        return timedelta(minutes=amount)
    if unit is DurationUnit.HOURS:
        return timedelta(hours=amount)
    if unit is DurationUnit.DAYS:
        return timedelta(days=amount)
    if unit in _DAYS_PER_UNIT:
        return timedelta(days=amount * _DAYS_PER_UNIT[unit])
    return timedelta(0)
