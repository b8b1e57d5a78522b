from __future__ import annotations

import re
from enum import Enum


class DurationUnit(Enum):
    """Time units accepted in reward durations such as ``12h`` or ``3mo``."""

    SECONDS = "s"
    MINUTES = "m"
    HOURS = "h"
    DAYS = "d"
    WEEKS = "w"
    MONTHS = "mo"
    YEARS = "y"

    @property
    def suffix(self) -> str:
        return self.value

    @classmethod
    def from_suffix(cls, text: str | None) -> DurationUnit | None:
        if not text:
            return None
        key = text.strip().lower()
        for unit in cls:
            if unit.value == key:
                return unit
        return None


_SPEC_RE = re.compile(r"^\s*(-?\d+)\s*([A-Za-z]+)\s*$")


def parse_duration_spec(spec: str) -> tuple[int, DurationUnit]:
    """Split ``"12h"`` into ``(12, DurationUnit.HOURS)``."""

    m = _SPEC_RE.match(spec or "")
    if m is None:
        raise ValueError(f"invalid duration {spec!r}, expected <amount><unit> e.g. 12h")
    amount = int(m.group(1))
    if amount < 0:
        raise ValueError(f"duration must not be negative: {spec!r}")
    unit = DurationUnit.from_suffix(m.group(2))
    if unit is None:
        allowed = ", ".join(u.suffix for u in DurationUnit)
        raise ValueError(f"unknown duration unit {m.group(2)!r} (allowed: {allowed})")
    return amount, unit
