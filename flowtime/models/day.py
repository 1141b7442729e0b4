from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Day(BaseModel):
    """Tracked worktime and breaktime for one calendar day.

    Durations are whole seconds. Instances are frozen; build a replacement
    with ``model_copy(update=...)`` to correct a value.
    """

    model_config = ConfigDict(frozen=True)

    date: datetime
    worktime: int = Field(default=0, ge=0)
    breaktime: int = Field(default=0, ge=0)

    def is_same_day(self, other: Day | datetime) -> bool:
        other_date = other.date if isinstance(other, Day) else other
        return same_day(self.date, other_date)


def same_day(one: datetime, other: datetime) -> bool:
    """Calendar-day equality: day of year, month and year all match."""
    return (
        one.timetuple().tm_yday == other.timetuple().tm_yday
        and one.month == other.month
        and one.year == other.year
    )
