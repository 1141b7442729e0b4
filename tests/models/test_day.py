import datetime as dt

import pytest
from pydantic import ValidationError

from flowtime.models.day import Day, same_day


def test_day_accessors_return_constructor_values():
    date = dt.datetime(2024, 5, 1, tzinfo=dt.UTC)

    day = Day(date=date, worktime=3600, breaktime=600)

    assert (day.date, day.worktime, day.breaktime) == (date, 3600, 600)


def test_day_is_frozen():
    day = Day(date=dt.datetime(2024, 5, 1, tzinfo=dt.UTC), worktime=1, breaktime=2)

    with pytest.raises(ValidationError):
        day.worktime = 10

    corrected = day.model_copy(update={"worktime": 10})
    assert corrected.worktime == 10
    assert day.worktime == 1


def test_day_rejects_negative_counts():
    with pytest.raises(ValidationError):
        Day(date=dt.datetime(2024, 5, 1, tzinfo=dt.UTC), worktime=-1, breaktime=0)


def test_same_day_ignores_time_of_day():
    morning = dt.datetime(2024, 5, 1, 0, 0, tzinfo=dt.UTC)
    evening = dt.datetime(2024, 5, 1, 23, 59, tzinfo=dt.UTC)

    assert same_day(morning, evening)
    assert not same_day(morning, morning + dt.timedelta(days=1))
    assert not same_day(morning, morning.replace(year=2023))


def test_is_same_day_accepts_day_or_datetime():
    day = Day(date=dt.datetime(2024, 5, 1, 8, tzinfo=dt.UTC))

    assert day.is_same_day(dt.datetime(2024, 5, 1, 17, tzinfo=dt.UTC))
    assert day.is_same_day(Day(date=dt.datetime(2024, 5, 1, tzinfo=dt.UTC), worktime=5))
    assert not day.is_same_day(dt.datetime(2024, 5, 2, tzinfo=dt.UTC))
