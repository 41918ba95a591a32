from datetime import date, datetime, time

import pytest

from dental_api.domain.scheduling.time_calculator import (
    TimeOfDay,
    combine,
    day_of_week,
)


def test_parse_and_format():
    assert TimeOfDay.parse("09:30").minutes == 570
    assert TimeOfDay.parse("9:05").format() == "09:05"
    assert TimeOfDay.parse("17:00:00").format() == "17:00"
    assert str(TimeOfDay(0)) == "00:00"


def test_end_of_day_is_allowed():
    assert TimeOfDay.parse("24:00").minutes == 1440


@pytest.mark.parametrize("value", ["", "9", "25:00", "24:30", "10:60", "ab:cd", "10-30", None])
def test_parse_rejects_malformed_times(value):
    with pytest.raises(ValueError):
        TimeOfDay.parse(value)


def test_ordering_follows_minutes():
    assert TimeOfDay.parse("08:00") < TimeOfDay.parse("08:01")
    assert max(TimeOfDay.parse("13:00"), TimeOfDay.parse("18:00")).format() == "18:00"


def test_from_time():
    assert TimeOfDay.from_time(time(7, 15)).format() == "07:15"


def test_day_of_week_starts_on_sunday():
    assert day_of_week(date(2024, 1, 7)) == 0  # Sunday
    assert day_of_week(date(2024, 1, 8)) == 1  # Monday
    assert day_of_week(date(2024, 1, 13)) == 6  # Saturday


def test_combine():
    assert combine(date(2024, 1, 8), TimeOfDay.parse("09:30")) == datetime(2024, 1, 8, 9, 30)
    with pytest.raises(ValueError):
        combine(date(2024, 1, 8), TimeOfDay.parse("24:00"))
