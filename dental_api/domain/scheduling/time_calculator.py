"""Time-of-day arithmetic for working-hour checks"""

from dataclasses import dataclass
from datetime import date, datetime, time

MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """Wall-clock time stored as minutes since midnight.

    24:00 is allowed so that a window can close at the end of the day.
    """

    minutes: int

    def __post_init__(self):
        if not 0 <= self.minutes <= MINUTES_PER_DAY:
            raise ValueError(f"Time of day out of range: {self.minutes} minutes")

    @classmethod
    def parse(cls, value: str) -> "TimeOfDay":
        """Parse "HH:MM" (or the "HH:MM:SS" form databases return)"""
        parts = value.strip().split(":") if isinstance(value, str) else []
        if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
            raise ValueError(f"Invalid time of day: {value!r}. Expected HH:MM")

        hours, minutes = int(parts[0]), int(parts[1])
        if minutes >= 60 or hours > 24 or (hours == 24 and minutes):
            raise ValueError(f"Invalid time of day: {value!r}. Expected HH:MM")
        return cls(hours * 60 + minutes)

    @classmethod
    def from_time(cls, value: time) -> "TimeOfDay":
        return cls(value.hour * 60 + value.minute)

    @property
    def hour(self) -> int:
        return self.minutes // 60

    @property
    def minute(self) -> int:
        return self.minutes % 60

    def format(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    def __str__(self) -> str:
        return self.format()


def day_of_week(value: date) -> int:
    """Day index with 0 = Sunday .. 6 = Saturday"""
    return (value.weekday() + 1) % 7


def combine(day: date, time_of_day: TimeOfDay) -> datetime:
    """Naive clinic-local datetime for a calendar date and a time of day"""
    if time_of_day.minutes == MINUTES_PER_DAY:
        raise ValueError("24:00 is only valid as the end of a working window")
    return datetime.combine(day, time(time_of_day.hour, time_of_day.minute))
