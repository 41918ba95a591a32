"""
Working-hours validation for appointment slots

Decides whether a candidate slot falls inside the configured weekly
working windows and returns at most one warning. Pure functions over rows
the caller already fetched: no database access, no shared state.

Checks run in this order and stop at the first hit:
1. the selected professional has the day off
2. the slot is outside the selected professional's window
3. the slot is outside the clinic envelope (earliest start .. latest end
   of all working windows of that day)

Windows are half-open: a slot at the start time is accepted, a slot at the
end time is rejected. The clinic check only looks at the envelope, so a gap
between two shifts of the same day is not detected, and a day with no
working window at all does not restrict booking.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from .time_calculator import TimeOfDay, day_of_week

PROFESSIONAL_DAY_OFF = "professional_day_off"
OUTSIDE_PROFESSIONAL_HOURS = "outside_professional_hours"
OUTSIDE_CLINIC_HOURS = "outside_clinic_hours"


@dataclass(frozen=True)
class WorkingWindow:
    """Availability of a clinic or professional for one day of the week"""

    owner_id: int
    day_of_week: int  # 0 = Sunday .. 6 = Saturday
    start_time: TimeOfDay
    end_time: TimeOfDay
    is_working_day: bool = True

    @classmethod
    def from_strings(
        cls,
        owner_id: int,
        day_of_week: int,
        start_time: str,
        end_time: str,
        is_working_day: bool = True,
    ) -> "WorkingWindow":
        return cls(
            owner_id=owner_id,
            day_of_week=day_of_week,
            start_time=TimeOfDay.parse(start_time),
            end_time=TimeOfDay.parse(end_time),
            is_working_day=is_working_day,
        )

    def contains(self, moment: TimeOfDay) -> bool:
        return self.start_time <= moment < self.end_time


@dataclass(frozen=True)
class CandidateSlot:
    """Appointment start being validated"""

    date: date
    time: TimeOfDay
    professional_id: Optional[int] = None

    @property
    def day_of_week(self) -> int:
        return day_of_week(self.date)


@dataclass(frozen=True)
class ScheduleWarning:
    code: str
    message: str
    start_time: Optional[TimeOfDay] = None
    end_time: Optional[TimeOfDay] = None


def find_professional_window(
    windows: Iterable[WorkingWindow], professional_id: int, weekday: int
) -> Optional[WorkingWindow]:
    for window in windows:
        if window.owner_id == professional_id and window.day_of_week == weekday:
            return window
    return None


def clinic_envelope(
    windows: Iterable[WorkingWindow], weekday: int
) -> Optional[tuple[TimeOfDay, TimeOfDay]]:
    """Earliest start and latest end among the working windows of a day"""
    open_windows = [w for w in windows if w.day_of_week == weekday and w.is_working_day]
    if not open_windows:
        return None
    return (
        min(w.start_time for w in open_windows),
        max(w.end_time for w in open_windows),
    )


def validate(
    candidate: CandidateSlot,
    professional_windows: Iterable[WorkingWindow],
    clinic_windows: Iterable[WorkingWindow],
) -> Optional[ScheduleWarning]:
    """Return the first working-hours warning for the slot, or None if it can be booked"""
    moment = candidate.time
    weekday = candidate.day_of_week

    if candidate.professional_id is not None:
        window = find_professional_window(professional_windows, candidate.professional_id, weekday)
        if window is not None:
            if not window.is_working_day:
                return ScheduleWarning(
                    code=PROFESSIONAL_DAY_OFF,
                    message="The professional does not work this day",
                )
            if not window.contains(moment):
                return ScheduleWarning(
                    code=OUTSIDE_PROFESSIONAL_HOURS,
                    message=(
                        f"Outside the professional's hours "
                        f"({window.start_time.format()} - {window.end_time.format()})"
                    ),
                    start_time=window.start_time,
                    end_time=window.end_time,
                )

    envelope = clinic_envelope(clinic_windows, weekday)
    if envelope is not None:
        earliest, latest = envelope
        if moment < earliest or moment >= latest:
            return ScheduleWarning(
                code=OUTSIDE_CLINIC_HOURS,
                message=f"Outside clinic hours ({earliest.format()} - {latest.format()})",
                start_time=earliest,
                end_time=latest,
            )

    return None
