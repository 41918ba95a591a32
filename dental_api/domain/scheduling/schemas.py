"""Scheduling domain schemas - Pydantic models for validation"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

from ...shared.validators import validate_time_of_day
from .time_calculator import TimeOfDay


class DaySchedule(BaseModel):
    """One day of a professional's weekly schedule"""

    day_of_week: int
    start_time: str = "08:00"
    end_time: str = "18:00"
    is_working_day: bool = False

    @field_validator("day_of_week")
    @classmethod
    def validate_day(cls, v: int) -> int:
        if not 0 <= v <= 6:
            raise ValueError("day_of_week must be between 0 (Sunday) and 6 (Saturday)")
        return v

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        return validate_time_of_day(v)

    @model_validator(mode="after")
    def validate_range(self):
        if self.is_working_day and TimeOfDay.parse(self.end_time) <= TimeOfDay.parse(self.start_time):
            raise ValueError("end_time must be after start_time on a working day")
        return self


class WeeklyScheduleUpdate(BaseModel):
    """Schema for saving a professional's weekly schedule"""

    days: list[DaySchedule]

    @field_validator("days")
    @classmethod
    def validate_unique_days(cls, v: list[DaySchedule]) -> list[DaySchedule]:
        seen = [d.day_of_week for d in v]
        if len(seen) != len(set(seen)):
            raise ValueError("Each day_of_week can appear only once")
        return v


class WorkingWindowResponse(BaseModel):
    """Schema for a stored (or default) working window"""

    id: Optional[int] = None
    profile_id: int
    day_of_week: int
    start_time: str
    end_time: str
    is_working_day: bool

    class Config:
        from_attributes = True


class AvailabilityCheckRequest(BaseModel):
    """Schema for checking a candidate appointment slot"""

    date: dt.date
    time: str
    professional_id: Optional[int] = None

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        return validate_time_of_day(v)


class ScheduleWarningResponse(BaseModel):
    code: str
    message: str


class AvailabilityCheckResponse(BaseModel):
    available: bool
    warning: Optional[ScheduleWarningResponse] = None
