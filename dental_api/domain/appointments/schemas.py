"""Appointment schemas - Pydantic models for validation"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import APPOINTMENT_STATUSES
from ...shared.validators import validate_max_length, validate_time_of_day


def _validate_start_time(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = validate_time_of_day(v)
    if v == "24:00":
        raise ValueError("Appointments cannot start at 24:00")
    return v


def _validate_duration(v: Optional[int]) -> Optional[int]:
    if v is not None and not 5 <= v <= 480:
        raise ValueError("duration_minutes must be between 5 and 480")
    return v


def _validate_status(v: Optional[str]) -> Optional[str]:
    if v is not None and v not in APPOINTMENT_STATUSES:
        raise ValueError(f"status must be one of: {', '.join(APPOINTMENT_STATUSES)}")
    return v


class AppointmentCreate(BaseModel):
    patient_id: int
    date: dt.date
    time: str
    duration_minutes: Optional[int] = None
    dentist_id: Optional[int] = None
    treatment_id: Optional[int] = None
    notes: Optional[str] = None

    @field_validator("time")
    @classmethod
    def validate_time(cls, v):
        return _validate_start_time(v)

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, v):
        return _validate_duration(v)

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v):
        return validate_max_length(v, 1000, "Notes")


class AppointmentUpdate(BaseModel):
    date: Optional[dt.date] = None
    time: Optional[str] = None
    duration_minutes: Optional[int] = None
    dentist_id: Optional[int] = None
    treatment_id: Optional[int] = None
    notes: Optional[str] = None
    status: Optional[str] = None

    @field_validator("time")
    @classmethod
    def validate_time(cls, v):
        return _validate_start_time(v)

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, v):
        return _validate_duration(v)

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v):
        return validate_max_length(v, 1000, "Notes")

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        # Only runs for a status the client actually sent
        if v is None:
            raise ValueError("status cannot be null")
        return _validate_status(v)


class AppointmentCancel(BaseModel):
    reason: Optional[str] = None

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v):
        return validate_max_length(v, 500, "Reason")


class AppointmentResponse(BaseModel):
    id: int
    clinic_id: int
    patient_id: int
    dentist_id: Optional[int] = None
    treatment_id: Optional[int] = None
    scheduled_at: dt.datetime
    duration_minutes: Optional[int] = None
    status: str
    notes: Optional[str] = None
    confirmation_sent: bool
    reminder_sent: bool

    class Config:
        from_attributes = True
