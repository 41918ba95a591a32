"""Schedule service - Weekly schedules and slot availability"""

import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Profile
from .availability_service import CandidateSlot, ScheduleWarning, WorkingWindow, validate
from .repository import ScheduleRepository, to_working_window
from .schemas import WeeklyScheduleUpdate
from .time_calculator import TimeOfDay

logger = logging.getLogger(__name__)

DEFAULT_START_TIME = "08:00"
DEFAULT_END_TIME = "18:00"
# Monday to Friday
DEFAULT_WORKING_DAYS = {1, 2, 3, 4, 5}


def default_day(profile_id: int, day_of_week: int, is_working_day: bool) -> dict:
    return {
        "id": None,
        "profile_id": profile_id,
        "day_of_week": day_of_week,
        "start_time": DEFAULT_START_TIME,
        "end_time": DEFAULT_END_TIME,
        "is_working_day": is_working_day,
    }


class ScheduleService:
    """Service layer for schedule business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ScheduleRepository()

    def get_weekly_schedule(self, profile: Profile) -> list[dict]:
        """Seven days for the profile, stored rows merged with defaults.

        A profile that never saved a schedule gets the Monday-Friday template;
        otherwise days without a row are shown as days off.
        """
        rows = {r.day_of_week: r for r in self.repo.list_windows_for_professional(self.db, profile.id)}

        week = []
        for day in range(7):
            row = rows.get(day)
            if row is not None:
                week.append(
                    {
                        "id": row.id,
                        "profile_id": row.profile_id,
                        "day_of_week": row.day_of_week,
                        "start_time": row.start_time,
                        "end_time": row.end_time,
                        "is_working_day": row.is_working_day,
                    }
                )
            elif rows:
                week.append(default_day(profile.id, day, False))
            else:
                week.append(default_day(profile.id, day, day in DEFAULT_WORKING_DAYS))
        return week

    def save_weekly_schedule(self, data: WeeklyScheduleUpdate, profile: Profile) -> list[dict]:
        """Upsert the submitted days and return the merged week"""
        if not profile.clinic_id:
            raise HTTPException(status_code=400, detail="Profile is not linked to a clinic")

        logger.info(f"🗓️ Saving {len(data.days)} schedule day(s) for profile {profile.id}")
        self.repo.upsert_windows(
            self.db,
            clinic_id=profile.clinic_id,
            profile_id=profile.id,
            days=[d.model_dump() for d in data.days],
        )
        return self.get_weekly_schedule(profile)

    def get_clinic_windows(self, clinic_id: int):
        return self.repo.list_windows_for_clinic(self.db, clinic_id)

    def load_windows(
        self, clinic_id: int, professional_id: Optional[int]
    ) -> tuple[list[WorkingWindow], list[WorkingWindow]]:
        """Fetch the professional and clinic windows once for a validation run"""
        clinic_windows = [to_working_window(r) for r in self.repo.list_windows_for_clinic(self.db, clinic_id)]
        if professional_id is None:
            return [], clinic_windows
        professional_windows = [w for w in clinic_windows if w.owner_id == professional_id]
        return professional_windows, clinic_windows

    def check_availability(
        self,
        clinic_id: int,
        slot_date: date,
        slot_time: str,
        professional_id: Optional[int] = None,
    ) -> Optional[ScheduleWarning]:
        """Validate a slot against the clinic's stored working windows"""
        candidate = CandidateSlot(
            date=slot_date, time=TimeOfDay.parse(slot_time), professional_id=professional_id
        )
        professional_windows, clinic_windows = self.load_windows(clinic_id, professional_id)
        warning = validate(candidate, professional_windows, clinic_windows)
        if warning:
            logger.info(
                f"⚠️ Slot {slot_date} {candidate.time} rejected for clinic {clinic_id}: {warning.code}"
            )
        return warning

    def ensure_bookable(
        self,
        clinic_id: int,
        slot_date: date,
        slot_time: str,
        professional_id: Optional[int] = None,
    ) -> None:
        """Block a submission while the slot has a working-hours warning"""
        warning = self.check_availability(clinic_id, slot_date, slot_time, professional_id)
        if warning:
            raise HTTPException(
                status_code=422,
                detail={"code": warning.code, "message": warning.message},
            )
