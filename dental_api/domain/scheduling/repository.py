"""Schedule repository - Database operations for working windows"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import ProfessionalSchedule
from .availability_service import WorkingWindow


def to_working_window(row: ProfessionalSchedule) -> WorkingWindow:
    """Convert a stored schedule row into the validator's value type"""
    return WorkingWindow.from_strings(
        owner_id=row.profile_id,
        day_of_week=row.day_of_week,
        start_time=row.start_time,
        end_time=row.end_time,
        is_working_day=bool(row.is_working_day),
    )


class ScheduleRepository:
    """Repository for professional schedule database operations"""

    @staticmethod
    def list_windows_for_professional(db: Session, profile_id: int) -> list[ProfessionalSchedule]:
        """Get all weekly windows of one professional"""
        return (
            db.query(ProfessionalSchedule)
            .filter(ProfessionalSchedule.profile_id == profile_id)
            .order_by(ProfessionalSchedule.day_of_week)
            .all()
        )

    @staticmethod
    def list_windows_for_clinic(db: Session, clinic_id: int) -> list[ProfessionalSchedule]:
        """Get the weekly windows of every professional in a clinic"""
        return (
            db.query(ProfessionalSchedule)
            .filter(ProfessionalSchedule.clinic_id == clinic_id)
            .order_by(ProfessionalSchedule.day_of_week, ProfessionalSchedule.profile_id)
            .all()
        )

    @staticmethod
    def get_window(db: Session, profile_id: int, day_of_week: int) -> Optional[ProfessionalSchedule]:
        return (
            db.query(ProfessionalSchedule)
            .filter(
                ProfessionalSchedule.profile_id == profile_id,
                ProfessionalSchedule.day_of_week == day_of_week,
            )
            .first()
        )

    @staticmethod
    def upsert_windows(
        db: Session, clinic_id: int, profile_id: int, days: list[dict]
    ) -> list[ProfessionalSchedule]:
        """Insert or update one row per (profile_id, day_of_week)"""
        rows = []
        for day in days:
            row = ScheduleRepository.get_window(db, profile_id, day["day_of_week"])
            if row is None:
                row = ProfessionalSchedule(
                    clinic_id=clinic_id, profile_id=profile_id, day_of_week=day["day_of_week"]
                )
                db.add(row)
            row.clinic_id = clinic_id
            row.start_time = day["start_time"]
            row.end_time = day["end_time"]
            row.is_working_day = day["is_working_day"]
            rows.append(row)

        db.commit()
        for row in rows:
            db.refresh(row)
        return rows
