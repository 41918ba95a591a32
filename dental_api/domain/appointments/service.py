"""Appointment service - Booking with working-hours enforcement"""

import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Appointment, Patient, Profile, Treatment
from ...services.notification_service import (
    send_appointment_cancelled_notification,
    send_appointment_confirmation_notification,
)
from ...shared.tenancy import get_clinic_record
from ..scheduling.service import ScheduleService
from ..scheduling.time_calculator import TimeOfDay, combine
from .repository import AppointmentRepository
from .schemas import AppointmentCreate, AppointmentUpdate

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MINUTES = 30
# Changing any of these moves the appointment and re-runs the working-hours check
SLOT_FIELDS = {"date", "time", "dentist_id"}


class AppointmentService:
    """Service layer for appointment business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()
        self.schedules = ScheduleService(db)

    def list_appointments(
        self,
        profile: Profile,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        status: Optional[str] = None,
        dentist_id: Optional[int] = None,
        patient_id: Optional[int] = None,
    ) -> list[Appointment]:
        return self.repo.list_appointments(
            self.db,
            profile.clinic_id,
            date_from=date_from,
            date_to=date_to,
            status=status,
            dentist_id=dentist_id,
            patient_id=patient_id,
        )

    def get_appointment(self, appointment_id: int, profile: Profile) -> Appointment:
        appointment = self.repo.get_appointment_by_id(self.db, appointment_id, profile.clinic_id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Appointment not found")
        return appointment

    def _check_dentist(self, dentist_id: Optional[int], clinic_id: int) -> None:
        if dentist_id is not None:
            get_clinic_record(self.db, Profile, dentist_id, clinic_id, "Dentist")

    def _get_treatment(self, treatment_id: Optional[int], clinic_id: int) -> Optional[Treatment]:
        if treatment_id is None:
            return None
        return get_clinic_record(self.db, Treatment, treatment_id, clinic_id, "Treatment")

    async def create_appointment(self, data: AppointmentCreate, profile: Profile) -> Appointment:
        clinic_id = profile.clinic_id
        get_clinic_record(self.db, Patient, data.patient_id, clinic_id, "Patient")
        self._check_dentist(data.dentist_id, clinic_id)
        treatment = self._get_treatment(data.treatment_id, clinic_id)

        self.schedules.ensure_bookable(clinic_id, data.date, data.time, data.dentist_id)

        duration = data.duration_minutes
        if duration is None:
            duration = (treatment.duration_minutes if treatment else None) or DEFAULT_DURATION_MINUTES

        appointment = self.repo.create_appointment(
            self.db,
            clinic_id,
            patient_id=data.patient_id,
            dentist_id=data.dentist_id,
            treatment_id=data.treatment_id,
            scheduled_at=combine(data.date, TimeOfDay.parse(data.time)),
            duration_minutes=duration,
            notes=data.notes,
            status="scheduled",
        )
        logger.info(f"📅 Appointment {appointment.id} booked for {appointment.scheduled_at} (clinic {clinic_id})")

        try:
            await send_appointment_confirmation_notification(self.db, appointment)
        except Exception as e:
            logger.warning(f"⚠️ Confirmation for appointment {appointment.id} not sent: {e}")

        return appointment

    def update_appointment(self, appointment_id: int, data: AppointmentUpdate, profile: Profile) -> Appointment:
        appointment = self.get_appointment(appointment_id, profile)
        updates = data.model_dump(exclude_unset=True)
        clinic_id = profile.clinic_id

        if "dentist_id" in updates:
            self._check_dentist(updates["dentist_id"], clinic_id)
        if updates.get("treatment_id") is not None:
            self._get_treatment(updates["treatment_id"], clinic_id)

        if SLOT_FIELDS & updates.keys():
            new_date = updates.pop("date", None) or appointment.scheduled_at.date()
            new_time = updates.pop("time", None) or TimeOfDay.from_time(appointment.scheduled_at.time()).format()
            dentist_id = updates["dentist_id"] if "dentist_id" in updates else appointment.dentist_id

            self.schedules.ensure_bookable(clinic_id, new_date, new_time, dentist_id)

            scheduled_at = combine(new_date, TimeOfDay.parse(new_time))
            if scheduled_at != appointment.scheduled_at:
                updates["scheduled_at"] = scheduled_at
                updates["reminder_sent"] = False
                logger.info(f"🔁 Appointment {appointment_id} moved to {scheduled_at}")

        return self.repo.update_appointment(self.db, appointment, **updates)

    async def cancel_appointment(self, appointment_id: int, reason: Optional[str], profile: Profile) -> Appointment:
        appointment = self.get_appointment(appointment_id, profile)
        if appointment.status == "cancelled":
            raise HTTPException(status_code=400, detail="Appointment is already cancelled")

        appointment = self.repo.update_appointment(self.db, appointment, status="cancelled")
        logger.info(f"❌ Appointment {appointment_id} cancelled (clinic {profile.clinic_id})")

        try:
            await send_appointment_cancelled_notification(self.db, appointment, reason)
        except Exception as e:
            logger.warning(f"⚠️ Cancellation notice for appointment {appointment_id} not sent: {e}")

        return appointment

    def delete_appointment(self, appointment_id: int, profile: Profile) -> dict:
        appointment = self.get_appointment(appointment_id, profile)
        self.repo.delete_appointment(self.db, appointment)
        logger.info(f"🗑️ Appointment {appointment_id} deleted (clinic {profile.clinic_id})")
        return {"message": "Appointment deleted"}
