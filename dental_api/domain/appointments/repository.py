"""Appointment repository - Database operations for appointments"""

from datetime import datetime, time
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def list_appointments(
        db: Session,
        clinic_id: int,
        date_from=None,
        date_to=None,
        status: Optional[str] = None,
        dentist_id: Optional[int] = None,
        patient_id: Optional[int] = None,
    ) -> list[Appointment]:
        query = db.query(Appointment).filter(Appointment.clinic_id == clinic_id)

        if date_from:
            query = query.filter(Appointment.scheduled_at >= datetime.combine(date_from, time.min))
        if date_to:
            query = query.filter(Appointment.scheduled_at <= datetime.combine(date_to, time.max))
        if status:
            query = query.filter(Appointment.status == status)
        if dentist_id:
            query = query.filter(Appointment.dentist_id == dentist_id)
        if patient_id:
            query = query.filter(Appointment.patient_id == patient_id)

        return query.order_by(Appointment.scheduled_at).all()

    @staticmethod
    def get_appointment_by_id(db: Session, appointment_id: int, clinic_id: int) -> Optional[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.id == appointment_id, Appointment.clinic_id == clinic_id)
            .first()
        )

    @staticmethod
    def create_appointment(db: Session, clinic_id: int, **appointment_data) -> Appointment:
        appointment = Appointment(clinic_id=clinic_id, **appointment_data)
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def update_appointment(db: Session, appointment: Appointment, **updates) -> Appointment:
        for key, value in updates.items():
            if hasattr(appointment, key):
                setattr(appointment, key, value)

        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def delete_appointment(db: Session, appointment: Appointment) -> None:
        db.delete(appointment)
        db.commit()
