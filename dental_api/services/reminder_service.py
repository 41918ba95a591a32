"""
Appointment Reminder Service
Emails patients ahead of their appointments, once per appointment
"""

import logging
from datetime import datetime, time, timedelta
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ..config import REMINDER_DEFAULT_HOURS
from ..email_service import send_template_email
from ..models import Appointment, Clinic
from ..models_notifications import EmailSettings
from .notification_service import DATE_FORMAT, TIME_FORMAT, appointment_email_data
from .whatsapp_service import appointment_reminder_message, send_whatsapp_message

logger = logging.getLogger(__name__)

REMINDABLE_STATUSES = ("scheduled", "confirmed")


def due_appointments(db: Session, clinic_id: int, target_day) -> list[Appointment]:
    """Appointments on the target day that still need a reminder"""
    day_start = datetime.combine(target_day, time.min)
    day_end = datetime.combine(target_day, time.max)
    return (
        db.query(Appointment)
        .options(
            joinedload(Appointment.patient),
            joinedload(Appointment.dentist),
            joinedload(Appointment.treatment),
        )
        .filter(
            Appointment.clinic_id == clinic_id,
            Appointment.scheduled_at >= day_start,
            Appointment.scheduled_at <= day_end,
            Appointment.reminder_sent.is_(False),
            Appointment.status.in_(REMINDABLE_STATUSES),
        )
        .order_by(Appointment.scheduled_at)
        .all()
    )


async def send_appointment_reminder(db: Session, appointment: Appointment, clinic: Optional[Clinic], now: datetime):
    patient = appointment.patient
    data = appointment_email_data(appointment)
    data["isToday"] = appointment.scheduled_at.date() == now.date()

    await send_template_email(
        db,
        clinic_id=appointment.clinic_id,
        to=patient.email,
        template="appointment_reminder",
        data=data,
        recipient_type="patient",
        recipient_id=patient.id,
    )

    appointment.reminder_sent = True
    db.commit()

    phone = patient.whatsapp or patient.phone
    if phone:
        await send_whatsapp_message(
            db,
            clinic_id=appointment.clinic_id,
            to_phone=phone,
            message_body=appointment_reminder_message(
                patient.first_name,
                clinic.name if clinic else "",
                appointment.scheduled_at.strftime(DATE_FORMAT),
                appointment.scheduled_at.strftime(TIME_FORMAT),
            ),
            message_type="appointment_reminder",
            entity_type="Appointment",
            entity_id=appointment.id,
        )


async def send_clinic_reminders(db: Session, setting: EmailSettings, now: datetime) -> tuple[int, list[str]]:
    """Remind every due appointment of one clinic; a failure only skips that appointment"""
    hours_ahead = setting.reminder_hours_before or REMINDER_DEFAULT_HOURS
    target_day = (now + timedelta(hours=hours_ahead)).date()
    clinic = db.query(Clinic).filter(Clinic.id == setting.clinic_id).first()

    sent = 0
    errors = []
    for appointment in due_appointments(db, setting.clinic_id, target_day):
        if not appointment.patient or not appointment.patient.email:
            continue
        try:
            await send_appointment_reminder(db, appointment, clinic, now)
        except Exception as e:
            db.rollback()
            errors.append(f"Clinic {setting.clinic_id}, appointment {appointment.id}: {str(e)}")
            logger.error(f"❌ Reminder for appointment {appointment.id} failed: {e}")
            continue
        sent += 1

    return sent, errors


async def send_due_reminders(db: Session, now: Optional[datetime] = None) -> dict:
    """
    Send reminders for every clinic with reminders enabled

    A failed appointment is reported and skipped; the rest of the run continues.

    Returns:
        Dict with the number of reminders sent and the errors collected
    """
    now = now or datetime.now()
    settings = (
        db.query(EmailSettings)
        .filter(
            EmailSettings.reminder_enabled.is_(True),
            EmailSettings.send_appointment_reminder.is_(True),
        )
        .all()
    )

    total_sent = 0
    errors = []
    for setting in settings:
        try:
            sent, clinic_errors = await send_clinic_reminders(db, setting, now)
        except Exception as e:
            db.rollback()
            errors.append(f"Clinic {setting.clinic_id}: {str(e)}")
            logger.error(f"❌ Reminder run failed for clinic {setting.clinic_id}: {e}")
            continue
        total_sent += sent
        errors.extend(clinic_errors)

    logger.info(f"⏰ Reminder run complete: {total_sent} sent, {len(errors)} error(s)")
    return {"sent": total_sent, "errors": errors}
