"""
Unified Notification Service
Sends patient notifications by email and WhatsApp from the same event
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..email_service import send_template_email
from ..models import Appointment, Budget, Clinic, Patient, Payment
from ..models_notifications import EmailSettings
from .whatsapp_service import (
    appointment_confirmation_message,
    budget_sent_message,
    send_whatsapp_message,
)

logger = logging.getLogger(__name__)

DATE_FORMAT = "%A, %B %d, %Y"
TIME_FORMAT = "%H:%M"


async def send_notification(
    db: Session,
    clinic_id: int,
    patient: Patient,
    notification_type: str,
    email_data: Optional[dict] = None,
    whatsapp_message: Optional[str] = None,
    entity_type: Optional[str] = None,
    entity_id: Optional[int] = None,
) -> dict:
    """
    Unified notification sender that handles both email and WhatsApp

    Args:
        db: Database session
        clinic_id: Sending clinic
        patient: Recipient patient
        notification_type: Email template name, also used as WhatsApp message type
        email_data: Template payload; no email is sent when None
        whatsapp_message: Message body; no WhatsApp is sent when None
        entity_type: Optional entity type for the WhatsApp log (Appointment, Budget, ...)
        entity_id: Optional entity ID

    Returns:
        Dict with email_sent / whatsapp_sent status and errors
    """
    result = {"email_sent": False, "whatsapp_sent": False, "email_error": None, "whatsapp_error": None}

    if email_data is not None and patient.email:
        try:
            logger.info(f"📧 Sending {notification_type} email to {patient.email}")
            await send_template_email(
                db,
                clinic_id=clinic_id,
                to=patient.email,
                template=notification_type,
                data=email_data,
                recipient_type="patient",
                recipient_id=patient.id,
            )
            result["email_sent"] = True
        except Exception as e:
            result["email_error"] = str(e)
            logger.error(f"❌ Failed to send {notification_type} email to {patient.email}: {e}")
    elif email_data is not None:
        logger.debug(f"⚠️ No email address for {notification_type} notification to {patient.full_name}")

    phone = patient.whatsapp or patient.phone
    if whatsapp_message is not None and phone:
        try:
            success, error = await send_whatsapp_message(
                db,
                clinic_id=clinic_id,
                to_phone=phone,
                message_body=whatsapp_message,
                message_type=notification_type,
                entity_type=entity_type,
                entity_id=entity_id,
            )
            result["whatsapp_sent"] = success
            result["whatsapp_error"] = error
            if not success:
                logger.debug(f"ℹ️ {notification_type} WhatsApp not sent: {error}")
        except Exception as e:
            result["whatsapp_error"] = str(e)
            logger.error(f"❌ Failed to send {notification_type} WhatsApp to {phone}: {e}")

    return result


def get_email_settings(db: Session, clinic_id: int) -> Optional[EmailSettings]:
    return db.query(EmailSettings).filter(EmailSettings.clinic_id == clinic_id).first()


def clinic_name(db: Session, clinic_id: int) -> str:
    clinic = db.query(Clinic).filter(Clinic.id == clinic_id).first()
    return clinic.name if clinic else ""


def appointment_email_data(appointment: Appointment) -> dict:
    data = {
        "patientName": appointment.patient.full_name if appointment.patient else "",
        "date": appointment.scheduled_at.strftime(DATE_FORMAT),
        "time": appointment.scheduled_at.strftime(TIME_FORMAT),
    }
    if appointment.dentist:
        data["dentistName"] = appointment.dentist.full_name
    if appointment.treatment:
        data["treatment"] = appointment.treatment.name
    if appointment.notes:
        data["notes"] = appointment.notes
    return data


async def send_appointment_confirmation_notification(db: Session, appointment: Appointment) -> dict:
    """Confirmation for a newly booked appointment, honoring the clinic's switch"""
    settings = get_email_settings(db, appointment.clinic_id)
    email_data = None
    if settings is None or settings.send_appointment_confirmation:
        email_data = appointment_email_data(appointment)

    result = await send_notification(
        db,
        clinic_id=appointment.clinic_id,
        patient=appointment.patient,
        notification_type="appointment_confirmation",
        email_data=email_data,
        whatsapp_message=appointment_confirmation_message(
            appointment.patient.first_name,
            clinic_name(db, appointment.clinic_id),
            appointment.scheduled_at.strftime(DATE_FORMAT),
            appointment.scheduled_at.strftime(TIME_FORMAT),
        ),
        entity_type="Appointment",
        entity_id=appointment.id,
    )
    if result["email_sent"]:
        appointment.confirmation_sent = True
        db.commit()
    return result


async def send_appointment_cancelled_notification(
    db: Session, appointment: Appointment, reason: Optional[str] = None
) -> dict:
    email_data = appointment_email_data(appointment)
    if reason:
        email_data["reason"] = reason
    return await send_notification(
        db,
        clinic_id=appointment.clinic_id,
        patient=appointment.patient,
        notification_type="appointment_cancelled",
        email_data=email_data,
    )


async def send_budget_notification(db: Session, budget: Budget) -> dict:
    email_data = {
        "patientName": budget.patient.full_name,
        "budgetNumber": budget.id,
        "date": budget.created_at.strftime(DATE_FORMAT) if budget.created_at else "",
        "items": [{"description": item.description, "total": item.total} for item in budget.items],
        "total": budget.total or 0,
    }
    if budget.valid_until:
        email_data["validUntil"] = budget.valid_until.strftime(DATE_FORMAT)
    if budget.notes:
        email_data["notes"] = budget.notes

    return await send_notification(
        db,
        clinic_id=budget.clinic_id,
        patient=budget.patient,
        notification_type="budget_sent",
        email_data=email_data,
        whatsapp_message=budget_sent_message(
            budget.patient.first_name, clinic_name(db, budget.clinic_id), budget.id, budget.total or 0
        ),
        entity_type="Budget",
        entity_id=budget.id,
    )


async def send_payment_receipt_notification(db: Session, payment: Payment) -> dict:
    settings = get_email_settings(db, payment.clinic_id)
    if settings is not None and not settings.send_payment_receipt:
        logger.debug(f"ℹ️ Payment receipts disabled for clinic {payment.clinic_id}")
        return {"email_sent": False, "whatsapp_sent": False, "email_error": None, "whatsapp_error": None}

    return await send_notification(
        db,
        clinic_id=payment.clinic_id,
        patient=payment.patient,
        notification_type="payment_receipt",
        email_data={
            "patientName": payment.patient.full_name,
            "amount": payment.amount,
            "date": payment.payment_date.strftime(DATE_FORMAT) if payment.payment_date else "",
            "paymentMethod": payment.payment_method,
        },
    )
