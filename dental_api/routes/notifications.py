"""
Notification Settings Routes
Clinic email settings, WhatsApp Cloud API credentials and reminder runs
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from ..auth import get_current_profile
from ..database import get_db
from ..models import Profile
from ..models_notifications import EmailSettings, WhatsAppConfig
from ..services.reminder_service import send_due_reminders
from ..services.whatsapp_service import encrypt_credential, test_connection
from ..shared.validators import validate_email, validate_max_length, validate_phone

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/notifications", tags=["Notifications"])


# Pydantic Models
class EmailSettingsPayload(BaseModel):
    from_name: Optional[str] = None
    reply_to_email: Optional[str] = None
    email_signature: Optional[str] = None
    send_appointment_confirmation: bool = True
    send_appointment_reminder: bool = True
    send_payment_receipt: bool = True
    reminder_enabled: bool = True
    reminder_hours_before: int = 24

    @field_validator("from_name")
    @classmethod
    def validate_from_name(cls, v):
        return validate_max_length(v, 255, "From name")

    @field_validator("reply_to_email")
    @classmethod
    def validate_reply_to(cls, v):
        return validate_email(v)

    @field_validator("email_signature")
    @classmethod
    def validate_signature(cls, v):
        return validate_max_length(v, 1000, "Signature")

    @field_validator("reminder_hours_before")
    @classmethod
    def validate_reminder_hours(cls, v: int) -> int:
        if not 1 <= v <= 168:
            raise ValueError("reminder_hours_before must be between 1 and 168")
        return v

    class Config:
        from_attributes = True


class WhatsAppCredentials(BaseModel):
    phone_number_id: str
    access_token: str
    business_phone: Optional[str] = None

    @field_validator("business_phone")
    @classmethod
    def validate_business_phone(cls, v):
        return validate_phone(v)


class WhatsAppSettings(BaseModel):
    is_enabled: bool
    send_confirmations: bool
    send_reminders: bool
    send_budgets: bool


class WhatsAppStatusResponse(BaseModel):
    connected: bool
    business_phone: Optional[str] = None
    is_enabled: Optional[bool] = None
    is_verified: Optional[bool] = None
    send_confirmations: Optional[bool] = None
    send_reminders: Optional[bool] = None
    send_budgets: Optional[bool] = None
    last_test_at: Optional[datetime] = None


def require_admin(profile: Profile) -> None:
    if profile.role != "admin":
        raise HTTPException(status_code=403, detail="Admin role required")


# Routes
@router.get("/email-settings", response_model=EmailSettingsPayload)
async def get_email_settings(
    current_profile: Profile = Depends(get_current_profile), db: Session = Depends(get_db)
):
    settings = db.query(EmailSettings).filter(EmailSettings.clinic_id == current_profile.clinic_id).first()
    if not settings:
        return EmailSettingsPayload()
    return settings


@router.put("/email-settings", response_model=EmailSettingsPayload)
async def save_email_settings(
    payload: EmailSettingsPayload,
    current_profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    require_admin(current_profile)
    settings = db.query(EmailSettings).filter(EmailSettings.clinic_id == current_profile.clinic_id).first()
    if not settings:
        settings = EmailSettings(clinic_id=current_profile.clinic_id)
        db.add(settings)

    for key, value in payload.model_dump().items():
        setattr(settings, key, value)

    db.commit()
    db.refresh(settings)
    logger.info(f"📧 Email settings saved for clinic {current_profile.clinic_id}")
    return settings


@router.get("/whatsapp/status", response_model=WhatsAppStatusResponse)
async def get_whatsapp_status(
    current_profile: Profile = Depends(get_current_profile), db: Session = Depends(get_db)
):
    config = db.query(WhatsAppConfig).filter(WhatsAppConfig.clinic_id == current_profile.clinic_id).first()
    if not config:
        return WhatsAppStatusResponse(connected=False)

    return WhatsAppStatusResponse(
        connected=True,
        business_phone=config.business_phone,
        is_enabled=config.is_enabled,
        is_verified=config.is_verified,
        send_confirmations=config.send_confirmations,
        send_reminders=config.send_reminders,
        send_budgets=config.send_budgets,
        last_test_at=config.last_test_at,
    )


@router.post("/whatsapp/test")
async def test_whatsapp_connection(
    credentials: WhatsAppCredentials,
    current_profile: Profile = Depends(get_current_profile),
):
    """Check credentials against the Graph API without storing them"""
    require_admin(current_profile)
    try:
        result = await test_connection(credentials.phone_number_id, credentials.access_token)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    if not result["success"]:
        raise HTTPException(status_code=400, detail=result["error"])
    return result


@router.post("/whatsapp/connect")
async def connect_whatsapp(
    credentials: WhatsAppCredentials,
    current_profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    """Verify and store the clinic's WhatsApp Business credentials"""
    require_admin(current_profile)
    try:
        result = await test_connection(credentials.phone_number_id, credentials.access_token)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    if not result["success"]:
        raise HTTPException(status_code=400, detail=result["error"])

    clinic_id = current_profile.clinic_id
    config = db.query(WhatsAppConfig).filter(WhatsAppConfig.clinic_id == clinic_id).first()
    if not config:
        config = WhatsAppConfig(clinic_id=clinic_id)
        db.add(config)

    config.phone_number_id = encrypt_credential(credentials.phone_number_id)
    config.access_token = encrypt_credential(credentials.access_token)
    config.business_phone = credentials.business_phone or result.get("phone_number")
    config.is_enabled = True
    config.is_verified = True
    config.last_test_at = datetime.now()

    db.commit()
    logger.info(f"📱 WhatsApp connected for clinic {clinic_id}")
    return {"message": "WhatsApp connected successfully", "verified": True}


@router.put("/whatsapp/settings")
async def update_whatsapp_settings(
    settings: WhatsAppSettings,
    current_profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    require_admin(current_profile)
    config = db.query(WhatsAppConfig).filter(WhatsAppConfig.clinic_id == current_profile.clinic_id).first()
    if not config:
        raise HTTPException(status_code=404, detail="WhatsApp is not connected")

    for key, value in settings.model_dump().items():
        setattr(config, key, value)
    db.commit()
    return {"message": "WhatsApp settings updated"}


@router.delete("/whatsapp")
async def disconnect_whatsapp(
    current_profile: Profile = Depends(get_current_profile), db: Session = Depends(get_db)
):
    require_admin(current_profile)
    config = db.query(WhatsAppConfig).filter(WhatsAppConfig.clinic_id == current_profile.clinic_id).first()
    if not config:
        raise HTTPException(status_code=404, detail="WhatsApp is not connected")

    config.is_enabled = False
    config.is_verified = False
    db.commit()
    logger.info(f"📱 WhatsApp disconnected for clinic {current_profile.clinic_id}")
    return {"message": "WhatsApp disconnected"}


@router.post("/reminders/run")
async def run_reminders(
    current_profile: Profile = Depends(get_current_profile), db: Session = Depends(get_db)
):
    """Send every due appointment reminder across clinics"""
    require_admin(current_profile)
    return await send_due_reminders(db)
