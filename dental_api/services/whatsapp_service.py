"""
WhatsApp Cloud API Service
Sends patient notifications through the clinic's WhatsApp Business number
"""

import base64
import hashlib
import logging
import re
from typing import Optional

import httpx
from cryptography.fernet import Fernet
from sqlalchemy.orm import Session

from ..config import (
    CREDENTIALS_ENCRYPTION_KEY,
    SECRET_KEY,
    WHATSAPP_API_BASE_URL,
    WHATSAPP_API_VERSION,
)
from ..models_notifications import WhatsAppConfig, WhatsAppMessageLog
from ..shared.validators import validate_phone

logger = logging.getLogger(__name__)

PHONE_NUMBER_ID_PATTERN = re.compile(r"^\d+$")


def _fernet_key() -> bytes:
    if CREDENTIALS_ENCRYPTION_KEY:
        return CREDENTIALS_ENCRYPTION_KEY.encode()
    return base64.urlsafe_b64encode(hashlib.sha256(SECRET_KEY.encode()).digest())


# Encryption for credentials
cipher_suite = Fernet(_fernet_key())


def encrypt_credential(credential: str) -> str:
    """Encrypt a credential for storage"""
    return cipher_suite.encrypt(credential.encode()).decode()


def decrypt_credential(encrypted_credential: str) -> str:
    """Decrypt a stored credential"""
    return cipher_suite.decrypt(encrypted_credential.encode()).decode()


def graph_url(path: str) -> str:
    return f"{WHATSAPP_API_BASE_URL}/{WHATSAPP_API_VERSION}/{path}"


async def test_connection(phone_number_id: str, access_token: str) -> dict:
    """
    Check WhatsApp Business credentials against the Graph API

    Raises ValueError when the input is malformed; API failures are reported
    in the returned dict.
    """
    if not phone_number_id or not PHONE_NUMBER_ID_PATTERN.match(phone_number_id):
        raise ValueError("Phone Number ID must be numeric")
    if not access_token:
        raise ValueError("Access token is required")

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(
                graph_url(phone_number_id),
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=10.0,
            )
    except httpx.HTTPError as e:
        logger.error(f"WhatsApp connection test error: {str(e)}")
        return {"success": False, "error": f"Connection error: {str(e)}"}

    if response.status_code == 200:
        data = response.json()
        logger.info(f"✅ WhatsApp connection verified for phone number id {phone_number_id}")
        return {
            "success": True,
            "message": "Connection successful",
            "phone_number": data.get("display_phone_number") or phone_number_id,
        }

    try:
        error = response.json().get("error", {}).get("message")
    except ValueError:
        error = None
    logger.warning(f"⚠️ WhatsApp connection test failed ({response.status_code}): {error}")
    return {"success": False, "error": error or "Connection failed"}


async def send_whatsapp_message(
    db: Session,
    clinic_id: int,
    to_phone: str,
    message_body: str,
    message_type: str,
    entity_type: Optional[str] = None,
    entity_id: Optional[int] = None,
) -> tuple[bool, Optional[str]]:
    """
    Send a text message via the WhatsApp Cloud API

    Returns:
        Tuple of (success: bool, error_message: Optional[str])
    """
    if not to_phone:
        return False, "No phone number provided"

    try:
        formatted_phone = validate_phone(to_phone)
    except ValueError:
        logger.warning(f"Invalid WhatsApp recipient: {to_phone}")
        return False, "Invalid phone number format"

    config = db.query(WhatsAppConfig).filter(WhatsAppConfig.clinic_id == clinic_id).first()

    if not config:
        logger.debug(f"No WhatsApp configuration for clinic {clinic_id}")
        return False, "No WhatsApp configuration"

    if not config.is_enabled:
        logger.debug(f"WhatsApp disabled for clinic {clinic_id}")
        return False, "WhatsApp disabled"

    if not config.is_verified:
        logger.warning(f"WhatsApp configuration not verified for clinic {clinic_id}")
        return False, "Configuration not verified"

    message_type_settings = {
        "appointment_confirmation": config.send_confirmations,
        "appointment_reminder": config.send_reminders,
        "budget_sent": config.send_budgets,
    }
    if message_type in message_type_settings and not message_type_settings[message_type]:
        logger.debug(f"Message type {message_type} disabled for clinic {clinic_id}")
        return False, f"Message type {message_type} disabled"

    try:
        phone_number_id = decrypt_credential(config.phone_number_id)
        access_token = decrypt_credential(config.access_token)
    except Exception as e:
        logger.error(f"Failed to decrypt WhatsApp credentials: {str(e)}")
        return False, "Failed to decrypt credentials"

    def log_message(status: str, message_id: Optional[str] = None, error: Optional[str] = None):
        db.add(
            WhatsAppMessageLog(
                clinic_id=clinic_id,
                config_id=config.id,
                to_phone=formatted_phone,
                message_body=message_body,
                message_type=message_type,
                entity_type=entity_type,
                entity_id=entity_id,
                whatsapp_message_id=message_id,
                status=status,
                error_message=error,
            )
        )
        db.commit()

    logger.info(f"📱 Sending WhatsApp {message_type} to {formatted_phone} for clinic {clinic_id}")
    try:
        async with httpx.AsyncClient() as client:
            response = await client.post(
                graph_url(f"{phone_number_id}/messages"),
                headers={"Authorization": f"Bearer {access_token}"},
                json={
                    "messaging_product": "whatsapp",
                    "to": formatted_phone.lstrip("+"),
                    "type": "text",
                    "text": {"body": message_body},
                },
                timeout=10.0,
            )
    except httpx.HTTPError as e:
        logger.error(f"WhatsApp API error: {str(e)}")
        log_message("failed", error=str(e))
        return False, str(e)

    if response.status_code in [200, 201]:
        messages = response.json().get("messages") or [{}]
        message_id = messages[0].get("id")
        log_message("sent", message_id=message_id)
        logger.info(f"✅ WhatsApp sent: {message_type} to {formatted_phone} (id: {message_id})")
        return True, None

    try:
        error_message = response.json().get("error", {}).get("message") or "Unknown error"
    except ValueError:
        error_message = f"HTTP {response.status_code}"
    log_message("failed", error=error_message)
    logger.error(f"❌ WhatsApp API error [{response.status_code}]: {error_message}")
    return False, error_message


# Message bodies
def appointment_confirmation_message(patient_name: str, clinic_name: str, date: str, time: str) -> str:
    return (
        f"Hi {patient_name}! Your appointment at {clinic_name} is confirmed for {date} at {time}. "
        f"See you soon!"
    )


def appointment_reminder_message(patient_name: str, clinic_name: str, date: str, time: str) -> str:
    return (
        f"Hi {patient_name}! Reminder: you have an appointment at {clinic_name} on {date} at {time}. "
        f"Reply to this message if you cannot attend."
    )


def budget_sent_message(patient_name: str, clinic_name: str, budget_id: int, total: float) -> str:
    return (
        f"Hi {patient_name}! {clinic_name} has sent you treatment quote #{budget_id} "
        f"for ${total:,.2f}. Check your email for the details."
    )
