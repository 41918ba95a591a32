"""
Clinic Email Service using Resend
Renders MJML templates with the clinic's branding and logs every send
"""

import io
import logging
from datetime import datetime
from typing import Optional, Union

import resend
from mjml import mjml_to_html
from sqlalchemy.orm import Session

from .config import DEFAULT_CLINIC_NAME, EMAIL_FROM_ADDRESS, RESEND_API_KEY
from .email_templates import TEMPLATES
from .models import Clinic
from .models_notifications import EmailLog, EmailSettings

logger = logging.getLogger(__name__)

resend.api_key = RESEND_API_KEY


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(io.StringIO(mjml_content))
        if isinstance(result, dict):
            if result.get("errors"):
                logger.warning(f"MJML compilation warnings: {result['errors']}")
            return result.get("html", "")
        if getattr(result, "errors", None):
            logger.warning(f"MJML compilation warnings: {result.errors}")
        return getattr(result, "html", None) or str(result)
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise Exception(f"Failed to compile MJML template: {str(e)}") from e


def get_sender(clinic_name: str, settings: Optional[EmailSettings] = None) -> str:
    """`From` header: clinic display name over the platform sending address"""
    display_name = (settings.from_name if settings and settings.from_name else None) or clinic_name
    return f"{display_name} <{EMAIL_FROM_ADDRESS}>"


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    mjml_content: str,
    from_address: Optional[str] = None,
    reply_to: Optional[str] = None,
) -> dict:
    """
    Send an email through Resend

    Args:
        to: Recipient email(s)
        subject: Email subject line
        mjml_content: MJML template content (will be compiled to HTML)
        from_address: Optional custom from address
        reply_to: Optional reply-to address

    Returns:
        Resend response dict
    """
    if not RESEND_API_KEY:
        logger.error("❌ No email service configured - RESEND_API_KEY missing")
        raise Exception("Email service not configured")

    html_content = compile_mjml_to_html(mjml_content)
    recipients = [to] if isinstance(to, str) else to

    try:
        logger.info(f"📧 Sending email via Resend to: {recipients}")
        email_data = {
            "from": from_address or EMAIL_FROM_ADDRESS,
            "to": recipients,
            "subject": subject,
            "html": html_content,
        }
        if reply_to:
            email_data["reply_to"] = reply_to

        response = resend.Emails.send(email_data)
        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return response
    except Exception as e:
        logger.error(f"❌ Email send error to {recipients}: {e}")
        raise Exception(f"Failed to send email: {str(e)}") from e


def enrich_template_data(clinic: Optional[Clinic], settings: Optional[EmailSettings], data: dict) -> dict:
    """Merge clinic branding into the template payload; caller values win"""
    enriched = {
        "clinicName": clinic.name if clinic else DEFAULT_CLINIC_NAME,
        "clinicEmail": clinic.email if clinic else None,
        "clinicPhone": clinic.phone if clinic else None,
        "clinicAddress": clinic.address if clinic else None,
        "clinicLogo": clinic.logo_url if clinic else None,
        "signature": settings.email_signature if settings else None,
        "year": datetime.now().year,
    }
    enriched.update(data)
    return enriched


async def send_template_email(
    db: Session,
    clinic_id: int,
    to: str,
    template: str,
    data: dict,
    recipient_type: str = "patient",
    recipient_id: Optional[int] = None,
) -> dict:
    """
    Render a named template for a clinic and deliver it

    Every attempt is recorded in email_logs. Raises ValueError for an unknown
    template and re-raises delivery failures after logging them.
    """
    render = TEMPLATES.get(template)
    if render is None:
        raise ValueError(f'Template "{template}" not found')

    clinic = db.query(Clinic).filter(Clinic.id == clinic_id).first()
    settings = db.query(EmailSettings).filter(EmailSettings.clinic_id == clinic_id).first()

    enriched = enrich_template_data(clinic, settings, data)
    subject, mjml_content = render(enriched)

    reply_to = (settings.reply_to_email if settings else None) or (clinic.email if clinic else None)

    log = EmailLog(
        clinic_id=clinic_id,
        recipient_email=to,
        recipient_type=recipient_type,
        recipient_id=recipient_id,
        template_name=template,
        subject=subject,
        payload=data,
    )
    try:
        response = await send_email(
            to=to,
            subject=subject,
            mjml_content=mjml_content,
            from_address=get_sender(enriched["clinicName"], settings),
            reply_to=reply_to,
        )
    except Exception as e:
        log.status = "failed"
        log.error_message = str(e)
        db.add(log)
        db.commit()
        raise

    log.status = "sent"
    log.resend_id = response.get("id") if isinstance(response, dict) else None
    db.add(log)
    db.commit()

    logger.info(f"✅ {template} email logged for clinic {clinic_id} ({to})")
    return {"success": True, "id": log.resend_id}
