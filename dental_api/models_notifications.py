"""
Notification Models
Per-clinic email / WhatsApp settings and delivery logs
"""

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class EmailSettings(Base):
    """Sender identity and automatic email switches for a clinic"""

    __tablename__ = "email_settings"

    id = Column(Integer, primary_key=True, index=True)
    clinic_id = Column(Integer, ForeignKey("clinics.id"), nullable=False, unique=True)

    from_name = Column(String(255), nullable=True)
    reply_to_email = Column(String(255), nullable=True)
    email_signature = Column(Text, nullable=True)

    # Automatic emails
    send_appointment_confirmation = Column(Boolean, default=True)
    send_appointment_reminder = Column(Boolean, default=True)
    send_payment_receipt = Column(Boolean, default=True)
    reminder_enabled = Column(Boolean, default=True)
    reminder_hours_before = Column(Integer, default=24)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    clinic = relationship("Clinic")


class EmailLog(Base):
    """Track emails sent on behalf of a clinic"""

    __tablename__ = "email_logs"

    id = Column(Integer, primary_key=True, index=True)
    clinic_id = Column(Integer, ForeignKey("clinics.id"), nullable=False, index=True)

    recipient_email = Column(String(255), nullable=False)
    recipient_type = Column(String(20), default="patient")  # patient, staff
    recipient_id = Column(Integer, nullable=True)
    template_name = Column(String(50), nullable=False)
    subject = Column(String(255), nullable=True)

    status = Column(String(20), nullable=False)  # sent, failed
    resend_id = Column(String(255), nullable=True)
    error_message = Column(Text, nullable=True)
    payload = Column(JSON, nullable=True)

    created_at = Column(DateTime, server_default=func.now())


class WhatsAppConfig(Base):
    """WhatsApp Cloud API credentials (encrypted) and switches"""

    __tablename__ = "whatsapp_configs"

    id = Column(Integer, primary_key=True, index=True)
    clinic_id = Column(Integer, ForeignKey("clinics.id"), nullable=False, unique=True)

    phone_number_id = Column(Text, nullable=False)
    access_token = Column(Text, nullable=False)
    business_phone = Column(String(20), nullable=True)

    is_enabled = Column(Boolean, default=True)
    send_confirmations = Column(Boolean, default=True)
    send_reminders = Column(Boolean, default=True)
    send_budgets = Column(Boolean, default=True)

    is_verified = Column(Boolean, default=False)
    last_test_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    clinic = relationship("Clinic")


class WhatsAppMessageLog(Base):
    """Track WhatsApp messages sent via the Cloud API"""

    __tablename__ = "whatsapp_message_logs"

    id = Column(Integer, primary_key=True, index=True)
    clinic_id = Column(Integer, ForeignKey("clinics.id"), nullable=False, index=True)
    config_id = Column(Integer, ForeignKey("whatsapp_configs.id"), nullable=False)

    to_phone = Column(String(20), nullable=False)
    message_body = Column(Text, nullable=False)
    message_type = Column(String(50), nullable=False)
    entity_type = Column(String(50), nullable=True)
    entity_id = Column(Integer, nullable=True)

    whatsapp_message_id = Column(String(255), nullable=True)
    status = Column(String(50), nullable=False)
    error_message = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())

    config = relationship("WhatsAppConfig")
