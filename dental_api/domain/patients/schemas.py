"""Patient domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import (
    validate_email,
    validate_max_length,
    validate_person_name,
    validate_phone,
)


class PatientBase(BaseModel):
    email: Optional[str] = None
    phone: Optional[str] = None
    whatsapp: Optional[str] = None
    birth_date: Optional[date] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    allergies: Optional[list[str]] = None
    medications: Optional[list[str]] = None
    medical_notes: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v) or None

    @field_validator("phone", "whatsapp", "emergency_contact_phone")
    @classmethod
    def validate_phone_fields(cls, v):
        return validate_phone(v) or None

    @field_validator("gender")
    @classmethod
    def validate_gender(cls, v):
        if v and v not in {"male", "female", "other"}:
            raise ValueError("gender must be 'male', 'female' or 'other'")
        return v or None

    @field_validator("address")
    @classmethod
    def validate_address(cls, v):
        return validate_max_length(v, 255, "Address")

    @field_validator("city", "state", "emergency_contact_name")
    @classmethod
    def validate_short_text(cls, v):
        return validate_max_length(v, 100, "Field")

    @field_validator("postal_code")
    @classmethod
    def validate_postal_code(cls, v):
        return validate_max_length(v, 20, "Postal code")

    @field_validator("medical_notes")
    @classmethod
    def validate_medical_notes(cls, v):
        return validate_max_length(v, 2000, "Medical notes")


class PatientCreate(PatientBase):
    """Schema for registering a new patient"""

    first_name: str
    last_name: str

    @field_validator("first_name")
    @classmethod
    def validate_first_name(cls, v):
        return validate_person_name(v, "First name")

    @field_validator("last_name")
    @classmethod
    def validate_last_name(cls, v):
        return validate_person_name(v, "Last name")


class PatientUpdate(PatientBase):
    """Schema for updating a patient"""

    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @field_validator("first_name")
    @classmethod
    def validate_first_name(cls, v):
        if v is None:
            return v
        return validate_person_name(v, "First name")

    @field_validator("last_name")
    @classmethod
    def validate_last_name(cls, v):
        if v is None:
            return v
        return validate_person_name(v, "Last name")


class PatientResponse(PatientBase):
    id: int
    clinic_id: int
    first_name: str
    last_name: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
