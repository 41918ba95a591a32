"""Payment schemas - Pydantic models for validation"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import PAYMENT_METHODS
from ...shared.validators import validate_max_length


class PaymentCreate(BaseModel):
    patient_id: int
    budget_id: Optional[int] = None
    amount: float
    payment_method: str = "cash"
    notes: Optional[str] = None

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Amount must be greater than 0")
        return round(v, 2)

    @field_validator("payment_method")
    @classmethod
    def validate_payment_method(cls, v: str) -> str:
        if v not in PAYMENT_METHODS:
            raise ValueError(f"payment_method must be one of: {', '.join(PAYMENT_METHODS)}")
        return v

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v):
        return validate_max_length(v, 500, "Notes")


class PaymentResponse(BaseModel):
    id: int
    clinic_id: int
    patient_id: int
    budget_id: Optional[int] = None
    amount: float
    payment_method: Optional[str] = None
    payment_date: Optional[dt.datetime] = None
    notes: Optional[str] = None
    created_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True


class PaymentListResponse(BaseModel):
    payments: list[PaymentResponse]
    month_total: float
    by_method: dict[str, float]
