"""Budget schemas - Pydantic models for treatment quotes"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import BUDGET_STATUSES
from ...shared.validators import validate_max_length


def _validate_percent(v: Optional[float]) -> Optional[float]:
    if v is not None and not 0 <= v <= 100:
        raise ValueError("Percentage must be between 0 and 100")
    return v


class BudgetItemCreate(BaseModel):
    treatment_id: Optional[int] = None
    description: Optional[str] = None
    tooth_number: Optional[int] = None
    quantity: int = 1
    unit_price: Optional[float] = None

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return validate_max_length(v, 255, "Description")

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1")
        return v

    @field_validator("unit_price")
    @classmethod
    def validate_unit_price(cls, v):
        if v is not None and v < 0:
            raise ValueError("Unit price must be greater than or equal to 0")
        return v

    @field_validator("tooth_number")
    @classmethod
    def validate_tooth_number(cls, v):
        # FDI two-digit notation, permanent and primary teeth
        if v is not None and not 11 <= v <= 85:
            raise ValueError("Invalid tooth number")
        return v


class BudgetCreate(BaseModel):
    patient_id: int
    items: list[BudgetItemCreate]
    notes: Optional[str] = None
    valid_until: Optional[dt.date] = None
    discount_percent: Optional[float] = None
    tax_percent: Optional[float] = None

    @field_validator("items")
    @classmethod
    def validate_items(cls, v):
        if not v:
            raise ValueError("A budget needs at least one item")
        return v

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v):
        return validate_max_length(v, 1000, "Notes")

    @field_validator("discount_percent", "tax_percent")
    @classmethod
    def validate_percent(cls, v):
        return _validate_percent(v)


class BudgetStatusUpdate(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        if v not in BUDGET_STATUSES:
            raise ValueError(f"status must be one of: {', '.join(BUDGET_STATUSES)}")
        return v


class BudgetItemResponse(BaseModel):
    id: int
    treatment_id: Optional[int] = None
    description: str
    tooth_number: Optional[int] = None
    quantity: Optional[int] = None
    unit_price: float
    total: float

    class Config:
        from_attributes = True


class BudgetResponse(BaseModel):
    id: int
    clinic_id: int
    patient_id: int
    status: str
    subtotal: Optional[float] = None
    discount_percent: Optional[float] = None
    tax_percent: Optional[float] = None
    total: Optional[float] = None
    notes: Optional[str] = None
    valid_until: Optional[dt.date] = None
    created_at: Optional[dt.datetime] = None
    items: list[BudgetItemResponse] = []

    class Config:
        from_attributes = True


class BudgetBalanceResponse(BaseModel):
    budget_id: int
    status: str
    total: float
    paid: float
    pending: float
    created_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True
