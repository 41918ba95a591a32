"""Treatment catalog schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_max_length


def _validate_duration(v: Optional[int]) -> Optional[int]:
    if v is None:
        return v
    if not 5 <= v <= 480:
        raise ValueError("duration_minutes must be between 5 and 480")
    return v


def _validate_price(v: Optional[float]) -> Optional[float]:
    if v is not None and v < 0:
        raise ValueError("price must be greater than or equal to 0")
    return v


class TreatmentCreate(BaseModel):
    name: str
    description: Optional[str] = None
    price: float = 0
    duration_minutes: int = 30
    category: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Name is required")
        return validate_max_length(v, 100, "Name")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return validate_max_length(v, 500, "Description")

    @field_validator("category")
    @classmethod
    def validate_category(cls, v):
        return validate_max_length(v, 50, "Category")

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        return _validate_price(v)

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, v):
        return _validate_duration(v)


class TreatmentUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    duration_minutes: Optional[int] = None
    category: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        return _validate_price(v)

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, v):
        return _validate_duration(v)


class TreatmentResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    price: float
    duration_minutes: Optional[int] = None
    category: Optional[str] = None
    is_active: bool

    class Config:
        from_attributes = True
