"""Payment router - FastAPI endpoints for payments"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_profile
from ...database import get_db
from ...models import Profile
from .schemas import PaymentCreate, PaymentListResponse, PaymentResponse
from .service import PaymentService

router = APIRouter(prefix="/payments", tags=["Payments"])


def get_payment_service(db: Session = Depends(get_db)) -> PaymentService:
    """Dependency injection for PaymentService"""
    return PaymentService(db)


@router.get("", response_model=PaymentListResponse)
async def list_payments(
    patient_id: Optional[int] = Query(None),
    budget_id: Optional[int] = Query(None),
    current_profile: Profile = Depends(get_current_profile),
    service: PaymentService = Depends(get_payment_service),
):
    return service.list_payments(current_profile, patient_id=patient_id, budget_id=budget_id)


@router.post("", response_model=PaymentResponse, status_code=201)
async def register_payment(
    data: PaymentCreate,
    current_profile: Profile = Depends(get_current_profile),
    service: PaymentService = Depends(get_payment_service),
):
    return await service.register_payment(data, current_profile)
