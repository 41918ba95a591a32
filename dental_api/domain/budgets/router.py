"""Budget router - FastAPI endpoints for treatment quotes"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_profile
from ...database import get_db
from ...models import Profile
from .schemas import BudgetBalanceResponse, BudgetCreate, BudgetResponse, BudgetStatusUpdate
from .service import BudgetService

router = APIRouter(prefix="/budgets", tags=["Budgets"])


def get_budget_service(db: Session = Depends(get_db)) -> BudgetService:
    """Dependency injection for BudgetService"""
    return BudgetService(db)


@router.get("", response_model=list[BudgetResponse])
async def list_budgets(
    patient_id: Optional[int] = Query(None),
    status: Optional[str] = Query(None),
    current_profile: Profile = Depends(get_current_profile),
    service: BudgetService = Depends(get_budget_service),
):
    return service.list_budgets(current_profile, patient_id=patient_id, status=status)


@router.get("/with-balance", response_model=list[BudgetBalanceResponse])
async def budgets_with_balance(
    patient_id: int = Query(...),
    current_profile: Profile = Depends(get_current_profile),
    service: BudgetService = Depends(get_budget_service),
):
    """Budgets a new payment can be registered against"""
    return service.budgets_with_balance(patient_id, current_profile)


@router.get("/{budget_id}", response_model=BudgetResponse)
async def get_budget(
    budget_id: int,
    current_profile: Profile = Depends(get_current_profile),
    service: BudgetService = Depends(get_budget_service),
):
    return service.get_budget(budget_id, current_profile)


@router.get("/{budget_id}/balance", response_model=BudgetBalanceResponse)
async def get_budget_balance(
    budget_id: int,
    current_profile: Profile = Depends(get_current_profile),
    service: BudgetService = Depends(get_budget_service),
):
    return service.get_balance(budget_id, current_profile)


@router.post("", response_model=BudgetResponse, status_code=201)
async def create_budget(
    data: BudgetCreate,
    current_profile: Profile = Depends(get_current_profile),
    service: BudgetService = Depends(get_budget_service),
):
    return service.create_budget(data, current_profile)


@router.patch("/{budget_id}/status", response_model=BudgetResponse)
async def update_budget_status(
    budget_id: int,
    data: BudgetStatusUpdate,
    current_profile: Profile = Depends(get_current_profile),
    service: BudgetService = Depends(get_budget_service),
):
    return service.update_status(budget_id, data.status, current_profile)


@router.post("/{budget_id}/send")
async def send_budget(
    budget_id: int,
    current_profile: Profile = Depends(get_current_profile),
    service: BudgetService = Depends(get_budget_service),
):
    return await service.send_budget(budget_id, current_profile)
