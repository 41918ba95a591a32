"""Treatment router - FastAPI endpoints for the treatment catalog"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_profile
from ...database import get_db
from ...models import Profile
from .schemas import TreatmentCreate, TreatmentResponse, TreatmentUpdate
from .service import TreatmentService

router = APIRouter(prefix="/treatments", tags=["Treatments"])


def get_treatment_service(db: Session = Depends(get_db)) -> TreatmentService:
    """Dependency injection for TreatmentService"""
    return TreatmentService(db)


@router.get("", response_model=list[TreatmentResponse])
async def list_treatments(
    include_inactive: bool = Query(False),
    current_profile: Profile = Depends(get_current_profile),
    service: TreatmentService = Depends(get_treatment_service),
):
    return service.list_treatments(current_profile, include_inactive)


@router.post("", response_model=TreatmentResponse, status_code=201)
async def create_treatment(
    data: TreatmentCreate,
    current_profile: Profile = Depends(get_current_profile),
    service: TreatmentService = Depends(get_treatment_service),
):
    return service.create_treatment(data, current_profile)


@router.patch("/{treatment_id}", response_model=TreatmentResponse)
async def update_treatment(
    treatment_id: int,
    data: TreatmentUpdate,
    current_profile: Profile = Depends(get_current_profile),
    service: TreatmentService = Depends(get_treatment_service),
):
    return service.update_treatment(treatment_id, data, current_profile)


@router.delete("/{treatment_id}")
async def deactivate_treatment(
    treatment_id: int,
    current_profile: Profile = Depends(get_current_profile),
    service: TreatmentService = Depends(get_treatment_service),
):
    return service.deactivate_treatment(treatment_id, current_profile)
