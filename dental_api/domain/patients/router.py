"""Patient router - FastAPI endpoints for patient records"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_profile
from ...database import get_db
from ...models import Profile
from .schemas import PatientCreate, PatientResponse, PatientUpdate
from .service import PatientService

router = APIRouter(prefix="/patients", tags=["Patients"])


def get_patient_service(db: Session = Depends(get_db)) -> PatientService:
    """Dependency injection for PatientService"""
    return PatientService(db)


@router.get("", response_model=list[PatientResponse])
async def list_patients(
    search: Optional[str] = Query(None, description="Filter by first or last name"),
    current_profile: Profile = Depends(get_current_profile),
    service: PatientService = Depends(get_patient_service),
):
    return service.search_patients(current_profile, search)


@router.get("/{patient_id}", response_model=PatientResponse)
async def get_patient(
    patient_id: int,
    current_profile: Profile = Depends(get_current_profile),
    service: PatientService = Depends(get_patient_service),
):
    return service.get_patient(patient_id, current_profile)


@router.post("", response_model=PatientResponse, status_code=201)
async def create_patient(
    data: PatientCreate,
    current_profile: Profile = Depends(get_current_profile),
    service: PatientService = Depends(get_patient_service),
):
    return service.create_patient(data, current_profile)


@router.patch("/{patient_id}", response_model=PatientResponse)
async def update_patient(
    patient_id: int,
    data: PatientUpdate,
    current_profile: Profile = Depends(get_current_profile),
    service: PatientService = Depends(get_patient_service),
):
    return service.update_patient(patient_id, data, current_profile)
