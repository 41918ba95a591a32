"""Appointment router - FastAPI endpoints for appointments"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_profile
from ...database import get_db
from ...models import Profile
from .schemas import AppointmentCancel, AppointmentCreate, AppointmentResponse, AppointmentUpdate
from .service import AppointmentService

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db)


@router.get("", response_model=list[AppointmentResponse])
async def list_appointments(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    status: Optional[str] = Query(None),
    dentist_id: Optional[int] = Query(None),
    patient_id: Optional[int] = Query(None),
    current_profile: Profile = Depends(get_current_profile),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.list_appointments(
        current_profile,
        date_from=date_from,
        date_to=date_to,
        status=status,
        dentist_id=dentist_id,
        patient_id=patient_id,
    )


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: int,
    current_profile: Profile = Depends(get_current_profile),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.get_appointment(appointment_id, current_profile)


@router.post("", response_model=AppointmentResponse, status_code=201)
async def create_appointment(
    data: AppointmentCreate,
    current_profile: Profile = Depends(get_current_profile),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Book an appointment; 422 when the slot is outside working hours"""
    return await service.create_appointment(data, current_profile)


@router.patch("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: int,
    data: AppointmentUpdate,
    current_profile: Profile = Depends(get_current_profile),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.update_appointment(appointment_id, data, current_profile)


@router.post("/{appointment_id}/cancel", response_model=AppointmentResponse)
async def cancel_appointment(
    appointment_id: int,
    data: Optional[AppointmentCancel] = None,
    current_profile: Profile = Depends(get_current_profile),
    service: AppointmentService = Depends(get_appointment_service),
):
    reason = data.reason if data else None
    return await service.cancel_appointment(appointment_id, reason, current_profile)


@router.delete("/{appointment_id}")
async def delete_appointment(
    appointment_id: int,
    current_profile: Profile = Depends(get_current_profile),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.delete_appointment(appointment_id, current_profile)
