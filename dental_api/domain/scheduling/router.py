"""Schedule router - FastAPI endpoints for working hours and availability"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_profile
from ...database import get_db
from ...models import Profile
from .schemas import (
    AvailabilityCheckRequest,
    AvailabilityCheckResponse,
    ScheduleWarningResponse,
    WeeklyScheduleUpdate,
    WorkingWindowResponse,
)
from .service import ScheduleService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/schedules", tags=["Schedules"])


def get_schedule_service(db: Session = Depends(get_db)) -> ScheduleService:
    """Dependency injection for ScheduleService"""
    return ScheduleService(db)


@router.get("/me", response_model=list[WorkingWindowResponse])
async def get_my_schedule(
    current_profile: Profile = Depends(get_current_profile),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Get the current professional's week, filled with defaults"""
    return service.get_weekly_schedule(current_profile)


@router.put("/me", response_model=list[WorkingWindowResponse])
async def save_my_schedule(
    data: WeeklyScheduleUpdate,
    current_profile: Profile = Depends(get_current_profile),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Save the current professional's working days and hours"""
    return service.save_weekly_schedule(data, current_profile)


@router.get("/clinic", response_model=list[WorkingWindowResponse])
async def get_clinic_schedules(
    current_profile: Profile = Depends(get_current_profile),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Get the stored windows of every professional in the clinic"""
    return service.get_clinic_windows(current_profile.clinic_id)


@router.post("/availability", response_model=AvailabilityCheckResponse)
async def check_availability(
    data: AvailabilityCheckRequest,
    current_profile: Profile = Depends(get_current_profile),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Check a candidate slot against the configured working hours"""
    warning = service.check_availability(
        current_profile.clinic_id, data.date, data.time, data.professional_id
    )
    if warning is None:
        return AvailabilityCheckResponse(available=True)
    return AvailabilityCheckResponse(
        available=False,
        warning=ScheduleWarningResponse(code=warning.code, message=warning.message),
    )
