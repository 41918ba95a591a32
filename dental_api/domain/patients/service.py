"""Patient service - Business logic for patient records"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Patient, Profile
from .repository import PatientRepository
from .schemas import PatientCreate, PatientUpdate

logger = logging.getLogger(__name__)


class PatientService:
    """Service layer for patient business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PatientRepository()

    def search_patients(self, profile: Profile, search: Optional[str] = None) -> list[Patient]:
        return self.repo.search_patients(self.db, profile.clinic_id, search)

    def get_patient(self, patient_id: int, profile: Profile) -> Patient:
        patient = self.repo.get_patient_by_id(self.db, patient_id, profile.clinic_id)
        if not patient:
            raise HTTPException(status_code=404, detail="Patient not found")
        return patient

    def create_patient(self, data: PatientCreate, profile: Profile) -> Patient:
        logger.info(f"📥 Registering patient for clinic {profile.clinic_id}")
        return self.repo.create_patient(self.db, profile.clinic_id, **data.model_dump())

    def update_patient(self, patient_id: int, data: PatientUpdate, profile: Profile) -> Patient:
        patient = self.get_patient(patient_id, profile)
        return self.repo.update_patient(self.db, patient, **data.model_dump(exclude_unset=True))
