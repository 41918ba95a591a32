"""Treatment service - Clinic treatment catalog"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Profile, Treatment
from .repository import TreatmentRepository
from .schemas import TreatmentCreate, TreatmentUpdate

logger = logging.getLogger(__name__)


class TreatmentService:
    """Service layer for treatment catalog logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = TreatmentRepository()

    def list_treatments(self, profile: Profile, include_inactive: bool = False) -> list[Treatment]:
        return self.repo.list_treatments(self.db, profile.clinic_id, include_inactive)

    def get_treatment(self, treatment_id: int, profile: Profile) -> Treatment:
        treatment = self.repo.get_treatment_by_id(self.db, treatment_id, profile.clinic_id)
        if not treatment:
            raise HTTPException(status_code=404, detail="Treatment not found")
        return treatment

    def create_treatment(self, data: TreatmentCreate, profile: Profile) -> Treatment:
        return self.repo.create_treatment(self.db, profile.clinic_id, **data.model_dump())

    def update_treatment(self, treatment_id: int, data: TreatmentUpdate, profile: Profile) -> Treatment:
        treatment = self.get_treatment(treatment_id, profile)
        return self.repo.update_treatment(self.db, treatment, **data.model_dump(exclude_unset=True))

    def deactivate_treatment(self, treatment_id: int, profile: Profile) -> dict:
        """Hide a treatment from the catalog; existing budgets keep referencing it"""
        treatment = self.get_treatment(treatment_id, profile)
        treatment.is_active = False
        self.db.commit()
        logger.info(f"🗑️ Treatment {treatment_id} deactivated for clinic {profile.clinic_id}")
        return {"message": "Treatment deactivated"}
