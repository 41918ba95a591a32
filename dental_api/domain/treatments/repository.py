"""Treatment repository - Database operations for the treatment catalog"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Treatment


class TreatmentRepository:
    """Repository for treatment database operations"""

    @staticmethod
    def list_treatments(db: Session, clinic_id: int, include_inactive: bool = False) -> list[Treatment]:
        query = db.query(Treatment).filter(Treatment.clinic_id == clinic_id)
        if not include_inactive:
            query = query.filter(Treatment.is_active.is_(True))
        return query.order_by(Treatment.name).all()

    @staticmethod
    def get_treatment_by_id(db: Session, treatment_id: int, clinic_id: int) -> Optional[Treatment]:
        return (
            db.query(Treatment)
            .filter(Treatment.id == treatment_id, Treatment.clinic_id == clinic_id)
            .first()
        )

    @staticmethod
    def create_treatment(db: Session, clinic_id: int, **treatment_data) -> Treatment:
        treatment = Treatment(clinic_id=clinic_id, **treatment_data)
        db.add(treatment)
        db.commit()
        db.refresh(treatment)
        return treatment

    @staticmethod
    def update_treatment(db: Session, treatment: Treatment, **updates) -> Treatment:
        for key, value in updates.items():
            if value is not None and hasattr(treatment, key):
                setattr(treatment, key, value)

        db.commit()
        db.refresh(treatment)
        return treatment
