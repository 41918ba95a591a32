"""Patient repository - Database operations for patients"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Patient


class PatientRepository:
    """Repository for patient database operations"""

    @staticmethod
    def search_patients(
        db: Session, clinic_id: int, search: Optional[str] = None, limit: int = 50
    ) -> list[Patient]:
        """Patients of a clinic, optionally filtered by first or last name"""
        query = db.query(Patient).filter(Patient.clinic_id == clinic_id)

        if search:
            search_term = f"%{search.lower()}%"
            query = query.filter(
                (Patient.first_name.ilike(search_term)) | (Patient.last_name.ilike(search_term))
            )

        return query.order_by(Patient.first_name, Patient.last_name).limit(limit).all()

    @staticmethod
    def get_patient_by_id(db: Session, patient_id: int, clinic_id: int) -> Optional[Patient]:
        return (
            db.query(Patient)
            .filter(Patient.id == patient_id, Patient.clinic_id == clinic_id)
            .first()
        )

    @staticmethod
    def create_patient(db: Session, clinic_id: int, **patient_data) -> Patient:
        patient = Patient(clinic_id=clinic_id, **patient_data)
        db.add(patient)
        db.commit()
        db.refresh(patient)
        return patient

    @staticmethod
    def update_patient(db: Session, patient: Patient, **updates) -> Patient:
        for key, value in updates.items():
            if value is not None and hasattr(patient, key):
                setattr(patient, key, value)

        db.commit()
        db.refresh(patient)
        return patient
