"""Clinic scoping helpers shared by the domain services"""

from fastapi import HTTPException
from sqlalchemy.orm import Session


def get_clinic_record(db: Session, model, record_id: int, clinic_id: int, label: str):
    """Fetch a row by id and make sure it belongs to the caller's clinic.

    Raises 404 when the row does not exist and 403 when it belongs to
    another clinic.
    """
    record = db.query(model).filter(model.id == record_id).first()
    if record is None:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    if record.clinic_id != clinic_id:
        raise HTTPException(status_code=403, detail=f"{label} does not belong to your clinic")
    return record
