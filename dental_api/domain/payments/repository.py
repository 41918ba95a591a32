"""Payment repository - Database operations for payments"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Payment


class PaymentRepository:
    """Repository for payment database operations"""

    @staticmethod
    def list_payments(
        db: Session,
        clinic_id: int,
        patient_id: Optional[int] = None,
        budget_id: Optional[int] = None,
    ) -> list[Payment]:
        query = db.query(Payment).filter(Payment.clinic_id == clinic_id)
        if patient_id:
            query = query.filter(Payment.patient_id == patient_id)
        if budget_id:
            query = query.filter(Payment.budget_id == budget_id)
        return query.order_by(Payment.payment_date.desc(), Payment.id.desc()).all()

    @staticmethod
    def create_payment(db: Session, clinic_id: int, **payment_data) -> Payment:
        payment = Payment(clinic_id=clinic_id, **payment_data)
        db.add(payment)
        db.commit()
        db.refresh(payment)
        return payment
