"""Payment service - Registering payments against budgets"""

import logging
from datetime import date, datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import PAYMENT_METHODS, Budget, Patient, Payment, Profile
from ...services.notification_service import send_payment_receipt_notification
from ...shared.tenancy import get_clinic_record
from ..budgets.balance import to_money
from .repository import PaymentRepository
from .schemas import PaymentCreate

logger = logging.getLogger(__name__)


def payment_totals(payments: list[Payment], today: date) -> dict:
    """Month-to-date total and all-time totals per payment method"""
    month_total = 0.0
    by_method = {method: 0.0 for method in PAYMENT_METHODS}
    for payment in payments:
        paid_on = payment.payment_date or payment.created_at
        if paid_on and (paid_on.year, paid_on.month) == (today.year, today.month):
            month_total += payment.amount
        method = payment.payment_method or "other"
        by_method[method] = by_method.get(method, 0.0) + payment.amount

    return {
        "month_total": to_money(month_total),
        "by_method": {method: to_money(amount) for method, amount in by_method.items()},
    }


class PaymentService:
    """Service layer for payment business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PaymentRepository()

    def list_payments(
        self,
        profile: Profile,
        patient_id: Optional[int] = None,
        budget_id: Optional[int] = None,
        today: Optional[date] = None,
    ) -> dict:
        payments = self.repo.list_payments(self.db, profile.clinic_id, patient_id=patient_id, budget_id=budget_id)
        return {"payments": payments, **payment_totals(payments, today or date.today())}

    async def register_payment(self, data: PaymentCreate, profile: Profile) -> Payment:
        get_clinic_record(self.db, Patient, data.patient_id, profile.clinic_id, "Patient")

        if data.budget_id is None:
            raise HTTPException(status_code=400, detail="A budget is required to register a payment")
        budget = get_clinic_record(self.db, Budget, data.budget_id, profile.clinic_id, "Budget")
        if budget.patient_id != data.patient_id:
            raise HTTPException(status_code=400, detail="Budget does not belong to this patient")

        payment = self.repo.create_payment(
            self.db,
            profile.clinic_id,
            patient_id=data.patient_id,
            budget_id=data.budget_id,
            amount=data.amount,
            payment_method=data.payment_method,
            payment_date=datetime.now(),
            notes=data.notes,
        )
        logger.info(f"💰 Payment {payment.id} of {payment.amount:.2f} registered on budget {budget.id}")

        try:
            await send_payment_receipt_notification(self.db, payment)
        except Exception as e:
            logger.warning(f"⚠️ Receipt for payment {payment.id} not sent: {e}")

        return payment
