"""Budget service - Treatment quotes and their pending balances"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Budget, Patient, Profile, Treatment
from ...services.notification_service import send_budget_notification
from ...shared.tenancy import get_clinic_record
from .balance import BudgetBalance, budget_subtotal, line_total, paid_by_budget, reconcile, with_pending_balance
from .repository import BudgetRepository
from .schemas import BudgetCreate, BudgetItemCreate

logger = logging.getLogger(__name__)


class BudgetService:
    """Service layer for budget business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BudgetRepository()

    def list_budgets(
        self, profile: Profile, patient_id: Optional[int] = None, status: Optional[str] = None
    ) -> list[Budget]:
        return self.repo.list_budgets(self.db, profile.clinic_id, patient_id=patient_id, status=status)

    def get_budget(self, budget_id: int, profile: Profile) -> Budget:
        budget = self.repo.get_budget_by_id(self.db, budget_id, profile.clinic_id)
        if not budget:
            raise HTTPException(status_code=404, detail="Budget not found")
        return budget

    def _build_item(self, item: BudgetItemCreate, clinic_id: int) -> dict:
        """Item row; description and price fall back to the catalog treatment"""
        treatment = None
        if item.treatment_id is not None:
            treatment = get_clinic_record(self.db, Treatment, item.treatment_id, clinic_id, "Treatment")

        description = item.description or (treatment.name if treatment else None)
        if not description:
            raise HTTPException(status_code=400, detail="Each item needs a description or a treatment")

        unit_price = item.unit_price
        if unit_price is None:
            if treatment is None:
                raise HTTPException(status_code=400, detail="Each item needs a unit price or a treatment")
            unit_price = treatment.price

        return {
            "treatment_id": item.treatment_id,
            "description": description,
            "tooth_number": item.tooth_number,
            "quantity": item.quantity,
            "unit_price": unit_price,
            "total": line_total(item.quantity, unit_price),
        }

    def create_budget(self, data: BudgetCreate, profile: Profile) -> Budget:
        get_clinic_record(self.db, Patient, data.patient_id, profile.clinic_id, "Patient")

        items = [self._build_item(item, profile.clinic_id) for item in data.items]
        subtotal = budget_subtotal((item["quantity"], item["unit_price"]) for item in items)

        budget = self.repo.create_budget(
            self.db,
            profile.clinic_id,
            items=items,
            patient_id=data.patient_id,
            created_by=profile.id,
            status="draft",
            subtotal=subtotal,
            total=subtotal,
            discount_percent=data.discount_percent,
            tax_percent=data.tax_percent,
            notes=data.notes,
            valid_until=data.valid_until,
        )
        logger.info(f"📋 Budget {budget.id} created for patient {data.patient_id}: total {subtotal:.2f}")
        return budget

    def update_status(self, budget_id: int, status: str, profile: Profile) -> Budget:
        budget = self.get_budget(budget_id, profile)
        logger.info(f"🔄 Budget {budget_id} status {budget.status} -> {status}")
        return self.repo.update_status(self.db, budget, status)

    async def send_budget(self, budget_id: int, profile: Profile) -> dict:
        """Email / WhatsApp the quote to the patient and mark it sent"""
        budget = self.get_budget(budget_id, profile)
        result = await send_budget_notification(self.db, budget)

        if not (result["email_sent"] or result["whatsapp_sent"]):
            raise HTTPException(
                status_code=502,
                detail=result["email_error"] or result["whatsapp_error"] or "Patient has no contact details",
            )

        if budget.status == "draft":
            self.repo.update_status(self.db, budget, "sent")
        return {"budget_id": budget.id, "status": budget.status, **result}

    def balances_for(self, budgets: list[Budget]) -> list[BudgetBalance]:
        paid = paid_by_budget(self.repo.payment_amounts(self.db, [b.id for b in budgets]))
        return reconcile(budgets, paid)

    def budgets_with_balance(self, patient_id: int, profile: Profile) -> list[BudgetBalance]:
        """Payable budgets of a patient that still have money pending"""
        get_clinic_record(self.db, Patient, patient_id, profile.clinic_id, "Patient")
        budgets = self.repo.list_budgets(self.db, profile.clinic_id, patient_id=patient_id)
        return with_pending_balance(self.balances_for(budgets))

    def get_balance(self, budget_id: int, profile: Profile) -> BudgetBalance:
        budget = self.get_budget(budget_id, profile)
        return self.balances_for([budget])[0]
