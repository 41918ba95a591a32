"""Budget repository - Database operations for budgets and their items"""

from typing import Optional

from sqlalchemy.orm import Session, selectinload

from ...models import Budget, BudgetItem, Payment


class BudgetRepository:
    """Repository for budget database operations"""

    @staticmethod
    def list_budgets(
        db: Session,
        clinic_id: int,
        patient_id: Optional[int] = None,
        status: Optional[str] = None,
    ) -> list[Budget]:
        query = (
            db.query(Budget)
            .options(selectinload(Budget.items))
            .filter(Budget.clinic_id == clinic_id)
        )
        if patient_id:
            query = query.filter(Budget.patient_id == patient_id)
        if status:
            query = query.filter(Budget.status == status)
        return query.order_by(Budget.created_at.desc(), Budget.id.desc()).all()

    @staticmethod
    def get_budget_by_id(db: Session, budget_id: int, clinic_id: int) -> Optional[Budget]:
        return (
            db.query(Budget)
            .options(selectinload(Budget.items))
            .filter(Budget.id == budget_id, Budget.clinic_id == clinic_id)
            .first()
        )

    @staticmethod
    def create_budget(db: Session, clinic_id: int, items: list[dict], **budget_data) -> Budget:
        budget = Budget(clinic_id=clinic_id, **budget_data)
        budget.items = [BudgetItem(**item) for item in items]
        db.add(budget)
        db.commit()
        db.refresh(budget)
        return budget

    @staticmethod
    def update_status(db: Session, budget: Budget, status: str) -> Budget:
        budget.status = status
        db.commit()
        db.refresh(budget)
        return budget

    @staticmethod
    def payment_amounts(db: Session, budget_ids: list[int]) -> list[tuple[Optional[int], float]]:
        """(budget_id, amount) for every payment made against the given budgets"""
        if not budget_ids:
            return []
        rows = db.query(Payment.budget_id, Payment.amount).filter(Payment.budget_id.in_(budget_ids)).all()
        return [(row.budget_id, row.amount) for row in rows]
