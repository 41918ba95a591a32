"""
Budget balance reconciliation.

Pure functions over rows that were already fetched: line totals, budget
subtotals and how much of each budget is still unpaid. Discount and tax
percentages are stored on a budget but do not change its total.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

# Budgets a payment can still be registered against
PAYABLE_STATUSES = ("approved", "sent", "completed", "draft")


def to_money(value: float) -> float:
    return round(float(value or 0), 2)


def line_total(quantity: Optional[int], unit_price: float) -> float:
    return to_money((quantity if quantity is not None else 1) * unit_price)


def budget_subtotal(lines: Iterable[tuple[Optional[int], float]]) -> float:
    """Sum of quantity * unit_price over (quantity, unit_price) pairs"""
    return to_money(sum(line_total(quantity, unit_price) for quantity, unit_price in lines))


def paid_by_budget(payments: Iterable[tuple[Optional[int], float]]) -> dict[int, float]:
    """Total paid per budget id from (budget_id, amount) pairs; unlinked payments are ignored"""
    paid: dict[int, float] = defaultdict(float)
    for budget_id, amount in payments:
        if budget_id is not None:
            paid[budget_id] += amount or 0
    return {budget_id: to_money(amount) for budget_id, amount in paid.items()}


@dataclass
class BudgetBalance:
    budget_id: int
    status: str
    total: float
    paid: float
    pending: float
    created_at: Optional[datetime] = None


def reconcile(budgets, paid: dict[int, float]) -> list[BudgetBalance]:
    """Balance of each budget; `budgets` are objects with id, status, total and created_at"""
    balances = []
    for budget in budgets:
        total = to_money(budget.total)
        budget_paid = paid.get(budget.id, 0.0)
        balances.append(
            BudgetBalance(
                budget_id=budget.id,
                status=budget.status,
                total=total,
                paid=budget_paid,
                pending=to_money(total - budget_paid),
                created_at=budget.created_at,
            )
        )
    return balances


def with_pending_balance(balances: Iterable[BudgetBalance]) -> list[BudgetBalance]:
    """Payable budgets that are not fully paid, newest first"""
    pending = [b for b in balances if b.status in PAYABLE_STATUSES and b.pending > 0]
    return sorted(pending, key=lambda b: (b.created_at or datetime.min, b.budget_id), reverse=True)
