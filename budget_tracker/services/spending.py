# budget_tracker/services/spending.py
"""
Budget vs. spending.

spent_for_scope() sums the expense ledger for one (user, category, month,
year) scope in the database. evaluate_spending() turns a limit and a spent
amount into the numbers the UI shows plus a status. Status and alerts are
always decided on the uncapped percentage, the displayed one stops at 100.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from budget_tracker.models.budget_model import Budget
from budget_tracker.models.expense_model import Expense
from budget_tracker.services.scope import Scope

logger = logging.getLogger(__name__)

WARNING_THRESHOLD = 80.0
EXCEEDED_THRESHOLD = 100.0

STATUS_SAFE = "safe"
STATUS_WARNING = "warning"
STATUS_EXCEEDED = "exceeded"


@dataclass(frozen=True)
class SpendingView:
    limit: float
    spent: float
    remaining: float
    percentage: float
    uncapped_percentage: float
    status: str

    def as_dict(self):
        return {
            "spent": self.spent,
            "remaining": self.remaining,
            "percentage": self.percentage,
            "status": self.status,
        }


def status_for(uncapped_percentage: float) -> str:
    if uncapped_percentage >= EXCEEDED_THRESHOLD:
        return STATUS_EXCEEDED
    if uncapped_percentage >= WARNING_THRESHOLD:
        return STATUS_WARNING
    return STATUS_SAFE


def evaluate_spending(limit: float, spent: float) -> SpendingView:
    uncapped = (spent / limit) * 100
    return SpendingView(
        limit=limit,
        spent=spent,
        remaining=limit - spent,
        percentage=min(round(uncapped, 1), 100.0),
        uncapped_percentage=uncapped,
        status=status_for(uncapped),
    )


def spent_for_scope(db: Session, scope: Scope) -> float:
    start, end = scope.bounds
    total = (
        db.query(func.sum(Expense.amount))
        .filter(
            Expense.user_id == scope.user_id,
            Expense.category_id == scope.category_id,
            Expense.date >= start,
            Expense.date <= end,
        )
        .scalar()
    )
    return float(total or 0.0)


def budget_for_scope(db: Session, scope: Scope) -> Optional[Budget]:
    return (
        db.query(Budget)
        .filter(
            Budget.user_id == scope.user_id,
            Budget.category_id == scope.category_id,
            Budget.month == scope.month,
            Budget.year == scope.year,
        )
        .first()
    )


def spending_for_budget(db: Session, budget: Budget) -> SpendingView:
    return evaluate_spending(budget.limit, spent_for_scope(db, Scope.for_budget(budget)))


def _money(value: float) -> str:
    return f"{value:.0f}" if float(value).is_integer() else f"{value:.2f}"


def build_alert(view: SpendingView, category_name: str, currency_symbol: str = "₹") -> Optional[dict]:
    if view.status == STATUS_EXCEEDED:
        message = (
            f"⚠️ You've exceeded your budget for {category_name}! "
            f"Spent {currency_symbol}{_money(view.spent)} of {currency_symbol}{_money(view.limit)}"
        )
    elif view.status == STATUS_WARNING:
        message = f"⚠️ You've used {view.uncapped_percentage:.0f}% of your budget for {category_name}"
    else:
        return None
    return {
        "type": view.status,
        "message": message,
        "spent": view.spent,
        "limit": view.limit,
        "percentage": round(view.uncapped_percentage),
    }


def evaluate_expense_alert(
    db: Session, expense: Expense, category_name: str, currency_symbol: str = "₹", database=None
) -> Optional[dict]:
    """
    Alert for the budget an already committed expense falls into.

    Advisory only: a failure here is logged and reported as "no alert" so it
    can never undo or block the expense that triggered it. A lost connection
    is still reported to the database lifecycle when one is given.
    """
    scope = Scope.for_date(expense.user_id, expense.category_id, expense.date)
    try:
        budget = budget_for_scope(db, scope)
        if budget is None:
            return None
        view = evaluate_spending(budget.limit, spent_for_scope(db, scope))
    except SQLAlchemyError as exc:
        logger.exception("Budget alert evaluation failed for expense %s", expense.id)
        db.rollback()
        if database is not None and isinstance(exc, OperationalError):
            database.mark_unavailable(exc)
        return None
    return build_alert(view, category_name, currency_symbol)
