# budget_tracker/api/budgets.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from budget_tracker.db import get_db
from budget_tracker.errors import NotFound
from budget_tracker.models.budget_model import Budget
from budget_tracker.models.category_model import category_display
from budget_tracker.models.user_model import User
from budget_tracker.schemas import BudgetCreate, BudgetOut, BudgetWithSpending
from budget_tracker.security import get_current_user
from budget_tracker.services.budgets import upsert_budget
from budget_tracker.services.categories import categories_by_id, get_owned_category
from budget_tracker.services.scope import Scope, resolve_period
from budget_tracker.services.spending import spending_for_budget

router = APIRouter()


def budget_payload(budget: Budget, category) -> dict:
    return {
        "id": budget.id,
        "category": category_display(category, budget.category_id),
        "limit": budget.limit,
        "month": budget.month,
        "year": budget.year,
        "created_at": budget.created_at,
        "updated_at": budget.updated_at,
    }


@router.get("")
def list_budgets(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=1, le=9999),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Budgets of one month (current month by default), each with what has been
    spent against it so far. Spending is re-aggregated on every call.
    """
    month, year = resolve_period(month, year)
    budgets = (
        db.query(Budget)
        .filter(Budget.user_id == user.id, Budget.month == month, Budget.year == year)
        .order_by(Budget.id)
        .all()
    )
    categories = categories_by_id(db, user.id, (b.category_id for b in budgets))

    result = []
    for budget in budgets:
        view = spending_for_budget(db, budget)
        payload = budget_payload(budget, categories.get(budget.category_id))
        payload.update(view.as_dict())
        result.append(BudgetWithSpending(**payload))

    return {"budgets": result, "month": month, "year": year}


@router.post("", status_code=status.HTTP_201_CREATED)
def set_budget(payload: BudgetCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    category = get_owned_category(db, user.id, payload.category)
    month, year = resolve_period(payload.month, payload.year)
    budget = upsert_budget(db, Scope(user.id, category.id, month, year), payload.limit)
    return {"budget": BudgetOut(**budget_payload(budget, category))}


@router.delete("/{budget_id}")
def delete_budget(budget_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    deleted = db.query(Budget).filter(Budget.id == budget_id, Budget.user_id == user.id).delete()
    db.commit()
    if not deleted:
        raise NotFound("Budget not found")
    return {"message": "Budget deleted successfully"}
