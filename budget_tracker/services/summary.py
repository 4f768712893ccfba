# budget_tracker/services/summary.py
from sqlalchemy import func
from sqlalchemy.orm import Session

from budget_tracker.models.category_model import Category, category_display
from budget_tracker.models.expense_model import Expense
from budget_tracker.services.scope import month_bounds


def monthly_category_summary(db: Session, user_id: int, month: int, year: int):
    """
    Expenses of one month grouped by category, biggest total first.

    Returns (rows, grand_total) where each row is
    {"category": {...}, "total": float, "count": int}. Ties keep ascending
    category id order.
    """
    start, end = month_bounds(month, year)
    grouped = (
        db.query(
            Expense.category_id,
            func.sum(Expense.amount).label("total"),
            func.count(Expense.id).label("count"),
        )
        .filter(Expense.user_id == user_id, Expense.date >= start, Expense.date <= end)
        .group_by(Expense.category_id)
        .order_by(Expense.category_id)
        .all()
    )

    category_ids = [row.category_id for row in grouped]
    categories = {}
    if category_ids:
        categories = {
            c.id: c
            for c in db.query(Category).filter(Category.user_id == user_id, Category.id.in_(category_ids))
        }

    summary = [
        {
            "category": category_display(categories.get(row.category_id), row.category_id),
            "total": float(row.total or 0),
            "count": int(row.count),
        }
        for row in grouped
    ]
    # sorted() is stable, so equal totals stay in category id order
    summary = sorted(summary, key=lambda s: s["total"], reverse=True)
    grand_total = sum(s["total"] for s in summary)
    return summary, grand_total
