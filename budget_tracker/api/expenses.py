# budget_tracker/api/expenses.py
import csv
from datetime import date
from io import StringIO
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from budget_tracker.db import get_db
from budget_tracker.errors import NotFound
from budget_tracker.models.category_model import category_display
from budget_tracker.models.expense_model import Expense
from budget_tracker.models.user_model import User
from budget_tracker.schemas import ExpenseCreate, ExpenseOut, ExpenseUpdate
from budget_tracker.security import get_current_user
from budget_tracker.services.categories import categories_by_id, get_owned_category
from budget_tracker.services.importer import import_expenses_csv
from budget_tracker.services.scope import month_bounds, resolve_period
from budget_tracker.services.spending import evaluate_expense_alert
from budget_tracker.services.summary import monthly_category_summary

router = APIRouter()


def expense_payload(expense: Expense, category) -> ExpenseOut:
    return ExpenseOut(
        id=expense.id,
        title=expense.title,
        amount=expense.amount,
        date=expense.date,
        note=expense.note,
        category=category_display(category, expense.category_id),
        created_at=expense.created_at,
        updated_at=expense.updated_at,
    )


def _get_owned_expense(db: Session, user_id: int, expense_id: int) -> Expense:
    expense = db.query(Expense).filter(Expense.id == expense_id, Expense.user_id == user_id).first()
    if expense is None:
        raise NotFound("Expense not found")
    return expense


@router.get("")
def list_expenses(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=1, le=9999),
    category: Optional[int] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    List expenses, newest first. The month filter applies only when both
    month and year are given.
    """
    query = db.query(Expense).filter(Expense.user_id == user.id)
    if month and year:
        start, end = month_bounds(month, year)
        query = query.filter(Expense.date >= start, Expense.date <= end)
    if category is not None:
        query = query.filter(Expense.category_id == category)

    expenses = query.order_by(Expense.date.desc(), Expense.id.desc()).all()
    categories = categories_by_id(db, user.id, (e.category_id for e in expenses))
    total = sum(e.amount for e in expenses)
    return {
        "expenses": [expense_payload(e, categories.get(e.category_id)) for e in expenses],
        "total": total,
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create_expense(
    payload: ExpenseCreate,
    request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    category = get_owned_category(db, user.id, payload.category)
    expense = Expense(
        user_id=user.id,
        category_id=category.id,
        title=payload.title,
        amount=payload.amount,
        date=payload.date or date.today(),
        note=payload.note,
    )
    db.add(expense)
    db.commit()
    db.refresh(expense)

    # evaluated after the commit so the new expense is part of the sum
    budget_alert = evaluate_expense_alert(
        db,
        expense,
        category.name,
        request.app.state.settings.currency_symbol,
        database=request.app.state.database,
    )
    return {"expense": expense_payload(expense, category), "budgetAlert": budget_alert}


@router.get("/summary")
def expense_summary(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=1, le=9999),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    month, year = resolve_period(month, year)
    summary, grand_total = monthly_category_summary(db, user.id, month, year)
    return {"summary": summary, "grandTotal": grand_total, "month": month, "year": year}


@router.get("/summary/download")
def download_summary(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=1, le=9999),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Download the monthly category summary (category, total, count, share of
    the month) as CSV.
    """
    month, year = resolve_period(month, year)
    summary, grand_total = monthly_category_summary(db, user.id, month, year)

    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(["Category", "Total", "Count", "Percentage"])
    for row in summary:
        percent = round((row["total"] / grand_total) * 100, 2) if grand_total > 0 else 0
        writer.writerow([row["category"]["name"], row["total"], row["count"], f"{percent}%"])
    writer.writerow(["Total", grand_total, sum(r["count"] for r in summary), "100%" if summary else "0%"])

    output.seek(0)
    filename = f"expenses_{year}_{month:02d}.csv"
    return StreamingResponse(
        output,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.post("/upload-csv", status_code=status.HTTP_201_CREATED)
def upload_expenses_csv(
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Upload a CSV with columns: title (or description), amount, and optionally
    date, category and note. Category names are fuzzy-matched to the user's
    categories; anything unmatched lands in "Uncategorized".
    """
    expenses = import_expenses_csv(db, user.id, file.file)
    return {"message": f"{len(expenses)} expenses imported successfully.", "imported": len(expenses)}


@router.put("/{expense_id}")
def update_expense(
    expense_id: int,
    payload: ExpenseUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    expense = _get_owned_expense(db, user.id, expense_id)
    changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None or k == "note"}

    if "category" in changes:
        category = get_owned_category(db, user.id, changes.pop("category"))
        expense.category_id = category.id
    for field, value in changes.items():
        setattr(expense, field, value)

    db.commit()
    db.refresh(expense)
    category = categories_by_id(db, user.id, [expense.category_id]).get(expense.category_id)
    return {"expense": expense_payload(expense, category)}


@router.delete("/{expense_id}")
def delete_expense(expense_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    deleted = db.query(Expense).filter(Expense.id == expense_id, Expense.user_id == user.id).delete()
    db.commit()
    if not deleted:
        raise NotFound("Expense not found")
    return {"message": "Expense deleted successfully"}
