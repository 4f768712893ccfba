# budget_tracker/services/importer.py
import logging
from datetime import date, datetime
from typing import List, Optional

import pandas as pd
from pydantic import ValidationError
from rapidfuzz import fuzz, process, utils
from sqlalchemy.orm import Session

from budget_tracker.errors import ValidationFailed
from budget_tracker.models.category_model import Category, PLACEHOLDER_NAME
from budget_tracker.models.expense_model import Expense
from budget_tracker.schemas import ExpenseCreate

logger = logging.getLogger(__name__)

DATE_FORMATS = ("%Y-%m-%d", "%d-%m-%Y", "%d/%m/%Y", "%Y/%m/%d")
MATCH_THRESHOLD = 80


def parse_date(raw) -> date:
    if raw is None or pd.isna(raw) or not str(raw).strip():
        return date.today()
    text = str(raw).strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValidationFailed(f"Invalid date '{text}'")


def _number(value):
    # numpy scalars -> plain python for pydantic
    return value.item() if hasattr(value, "item") else value


def _cell(row, df, *names) -> Optional[str]:
    for name in names:
        if name in df.columns and not pd.isna(row[name]):
            value = str(row[name]).strip()
            if value:
                return value
    return None


class CategoryMatcher:
    """Maps free-text category names onto the user's categories."""

    def __init__(self, db: Session, user_id: int):
        self.db = db
        self.user_id = user_id
        self.by_name = {
            c.name: c for c in db.query(Category).filter(Category.user_id == user_id).order_by(Category.id)
        }

    def match(self, name: Optional[str]) -> Optional[Category]:
        if not name or not self.by_name:
            return None
        if name in self.by_name:
            return self.by_name[name]
        best = process.extractOne(
            name, list(self.by_name.keys()), scorer=fuzz.partial_ratio, processor=utils.default_process
        )
        if best and best[1] >= MATCH_THRESHOLD:
            return self.by_name[best[0]]
        return None

    def fallback(self) -> Category:
        category = self.by_name.get(PLACEHOLDER_NAME)
        if category is None:
            category = Category(user_id=self.user_id, name=PLACEHOLDER_NAME)
            self.db.add(category)
            self.db.flush()
            self.by_name[PLACEHOLDER_NAME] = category
        return category


def import_expenses_csv(db: Session, user_id: int, fileobj) -> List[Expense]:
    """
    Read a CSV with columns title (or description), amount and optionally
    date, category and note, and store every row as an expense.

    The whole file is validated before anything is written; one bad row
    rejects the upload.
    """
    try:
        df = pd.read_csv(fileobj)
    except (ValueError, pd.errors.ParserError, UnicodeDecodeError) as e:
        raise ValidationFailed(f"Unable to read CSV: {e}")

    df.columns = [str(c).strip().lower() for c in df.columns]
    if "amount" not in df.columns or not ({"title", "description"} & set(df.columns)):
        raise ValidationFailed("CSV must have 'title' (or 'description') and 'amount' columns")
    if df.empty:
        raise ValidationFailed("CSV has no rows")

    matcher = CategoryMatcher(db, user_id)
    rows = []
    for index, row in df.iterrows():
        line = index + 2  # header is line 1
        title = _cell(row, df, "title", "description")
        try:
            entry = ExpenseCreate(
                title=title or "",
                amount=_number(row["amount"]),
                date=parse_date(row["date"]) if "date" in df.columns else date.today(),
                category=0,
                note=_cell(row, df, "note", "notes"),
            )
        except ValidationError as e:
            raise ValidationFailed(f"Invalid row {line}: {e.errors()[0]['msg']}")
        except ValidationFailed as e:
            raise ValidationFailed(f"Invalid row {line}: {e.message}")
        rows.append((entry, _cell(row, df, "category")))

    expenses = []
    for entry, category_name in rows:
        category = matcher.match(category_name) or matcher.fallback()
        expense = Expense(
            user_id=user_id,
            category_id=category.id,
            title=entry.title,
            amount=entry.amount,
            date=entry.date,
            note=entry.note,
        )
        db.add(expense)
        expenses.append(expense)

    db.commit()
    logger.info("Imported %d expenses from CSV for user %s", len(expenses), user_id)
    return expenses
