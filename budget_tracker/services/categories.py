# budget_tracker/services/categories.py
from typing import Dict, Iterable

from sqlalchemy.orm import Session

from budget_tracker.errors import NotFound
from budget_tracker.models.category_model import Category


def get_owned_category(db: Session, user_id: int, category_id: int) -> Category:
    category = db.query(Category).filter(Category.id == category_id, Category.user_id == user_id).first()
    if category is None:
        raise NotFound("Category not found")
    return category


def categories_by_id(db: Session, user_id: int, ids: Iterable[int]) -> Dict[int, Category]:
    ids = {i for i in ids if i is not None}
    if not ids:
        return {}
    rows = db.query(Category).filter(Category.user_id == user_id, Category.id.in_(ids)).all()
    return {c.id: c for c in rows}
