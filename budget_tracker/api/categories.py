# budget_tracker/api/categories.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from budget_tracker.db import get_db
from budget_tracker.models.category_model import Category, DEFAULT_COLOR, DEFAULT_ICON
from budget_tracker.models.user_model import User
from budget_tracker.schemas import CategoryCreate, CategoryOut, CategoryUpdate
from budget_tracker.security import get_current_user
from budget_tracker.services.categories import get_owned_category

router = APIRouter()


@router.get("")
def list_categories(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    categories = db.query(Category).filter(Category.user_id == user.id).order_by(Category.name, Category.id).all()
    return {"categories": [CategoryOut.model_validate(c) for c in categories]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_category(payload: CategoryCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    category = Category(
        user_id=user.id,
        name=payload.name,
        icon=payload.icon or DEFAULT_ICON,
        color=payload.color or DEFAULT_COLOR,
    )
    db.add(category)
    db.commit()
    db.refresh(category)
    return {"category": CategoryOut.model_validate(category)}


@router.put("/{category_id}")
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    category = get_owned_category(db, user.id, category_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(category, field, value)
    db.commit()
    db.refresh(category)
    return {"category": CategoryOut.model_validate(category)}


@router.delete("/{category_id}")
def delete_category(category_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Delete a category. Expenses and budgets that reference it are left alone
    and show up under a placeholder category afterwards.
    """
    category = get_owned_category(db, user.id, category_id)
    db.delete(category)
    db.commit()
    return {"message": "Category deleted successfully"}
