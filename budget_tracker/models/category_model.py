# budget_tracker/models/category_model.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from budget_tracker.db import Base, utcnow

DEFAULT_ICON = "📁"
DEFAULT_COLOR = "#6c757d"
PLACEHOLDER_NAME = "Uncategorized"


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    icon = Column(String(32), nullable=False, default=DEFAULT_ICON)
    color = Column(String(32), nullable=False, default=DEFAULT_COLOR)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)


def category_display(category, category_id=None):
    """
    Display attributes for a category reference.

    Categories can be deleted while expenses and budgets still point at them,
    so a missing row renders as a placeholder instead of failing the read.
    """
    if category is None:
        return {
            "id": category_id,
            "name": PLACEHOLDER_NAME,
            "icon": DEFAULT_ICON,
            "color": DEFAULT_COLOR,
        }
    return {
        "id": category.id,
        "name": category.name,
        "icon": category.icon,
        "color": category.color,
    }
