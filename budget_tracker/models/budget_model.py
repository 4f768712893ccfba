# budget_tracker/models/budget_model.py
from sqlalchemy import Column, Integer, Float, DateTime, ForeignKey, CheckConstraint, UniqueConstraint
from budget_tracker.db import Base, utcnow


class Budget(Base):
    __tablename__ = "budgets"
    __table_args__ = (
        # one budget per category per month per user
        UniqueConstraint("user_id", "category_id", "month", "year", name="uq_budgets_scope"),
        CheckConstraint("\"limit\" > 0", name="ck_budgets_limit_positive"),
        CheckConstraint("month BETWEEN 1 AND 12", name="ck_budgets_month_range"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Integer, nullable=False)
    limit = Column(Float, nullable=False)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
