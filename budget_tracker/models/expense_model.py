# budget_tracker/models/expense_model.py
from sqlalchemy import Column, Integer, String, Float, Date, DateTime, Text, ForeignKey, CheckConstraint, Index
from budget_tracker.db import Base, utcnow


class Expense(Base):
    __tablename__ = "expenses"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_expenses_amount_non_negative"),
        Index("ix_expenses_scope", "user_id", "category_id", "date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # no FK: deleting a category leaves historical expenses pointing at it
    category_id = Column(Integer, nullable=False)
    title = Column(String(200), nullable=False)
    amount = Column(Float, nullable=False)
    date = Column(Date, nullable=False)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
