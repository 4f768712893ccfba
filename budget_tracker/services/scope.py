# budget_tracker/services/scope.py
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Tuple


def month_bounds(month: int, year: int) -> Tuple[date, date]:
    """
    First and last calendar day of a month, both inclusive.

    The last day is the day before the first of the following month, which
    takes care of 28/29/30/31 day months without a lookup table.
    """
    start = date(year, month, 1)
    if month == 12:
        next_start = date(year + 1, 1, 1)
    else:
        next_start = date(year, month + 1, 1)
    return start, next_start - timedelta(days=1)


def resolve_period(month: Optional[int] = None, year: Optional[int] = None, today: Optional[date] = None):
    """Fill in a missing month/year from today's date."""
    today = today or date.today()
    return (month or today.month), (year or today.year)


@dataclass(frozen=True)
class Scope:
    user_id: int
    category_id: Optional[int]
    month: int
    year: int

    @property
    def bounds(self) -> Tuple[date, date]:
        return month_bounds(self.month, self.year)

    @classmethod
    def for_date(cls, user_id, category_id, when: date) -> "Scope":
        return cls(user_id=user_id, category_id=category_id, month=when.month, year=when.year)

    @classmethod
    def for_budget(cls, budget) -> "Scope":
        return cls(user_id=budget.user_id, category_id=budget.category_id, month=budget.month, year=budget.year)
