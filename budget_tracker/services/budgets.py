# budget_tracker/services/budgets.py
import logging

from sqlalchemy import insert
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from budget_tracker.db import utcnow
from budget_tracker.models.budget_model import Budget
from budget_tracker.services.scope import Scope

logger = logging.getLogger(__name__)

SCOPE_COLUMNS = ["user_id", "category_id", "month", "year"]

_NATIVE_UPSERT = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def upsert_budget(db: Session, scope: Scope, limit: float) -> Budget:
    """
    Create the budget for a scope, or replace its limit if one exists.

    The unique constraint on (user_id, category_id, month, year) is what keeps
    two concurrent calls from both inserting; SQLite and PostgreSQL do it in a
    single INSERT ... ON CONFLICT DO UPDATE statement.
    """
    now = utcnow()
    values = {
        "user_id": scope.user_id,
        "category_id": scope.category_id,
        "month": scope.month,
        "year": scope.year,
        "limit": limit,
        "created_at": now,
        "updated_at": now,
    }
    dialect = db.get_bind().dialect.name
    native_insert = _NATIVE_UPSERT.get(dialect)

    if native_insert is not None:
        stmt = native_insert(Budget).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=SCOPE_COLUMNS,
            set_={"limit": stmt.excluded["limit"], "updated_at": now},
        )
        db.execute(stmt)
        db.commit()
    else:
        try:
            db.execute(insert(Budget).values(**values))
            db.commit()
        except IntegrityError:
            # lost the race (or it already existed): the row is there now
            db.rollback()
            (
                db.query(Budget)
                .filter_by(user_id=scope.user_id, category_id=scope.category_id, month=scope.month, year=scope.year)
                .update({Budget.limit: limit, Budget.updated_at: now}, synchronize_session=False)
            )
            db.commit()

    budget = (
        db.query(Budget)
        .filter_by(user_id=scope.user_id, category_id=scope.category_id, month=scope.month, year=scope.year)
        .populate_existing()
        .one()
    )
    logger.info(
        "Budget %s set for user %s category %s %02d/%d: %s",
        budget.id, scope.user_id, scope.category_id, scope.month, scope.year, limit,
    )
    return budget
