# budget_tracker/api/health.py
from fastapi import APIRouter, Request
from sqlalchemy.exc import SQLAlchemyError

router = APIRouter()


@router.get("")
def health(request: Request):
    database = request.app.state.database
    try:
        database.ping()
    except SQLAlchemyError as exc:
        database.mark_unavailable(exc)
    state = database.status()
    return {"status": "ok" if state["connected"] else "degraded", "database": state}
