# budget_tracker/main.py
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from budget_tracker.api import auth, budgets, categories, expenses, health
from budget_tracker.config import Settings, get_settings
from budget_tracker.db import Database
from budget_tracker.errors import AppError, StoreUnavailable

logger = logging.getLogger(__name__)


def configure_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    database: Database = app.state.database
    database.connect()
    yield
    database.dispose()


def _validation_message(exc: RequestValidationError) -> str:
    messages = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        messages.append(f"{field}: {err['msg']}" if field else err["msg"])
    return ", ".join(messages) or "Invalid request"


def register_error_handlers(app: FastAPI):
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        logger.info("%s error on %s %s: %s", exc.kind, request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})

    @app.exception_handler(OperationalError)
    async def store_error_handler(request: Request, exc: OperationalError):
        logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
        request.app.state.database.mark_unavailable(exc)
        return JSONResponse(status_code=StoreUnavailable.status_code, content=StoreUnavailable().to_dict())

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("Database error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Unexpected error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(settings: Settings = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Budget Tracker", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = Database(settings.database_url)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(auth.router, prefix="/auth", tags=["auth"])
    app.include_router(categories.router, prefix="/categories", tags=["categories"])
    app.include_router(expenses.router, prefix="/expenses", tags=["expenses"])
    app.include_router(budgets.router, prefix="/budgets", tags=["budgets"])
    app.include_router(health.router, prefix="/health", tags=["health"])

    @app.get("/")
    def root():
        return {"message": "Budget Tracker API is running 🚀"}

    @app.exception_handler(404)
    async def not_found_handler(request: Request, exc):
        return JSONResponse(status_code=404, content={"error": "Route not found"})

    return app


app = create_app()


def run():
    import uvicorn

    uvicorn.run("budget_tracker.main:app", host="0.0.0.0", port=int(os.getenv("PORT", "5000")))


if __name__ == "__main__":
    run()
