# budget_tracker/db.py
import logging
import os
import threading
from datetime import datetime, timezone

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from budget_tracker.errors import StoreUnavailable

logger = logging.getLogger(__name__)

Base = declarative_base()


def utcnow():
    # naive UTC, SQLite drops tzinfo on the way back anyway
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Database:
    """
    Owns the engine and session factory for one process.

    connect() is called by the app lifespan on start and dispose() on
    shutdown. Whether the store is reachable is kept here and read through
    status(); requests never look at module globals.
    """

    def __init__(self, url: str):
        self.url = url
        self.engine = None
        self.SessionLocal = None
        self.connected = False
        self.last_error = None
        self._lock = threading.Lock()

    @property
    def dialect(self):
        return make_url(self.url).get_backend_name()

    def _create_engine(self):
        kwargs = {}
        if self.dialect == "sqlite":
            kwargs["connect_args"] = {"check_same_thread": False}
            database = make_url(self.url).database
            if not database or database == ":memory:":
                # one shared connection, otherwise every session sees an empty db
                kwargs["poolclass"] = StaticPool
            else:
                folder = os.path.dirname(database)
                if folder:
                    os.makedirs(folder, exist_ok=True)
        else:
            kwargs["pool_pre_ping"] = True
        return create_engine(self.url, **kwargs)

    def connect(self) -> bool:
        # requests that find the store down may all retry at once
        with self._lock:
            if self.engine is None:
                self.engine = self._create_engine()
                self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
            try:
                Base.metadata.create_all(bind=self.engine)
                self.ping()
            except SQLAlchemyError as exc:
                self.mark_unavailable(exc)
                return False
        logger.info("Database connected (%s)", self.dialect)
        return True

    def ping(self) -> bool:
        if self.engine is None:
            return False
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        self.connected = True
        self.last_error = None
        return True

    def mark_unavailable(self, exc):
        if self.connected:
            logger.warning("Database disconnected: %s", exc)
        else:
            logger.error("Database connection error: %s", exc)
        self.connected = False
        self.last_error = str(exc)

    def status(self) -> dict:
        return {
            "connected": self.connected,
            "dialect": self.dialect,
            "last_error": self.last_error,
        }

    def session(self):
        if not self.connected and not self.connect():
            raise StoreUnavailable()
        return self.SessionLocal()

    def dispose(self):
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Database connection closed")
        self.connected = False


def get_db(request: Request):
    database: Database = request.app.state.database
    db = database.session()
    try:
        yield db
    except OperationalError as exc:
        db.rollback()
        database.mark_unavailable(exc)
        raise
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


# ✅ Import models *AFTER* Base is defined so create_all sees every table
import budget_tracker.models.user_model  # noqa: E402,F401
import budget_tracker.models.category_model  # noqa: E402,F401
import budget_tracker.models.expense_model  # noqa: E402,F401
import budget_tracker.models.budget_model  # noqa: E402,F401
