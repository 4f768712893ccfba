# budget_tracker/security.py
import hashlib
import secrets
from datetime import timedelta

import bcrypt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from budget_tracker.db import get_db, utcnow
from budget_tracker.errors import Unauthorized
from budget_tracker.models.user_model import AuthToken, User

bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))


def _token_digest(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def issue_token(db: Session, user: User, ttl_days: int) -> str:
    """Create a bearer token for the user. Only its SHA-256 digest is stored."""
    token = secrets.token_urlsafe(32)
    now = utcnow()
    db.add(AuthToken(
        user_id=user.id,
        token_hash=_token_digest(token),
        created_at=now,
        expires_at=now + timedelta(days=ttl_days),
    ))
    db.commit()
    return token


def revoke_token(db: Session, token: str) -> None:
    db.query(AuthToken).filter(AuthToken.token_hash == _token_digest(token)).delete()
    db.commit()


def _presented_token(credentials):
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise Unauthorized("No token provided")
    token = credentials.credentials.strip()
    if not token:
        raise Unauthorized("No token provided")
    return token


def get_current_token(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> str:
    return _presented_token(credentials)


def get_current_user(
    token: str = Depends(get_current_token),
    db: Session = Depends(get_db),
) -> User:
    record = db.query(AuthToken).filter(AuthToken.token_hash == _token_digest(token)).first()
    if record is None:
        raise Unauthorized("Invalid token")
    if record.expires_at <= utcnow():
        raise Unauthorized("Token expired")
    user = db.get(User, record.user_id)
    if user is None:
        raise Unauthorized("Invalid token")
    return user
