# budget_tracker/api/auth.py
import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from budget_tracker.db import get_db
from budget_tracker.errors import AlreadyExists, Unauthorized
from budget_tracker.models.user_model import User
from budget_tracker.schemas import TokenOut, UserLogin, UserOut, UserRegister
from budget_tracker.security import (
    get_current_token,
    get_current_user,
    hash_password,
    issue_token,
    revoke_token,
    verify_password,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=TokenOut, status_code=status.HTTP_201_CREATED)
def register(payload: UserRegister, request: Request, db: Session = Depends(get_db)):
    if db.query(User).filter(User.email == payload.email).first():
        raise AlreadyExists("User already exists")

    user = User(name=payload.name, email=payload.email, password_hash=hash_password(payload.password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # same email registered concurrently
        db.rollback()
        raise AlreadyExists("User already exists")
    db.refresh(user)
    logger.info("Registered user %s", user.id)

    token = issue_token(db, user, request.app.state.settings.token_ttl_days)
    return {"token": token, "user": UserOut.model_validate(user)}


@router.post("/login", response_model=TokenOut)
def login(payload: UserLogin, request: Request, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == payload.email).first()
    if not user or not verify_password(payload.password, user.password_hash):
        raise Unauthorized("Invalid credentials")
    token = issue_token(db, user, request.app.state.settings.token_ttl_days)
    return {"token": token, "user": UserOut.model_validate(user)}


@router.get("/me")
def me(user: User = Depends(get_current_user)):
    return {"user": UserOut.model_validate(user)}


@router.post("/logout")
def logout(
    user: User = Depends(get_current_user),
    token: str = Depends(get_current_token),
    db: Session = Depends(get_db),
):
    revoke_token(db, token)
    return {"message": "Logged out"}
