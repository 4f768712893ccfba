# budget_tracker/schemas.py
from datetime import date as Date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


def coerce_date(value):
    # the frontend sends full ISO timestamps, only the calendar day matters
    if isinstance(value, str) and "T" in value:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    if isinstance(value, datetime):
        return value.date()
    return value


def strip_text(value):
    return value.strip() if isinstance(value, str) else value


# ---------------------- Auth ----------------------
class UserRegister(BaseModel):
    name: str = Field(min_length=2, max_length=120)
    email: EmailStr
    password: str = Field(min_length=6)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return strip_text(v)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class UserLogin(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class UserOut(BaseModel):
    id: int
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class TokenOut(BaseModel):
    token: str
    user: UserOut


# ---------------------- Categories ----------------------
class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    icon: Optional[str] = Field(default=None, max_length=32)
    color: Optional[str] = Field(default=None, max_length=32)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return strip_text(v)


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    icon: Optional[str] = Field(default=None, max_length=32)
    color: Optional[str] = Field(default=None, max_length=32)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return strip_text(v)


class CategoryOut(BaseModel):
    id: Optional[int] = None
    name: str
    icon: str
    color: str

    model_config = ConfigDict(from_attributes=True)


# ---------------------- Expenses ----------------------
class ExpenseCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    amount: float = Field(gt=0)
    date: Optional[Date] = None
    category: int
    note: Optional[str] = None

    @field_validator("title", "note", mode="before")
    @classmethod
    def strip_text_fields(cls, v):
        return strip_text(v)

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v):
        return coerce_date(v)


class ExpenseUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    amount: Optional[float] = Field(default=None, gt=0)
    date: Optional[Date] = None
    category: Optional[int] = None
    note: Optional[str] = None

    @field_validator("title", "note", mode="before")
    @classmethod
    def strip_text_fields(cls, v):
        return strip_text(v)

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v):
        return coerce_date(v)


class ExpenseOut(BaseModel):
    id: int
    title: str
    amount: float
    date: Date
    note: Optional[str] = None
    category: CategoryOut
    created_at: datetime
    updated_at: datetime


# ---------------------- Budgets ----------------------
class BudgetCreate(BaseModel):
    category: int
    limit: float = Field(gt=0)
    month: Optional[int] = Field(default=None, ge=1, le=12)
    year: Optional[int] = Field(default=None, ge=1, le=9999)


class BudgetOut(BaseModel):
    id: int
    category: CategoryOut
    limit: float
    month: int
    year: int
    created_at: datetime
    updated_at: datetime


class BudgetWithSpending(BudgetOut):
    spent: float
    remaining: float
    percentage: float
    status: str
