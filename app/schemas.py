from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from app.enums import ActivityCategory, ActivityStatus, ExpenseCategory

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


# --- Profile ---

class UpdateProfileIn(BaseModel):
    full_name: str | None = None
    email: str | None = None
    avatar_url: str | None = None


# --- Trip ---

class CreateTripIn(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    destination: str = Field(min_length=1, max_length=255)
    start_date: date
    end_date: date
    max_participants: int = Field(default=10, ge=1)
    organizer_name: str | None = None
    email: str | None = None


class UpdateTripIn(BaseModel):
    title: str | None = None
    description: str | None = None
    destination: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    max_participants: int | None = Field(default=None, ge=1)


# --- Participants ---

class JoinTripIn(BaseModel):
    message: str | None = None
    name: str | None = None


# --- Expenses ---

class ExpenseIn(BaseModel):
    amount: Decimal
    description: str = Field(min_length=1, max_length=500)
    category: ExpenseCategory = ExpenseCategory.OTHER
    expense_date: date | None = None
    split_between: list[str] = []  # participant ids; empty = everyone approved


# --- Activities ---

class ActivityIn(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    location: str | None = None
    category: ActivityCategory = ActivityCategory.OTHER
    start_date: date
    end_date: date | None = None
    start_time: str | None = Field(default=None, pattern=TIME_PATTERN)
    end_time: str | None = Field(default=None, pattern=TIME_PATTERN)
    cost_per_person: float | None = Field(default=None, ge=0)
    max_participants: int | None = Field(default=None, ge=1)
    booking_url: str | None = None
    notes: str | None = None


class UpdateActivityIn(BaseModel):
    title: str | None = None
    description: str | None = None
    location: str | None = None
    category: ActivityCategory | None = None
    start_date: date | None = None
    end_date: date | None = None
    start_time: str | None = Field(default=None, pattern=TIME_PATTERN)
    end_time: str | None = Field(default=None, pattern=TIME_PATTERN)
    cost_per_person: float | None = Field(default=None, ge=0)
    max_participants: int | None = Field(default=None, ge=1)
    booking_url: str | None = None
    notes: str | None = None
    status: ActivityStatus | None = None
