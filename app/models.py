import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean, Column, String, Integer, Numeric, Date, DateTime, Enum, ForeignKey, Text, UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.database import Base
from app.enums import (
    ActivityCategory, ActivityParticipantStatus, ActivityStatus, ExpenseCategory, ParticipantStatus,
    SplitType, TripStatus,
)


def new_uuid():
    return str(uuid.uuid4())


def enum_column(enum_cls, **kwargs):
    """Store an enum by its value as a plain VARCHAR."""
    return Column(
        Enum(enum_cls, native_enum=False, length=20, values_callable=lambda e: [m.value for m in e]),
        **kwargs,
    )


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String, primary_key=True, default=new_uuid)
    ctk = Column(String, unique=True, nullable=False, index=True)
    full_name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    avatar_url = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Trip(Base):
    __tablename__ = "trips"

    id = Column(String, primary_key=True, default=new_uuid)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    destination = Column(String(255), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    max_participants = Column(Integer, nullable=False, default=10)
    current_participants = Column(Integer, nullable=False, default=1)
    organizer_id = Column(String, ForeignKey("profiles.id", ondelete="RESTRICT"), nullable=False)
    status = enum_column(TripStatus, nullable=False, default=TripStatus.ACTIVE)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    organizer = relationship("Profile")
    participants = relationship("TripParticipant", back_populates="trip", cascade="all, delete-orphan")
    expenses = relationship("Expense", back_populates="trip", cascade="all, delete-orphan")
    activities = relationship("Activity", back_populates="trip", cascade="all, delete-orphan")


class TripParticipant(Base):
    __tablename__ = "trip_participants"

    id = Column(String, primary_key=True, default=new_uuid)
    trip_id = Column(String, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    status = enum_column(ParticipantStatus, nullable=False, default=ParticipantStatus.PENDING)
    message = Column(Text, nullable=True)
    joined_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("trip_id", "user_id"),)

    trip = relationship("Trip", back_populates="participants")
    profile = relationship("Profile")


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(String, primary_key=True, default=new_uuid)
    trip_id = Column(String, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False)
    payer_id = Column(String, ForeignKey("profiles.id", ondelete="RESTRICT"), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(String(500), nullable=False)
    category = enum_column(ExpenseCategory, nullable=False, default=ExpenseCategory.OTHER)
    expense_date = Column(Date, nullable=False)
    split_type = enum_column(SplitType, nullable=False, default=SplitType.EQUAL)
    amount_per_person = Column(Numeric(12, 2), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    trip = relationship("Trip", back_populates="expenses")
    payer = relationship("Profile")
    splits = relationship("ExpenseSplit", back_populates="expense", cascade="all, delete-orphan")


class ExpenseSplit(Base):
    __tablename__ = "expense_splits"

    id = Column(String, primary_key=True, default=new_uuid)
    expense_id = Column(String, ForeignKey("expenses.id", ondelete="CASCADE"), nullable=False)
    participant_id = Column(String, ForeignKey("profiles.id", ondelete="RESTRICT"), nullable=False)
    amount_owed = Column(Numeric(12, 2), nullable=False)
    paid = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("expense_id", "participant_id"),)

    expense = relationship("Expense", back_populates="splits")


class Activity(Base):
    __tablename__ = "activities"

    id = Column(String, primary_key=True, default=new_uuid)
    trip_id = Column(String, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False)
    creator_id = Column(String, ForeignKey("profiles.id", ondelete="RESTRICT"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    category = enum_column(ActivityCategory, nullable=False, default=ActivityCategory.OTHER)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    start_time = Column(String(5), nullable=True)  # HH:MM
    end_time = Column(String(5), nullable=True)
    cost_per_person = Column(Numeric(12, 2), nullable=True)
    max_participants = Column(Integer, nullable=True)
    current_participants = Column(Integer, nullable=False, default=1)
    booking_url = Column(String(500), nullable=True)
    notes = Column(Text, nullable=True)
    status = enum_column(ActivityStatus, nullable=False, default=ActivityStatus.PLANNED)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    trip = relationship("Trip", back_populates="activities")
    participants = relationship("ActivityParticipant", back_populates="activity", cascade="all, delete-orphan")


class ActivityParticipant(Base):
    __tablename__ = "activity_participants"

    id = Column(String, primary_key=True, default=new_uuid)
    activity_id = Column(String, ForeignKey("activities.id", ondelete="CASCADE"), nullable=False)
    participant_id = Column(String, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    status = enum_column(ActivityParticipantStatus, nullable=False, default=ActivityParticipantStatus.CONFIRMED)
    joined_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("activity_id", "participant_id"),)

    activity = relationship("Activity", back_populates="participants")
