"""Persisted expense operations.

The split arithmetic lives in ``app.balances``; this module writes the
result and enforces who may do what.
"""
import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.balances import build_equal_split_expense
from app.deps import approved_roster
from app.errors import CompensationError, NotFound, PermissionDenied
from app.models import Expense, ExpenseSplit, Profile, Trip
from app.schemas import ExpenseIn

logger = logging.getLogger("lfg")


def create_equal_split_expense(db: Session, trip: Trip, payer: Profile | None, data: ExpenseIn) -> Expense:
    """Create an expense and its equal splits in a single transaction.

    Either the expense and all of its splits are stored, or nothing is.
    """
    roster = approved_roster(db, trip.id)
    draft, split_drafts = build_equal_split_expense(
        payer_id=payer.id if payer else "",
        amount=data.amount,
        description=data.description,
        category=data.category,
        roster=roster,
        participants=data.split_between,
        trip_id=trip.id,
        expense_date=data.expense_date,
    )

    expense = Expense(
        trip_id=trip.id,
        payer_id=draft.payer_id,
        amount=draft.amount,
        description=draft.description,
        category=draft.category,
        expense_date=draft.expense_date,
        split_type=draft.split_type,
        amount_per_person=draft.amount_per_person,
    )
    expense.splits = [
        ExpenseSplit(participant_id=s.participant_id, amount_owed=s.amount_owed, paid=s.paid)
        for s in split_drafts
    ]
    db.add(expense)
    trip.updated_at = datetime.utcnow()

    try:
        db.commit()
    except SQLAlchemyError:
        logger.error(
            "Expense write failed",
            exc_info=True,
            extra={"extra_data": {"trip_id": trip.id, "payer_id": draft.payer_id}},
        )
        _undo_expense_write(db, trip.id)
        raise

    db.refresh(expense)
    logger.info(
        "Expense created",
        extra={"extra_data": {
            "trip_id": trip.id,
            "expense_id": expense.id,
            "splits": len(split_drafts),
        }},
    )
    return expense


def _undo_expense_write(db: Session, trip_id: str) -> None:
    try:
        db.rollback()
    except SQLAlchemyError as e:
        logger.critical(
            "Rollback after failed expense write failed; trip may hold an orphaned expense",
            exc_info=True,
            extra={"extra_data": {"trip_id": trip_id}},
        )
        raise CompensationError(f"Could not undo expense write for trip {trip_id}") from e


def delete_expense(db: Session, trip: Trip, expense_id: str, profile: Profile | None) -> None:
    """Delete an expense and its splits. Only the payer may do this."""
    expense = db.query(Expense).filter(
        Expense.id == expense_id, Expense.trip_id == trip.id
    ).first()
    if not expense:
        raise NotFound("Expense not found")
    if not profile or expense.payer_id != profile.id:
        raise PermissionDenied("You can only delete expenses you paid for")

    # Splits go first through the delete-orphan cascade
    db.delete(expense)
    trip.updated_at = datetime.utcnow()
    db.commit()
    logger.info("Expense deleted", extra={"extra_data": {"trip_id": trip.id, "expense_id": expense_id}})


def load_trip_ledger(db: Session, trip_id: str) -> tuple[list[dict], list[dict]]:
    """Load a trip's expenses and splits as plain rows for the balance functions."""
    expenses = db.query(Expense).filter(Expense.trip_id == trip_id).all()
    expense_rows = [
        {"id": e.id, "payer_id": e.payer_id, "amount": e.amount}
        for e in expenses
    ]

    splits = (
        db.query(ExpenseSplit)
        .join(Expense, Expense.id == ExpenseSplit.expense_id)
        .filter(Expense.trip_id == trip_id)
        .all()
    )
    split_rows = [
        {"expense_id": s.expense_id, "participant_id": s.participant_id, "amount_owed": s.amount_owed}
        for s in splits
    ]
    return expense_rows, split_rows


def has_ledger_history(db: Session, trip_id: str, profile_id: str) -> bool:
    """Whether the profile paid for or shares in any of the trip's expenses."""
    paid = db.query(Expense.id).filter(
        Expense.trip_id == trip_id, Expense.payer_id == profile_id
    ).first()
    if paid:
        return True
    owed = (
        db.query(ExpenseSplit.id)
        .join(Expense, Expense.id == ExpenseSplit.expense_id)
        .filter(Expense.trip_id == trip_id, ExpenseSplit.participant_id == profile_id)
        .first()
    )
    return owed is not None
