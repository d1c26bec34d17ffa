from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.database import get_db
from app.deps import get_current_profile, get_or_create_profile, get_trip, require_participant
from app.enums import EXPENSE_CATEGORY_LABELS
from app.expenses import create_equal_split_expense, delete_expense
from app.models import Expense
from app.schemas import ExpenseIn
from app.serializers import serialize_expense

router = APIRouter()


@router.get("/expense-categories")
def list_expense_categories():
    return [{"id": c.value, "label": label} for c, label in EXPENSE_CATEGORY_LABELS.items()]


@router.post("/trips/{trip_id}/expenses", status_code=201)
def add_expense(
    trip_id: str,
    data: ExpenseIn,
    request: Request,
    db: Session = Depends(get_db),
):
    trip = get_trip(trip_id, db)
    payer = get_or_create_profile(request, db)
    try:
        expense = create_equal_split_expense(db, trip, payer, data)
    except SQLAlchemyError:
        raise HTTPException(status_code=500, detail="Error creating expense splits")
    return serialize_expense(expense)


@router.get("/trips/{trip_id}/expenses")
def list_expenses(
    trip_id: str,
    request: Request,
    db: Session = Depends(get_db),
):
    trip = get_trip(trip_id, db)
    require_participant(db, trip, get_current_profile(request, db), "view expenses")

    expenses = (
        db.query(Expense)
        .options(selectinload(Expense.splits))
        .filter(Expense.trip_id == trip.id)
        .order_by(Expense.expense_date.desc(), Expense.created_at.desc())
        .all()
    )
    return [serialize_expense(e) for e in expenses]


@router.delete("/trips/{trip_id}/expenses/{expense_id}", status_code=204)
def remove_expense(
    trip_id: str,
    expense_id: str,
    request: Request,
    db: Session = Depends(get_db),
):
    trip = get_trip(trip_id, db)
    delete_expense(db, trip, expense_id, get_current_profile(request, db))
    return None
