from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.balances import compute_balances
from app.database import get_db
from app.deps import approved_roster, get_current_profile, get_trip, require_participant
from app.expenses import load_trip_ledger
from app.models import Profile
from app.serializers import serialize_balance

router = APIRouter()


def participant_names(db: Session, ids: list[str]) -> dict[str, str | None]:
    if not ids:
        return {}
    rows = db.query(Profile.id, Profile.full_name).filter(Profile.id.in_(ids)).all()
    return {pid: name for pid, name in rows}


@router.get("/trips/{trip_id}/balances")
def get_balances(
    trip_id: str,
    request: Request,
    db: Session = Depends(get_db),
):
    trip = get_trip(trip_id, db)
    require_participant(db, trip, get_current_profile(request, db), "view balances")

    roster = approved_roster(db, trip.id)
    expenses, splits = load_trip_ledger(db, trip.id)
    balances = compute_balances(expenses, splits, roster)

    names = participant_names(db, roster)
    return [serialize_balance(b, names) for b in balances]
