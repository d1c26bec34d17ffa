from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.balances import compute_balances, generate_settlements
from app.database import get_db
from app.deps import approved_roster, get_current_profile, get_trip, require_participant
from app.expenses import load_trip_ledger
from app.routes.balances import participant_names
from app.serializers import serialize_settlement

router = APIRouter()


@router.get("/trips/{trip_id}/settlements")
def get_settlements(
    trip_id: str,
    request: Request,
    db: Session = Depends(get_db),
):
    """Suggested payments that would settle every balance in the trip."""
    trip = get_trip(trip_id, db)
    require_participant(db, trip, get_current_profile(request, db), "view settlements")

    roster = approved_roster(db, trip.id)
    expenses, splits = load_trip_ledger(db, trip.id)
    settlements = generate_settlements(compute_balances(expenses, splits, roster))

    names = participant_names(db, roster)
    return [serialize_settlement(s, names) for s in settlements]
