from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.deps import get_current_profile, get_or_create_profile
from app.enums import ParticipantStatus, TripStatus
from app.models import Trip, TripParticipant
from app.schemas import UpdateProfileIn
from app.serializers import serialize_trip

router = APIRouter()


@router.get("/me")
def get_me(request: Request, db: Session = Depends(get_db)):
    profile = get_current_profile(request, db)
    if not profile:
        return None
    return {"id": profile.id, "full_name": profile.full_name, "email": profile.email, "avatar_url": profile.avatar_url}


@router.patch("/me")
def update_me(data: UpdateProfileIn, request: Request, db: Session = Depends(get_db)):
    profile = get_or_create_profile(request, db)
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(profile, field, value)
    db.commit()
    db.refresh(profile)
    return {"id": profile.id, "full_name": profile.full_name, "email": profile.email, "avatar_url": profile.avatar_url}


@router.get("/me/trips")
def get_my_trips(request: Request, db: Session = Depends(get_db)):
    profile = get_current_profile(request, db)
    if not profile:
        return []
    trips = (
        db.query(Trip)
        .join(TripParticipant, TripParticipant.trip_id == Trip.id)
        .filter(
            TripParticipant.user_id == profile.id,
            TripParticipant.status.in_([ParticipantStatus.PENDING, ParticipantStatus.APPROVED]),
            Trip.status != TripStatus.CANCELLED,
        )
        .order_by(Trip.start_date)
        .all()
    )
    return [serialize_trip(t, profile_id=profile.id) for t in trips]
