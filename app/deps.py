import logging

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.enums import ParticipantStatus, TripStatus
from app.errors import PermissionDenied
from app.models import Profile, Trip, TripParticipant

logger = logging.getLogger("lfg")


def get_trip(
    trip_id: str,
    db: Session = Depends(get_db),
) -> Trip:
    trip = db.query(Trip).filter(Trip.id == trip_id, Trip.status != TripStatus.CANCELLED).first()
    if not trip:
        raise HTTPException(status_code=404, detail="Trip not found")
    return trip


def get_ctk(request: Request) -> str | None:
    """Read the cookie tracking key from the request."""
    return getattr(request.state, "ctk", None)


def get_current_profile(request: Request, db: Session) -> Profile | None:
    ctk = get_ctk(request)
    if not ctk:
        return None
    return db.query(Profile).filter(Profile.ctk == ctk).first()


def get_or_create_profile(request: Request, db: Session) -> Profile | None:
    """Look up or create a Profile for the request's ctk cookie."""
    ctk = get_ctk(request)
    if not ctk:
        return None
    profile = db.query(Profile).filter(Profile.ctk == ctk).first()
    if not profile:
        profile = Profile(ctk=ctk)
        db.add(profile)
        db.flush()
    return profile


def get_participation(db: Session, trip_id: str, profile_id: str) -> TripParticipant | None:
    return (
        db.query(TripParticipant)
        .filter(TripParticipant.trip_id == trip_id, TripParticipant.user_id == profile_id)
        .first()
    )


def approved_roster(db: Session, trip_id: str) -> list[str]:
    """Approved participant ids of a trip, in join order."""
    rows = (
        db.query(TripParticipant.user_id)
        .filter(
            TripParticipant.trip_id == trip_id,
            TripParticipant.status == ParticipantStatus.APPROVED,
        )
        .order_by(TripParticipant.joined_at, TripParticipant.id)
        .all()
    )
    return [r.user_id for r in rows]


def require_participant(db: Session, trip: Trip, profile: Profile | None, action: str) -> TripParticipant:
    """Only approved participants may read or write a trip's shared data."""
    participation = get_participation(db, trip.id, profile.id) if profile else None
    if not participation or participation.status != ParticipantStatus.APPROVED:
        logger.warning(
            "Participant check failed",
            extra={"extra_data": {"trip_id": trip.id, "profile_id": profile.id if profile else None}},
        )
        raise PermissionDenied(f"Only trip participants can {action}")
    return participation


def require_organizer(trip: Trip, profile: Profile | None) -> None:
    if profile and trip.organizer_id == profile.id:
        return

    logger.warning("Organizer verification failed", extra={"extra_data": {"trip_id": trip.id}})
    raise PermissionDenied("Only the trip organizer can do this")
