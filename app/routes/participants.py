import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.deps import (
    get_current_profile, get_or_create_profile, get_participation, get_trip, require_organizer,
    require_participant,
)
from app.enums import ParticipantStatus, TripStatus
from app.expenses import has_ledger_history
from app.models import TripParticipant
from app.schemas import JoinTripIn
from app.serializers import serialize_participant

logger = logging.getLogger("lfg")

router = APIRouter()


@router.get("/trips/{trip_id}/participants")
def list_participants(
    trip_id: str,
    request: Request,
    db: Session = Depends(get_db),
):
    trip = get_trip(trip_id, db)
    profile = get_current_profile(request, db)
    require_participant(db, trip, profile, "view participants")

    query = db.query(TripParticipant).filter(TripParticipant.trip_id == trip.id)
    # Pending requests are only visible to the organizer
    if trip.organizer_id != profile.id:
        query = query.filter(TripParticipant.status == ParticipantStatus.APPROVED)
    participants = query.order_by(TripParticipant.joined_at, TripParticipant.id).all()
    return [serialize_participant(p) for p in participants]


@router.post("/trips/{trip_id}/join", status_code=201)
def request_to_join(
    trip_id: str,
    data: JoinTripIn,
    request: Request,
    db: Session = Depends(get_db),
):
    trip = get_trip(trip_id, db)
    profile = get_or_create_profile(request, db)
    if not profile:
        raise HTTPException(status_code=400, detail="No profile found for this browser")
    if data.name and not profile.full_name:
        profile.full_name = data.name

    existing = get_participation(db, trip.id, profile.id)
    if existing and existing.status in (ParticipantStatus.PENDING, ParticipantStatus.APPROVED):
        raise HTTPException(status_code=409, detail="You have already requested to join this trip")
    if trip.status == TripStatus.FULL or trip.current_participants >= trip.max_participants:
        raise HTTPException(status_code=409, detail="This trip is full")

    # Declined or departed travelers may ask again
    if existing:
        participant = existing
        participant.status = ParticipantStatus.PENDING
        participant.message = data.message
        participant.joined_at = datetime.utcnow()
    else:
        participant = TripParticipant(
            trip_id=trip.id,
            user_id=profile.id,
            status=ParticipantStatus.PENDING,
            message=data.message,
        )
        db.add(participant)

    db.commit()
    db.refresh(participant)
    logger.info("Join requested", extra={"extra_data": {"trip_id": trip.id, "profile_id": profile.id}})
    return serialize_participant(participant)


def _get_request(db: Session, trip_id: str, participant_id: str) -> TripParticipant:
    participant = db.query(TripParticipant).filter(
        TripParticipant.id == participant_id, TripParticipant.trip_id == trip_id
    ).first()
    if not participant:
        raise HTTPException(status_code=404, detail="Participant not found")
    return participant


@router.post("/trips/{trip_id}/participants/{participant_id}/approve")
def approve_participant(
    trip_id: str,
    participant_id: str,
    request: Request,
    db: Session = Depends(get_db),
):
    trip = get_trip(trip_id, db)
    require_organizer(trip, get_current_profile(request, db))

    participant = _get_request(db, trip.id, participant_id)
    if participant.status != ParticipantStatus.PENDING:
        raise HTTPException(status_code=409, detail="Only pending requests can be approved")
    if trip.current_participants >= trip.max_participants:
        raise HTTPException(status_code=409, detail="This trip is full")

    participant.status = ParticipantStatus.APPROVED
    trip.current_participants += 1
    if trip.current_participants >= trip.max_participants:
        trip.status = TripStatus.FULL
    trip.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(participant)
    logger.info(
        "Participant approved",
        extra={"extra_data": {"trip_id": trip.id, "profile_id": participant.user_id}},
    )
    return serialize_participant(participant)


@router.post("/trips/{trip_id}/participants/{participant_id}/decline")
def decline_participant(
    trip_id: str,
    participant_id: str,
    request: Request,
    db: Session = Depends(get_db),
):
    trip = get_trip(trip_id, db)
    require_organizer(trip, get_current_profile(request, db))

    participant = _get_request(db, trip.id, participant_id)
    if participant.status != ParticipantStatus.PENDING:
        raise HTTPException(status_code=409, detail="Only pending requests can be declined")

    participant.status = ParticipantStatus.DECLINED
    db.commit()
    db.refresh(participant)
    return serialize_participant(participant)


@router.post("/trips/{trip_id}/leave", status_code=204)
def leave_trip(
    trip_id: str,
    request: Request,
    db: Session = Depends(get_db),
):
    trip = get_trip(trip_id, db)
    profile = get_current_profile(request, db)
    participant = require_participant(db, trip, profile, "leave a trip")
    if trip.organizer_id == profile.id:
        raise HTTPException(status_code=409, detail="The organizer cannot leave their own trip")
    # Balances only cover approved travelers
    if has_ledger_history(db, trip.id, profile.id):
        raise HTTPException(status_code=409, detail="Remove your expenses and splits before leaving the trip")

    participant.status = ParticipantStatus.LEFT
    trip.current_participants = max(1, trip.current_participants - 1)
    if trip.status == TripStatus.FULL and trip.current_participants < trip.max_participants:
        trip.status = TripStatus.ACTIVE
    trip.updated_at = datetime.utcnow()
    db.commit()
    logger.info("Participant left", extra={"extra_data": {"trip_id": trip.id, "profile_id": profile.id}})
    return None
