import logging
from datetime import datetime

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.database import get_db
from app.deps import get_current_profile, get_or_create_profile, get_trip, require_organizer
from app.email import send_trip_created
from app.enums import ParticipantStatus, TripStatus
from app.models import Activity, Trip, TripParticipant
from app.ratelimit import limiter
from app.schemas import CreateTripIn, UpdateTripIn
from app.serializers import serialize_trip

logger = logging.getLogger("lfg")

router = APIRouter()


@router.post("/trips", status_code=201)
@limiter.limit("5/hour")
def create_trip(request: Request, data: CreateTripIn, background_tasks: BackgroundTasks, db: Session = Depends(get_db)):
    if data.end_date < data.start_date:
        raise HTTPException(status_code=400, detail="End date must be on or after start date")

    organizer = get_or_create_profile(request, db)
    if not organizer:
        raise HTTPException(status_code=400, detail="No profile found for this browser")
    if data.organizer_name and not organizer.full_name:
        organizer.full_name = data.organizer_name
    if data.email and not organizer.email:
        organizer.email = data.email

    trip = Trip(
        title=data.title,
        description=data.description,
        destination=data.destination,
        start_date=data.start_date,
        end_date=data.end_date,
        max_participants=data.max_participants,
        current_participants=1,
        organizer_id=organizer.id,
        status=TripStatus.FULL if data.max_participants == 1 else TripStatus.ACTIVE,
    )
    db.add(trip)
    db.flush()  # get trip.id

    # The organizer is always the first approved participant
    db.add(TripParticipant(trip_id=trip.id, user_id=organizer.id, status=ParticipantStatus.APPROVED))

    db.commit()
    db.refresh(trip)
    logger.info("Trip created", extra={"extra_data": {"trip_id": trip.id, "organizer_id": organizer.id}})

    if data.email:
        background_tasks.add_task(send_trip_created, data.email, trip.title, trip.id)

    return {"trip": serialize_trip(trip, profile_id=organizer.id)}


@router.get("/trips/{trip_id}")
def get_trip_details(
    trip_id: str,
    request: Request,
    db: Session = Depends(get_db),
):
    trip = get_trip(trip_id, db)
    profile = get_current_profile(request, db)
    return serialize_trip(trip, profile_id=profile.id if profile else None)


@router.patch("/trips/{trip_id}")
def update_trip(
    trip_id: str,
    data: UpdateTripIn,
    request: Request,
    db: Session = Depends(get_db),
):
    trip = get_trip(trip_id, db)
    profile = get_current_profile(request, db)
    require_organizer(trip, profile)

    raw = data.model_dump(exclude_unset=True)
    for field in ("title", "description", "destination", "start_date", "end_date"):
        if field in raw and (raw[field] is not None or field == "description"):
            setattr(trip, field, raw[field])

    if trip.end_date < trip.start_date:
        db.rollback()
        raise HTTPException(status_code=400, detail="End date must be on or after start date")

    if "start_date" in raw or "end_date" in raw:
        earliest, latest = db.query(func.min(Activity.start_date), func.max(Activity.start_date)).filter(
            Activity.trip_id == trip.id
        ).one()
        if earliest and (earliest < trip.start_date or latest > trip.end_date):
            db.rollback()
            raise HTTPException(status_code=400, detail="Trip dates must still cover all planned activities")

    if raw.get("max_participants") is not None:
        if data.max_participants < trip.current_participants:
            db.rollback()
            raise HTTPException(status_code=400, detail="Trip already has more participants than that")
        trip.max_participants = data.max_participants
        trip.status = TripStatus.FULL if trip.current_participants >= trip.max_participants else TripStatus.ACTIVE

    trip.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(trip)
    return serialize_trip(trip, profile_id=profile.id)


@router.delete("/trips/{trip_id}", status_code=204)
def delete_trip(
    trip_id: str,
    request: Request,
    db: Session = Depends(get_db),
):
    trip = get_trip(trip_id, db)
    require_organizer(trip, get_current_profile(request, db))
    trip.status = TripStatus.CANCELLED
    trip.updated_at = datetime.utcnow()
    db.commit()
    logger.info("Trip cancelled", extra={"extra_data": {"trip_id": trip.id}})
    return None
