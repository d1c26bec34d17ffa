import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.database import get_db
from app.deps import approved_roster, get_current_profile, get_trip, require_participant
from app.enums import ACTIVITY_CATEGORY_LABELS, ActivityParticipantStatus
from app.errors import NotFound, PermissionDenied
from app.itinerary import activity_stats, group_into_itinerary
from app.models import Activity, ActivityParticipant, Trip
from app.schemas import ActivityIn, UpdateActivityIn
from app.serializers import serialize_activity, serialize_itinerary_day, serialize_stats

logger = logging.getLogger("lfg")

router = APIRouter()

REQUIRED_ACTIVITY_FIELDS = {"title", "category", "start_date", "status"}


def _check_within_trip(trip: Trip, start_date) -> None:
    if start_date < trip.start_date or start_date > trip.end_date:
        raise HTTPException(status_code=400, detail="Activity date must be within trip dates")


def _get_activity(db: Session, trip_id: str, activity_id: str) -> Activity:
    activity = db.query(Activity).filter(
        Activity.id == activity_id, Activity.trip_id == trip_id
    ).first()
    if not activity:
        raise NotFound("Activity not found")
    return activity


def _trip_activities(db: Session, trip_id: str) -> list[dict]:
    activities = (
        db.query(Activity)
        .options(selectinload(Activity.participants))
        .filter(Activity.trip_id == trip_id)
        .order_by(Activity.start_date, Activity.start_time, Activity.created_at)
        .all()
    )
    return [serialize_activity(a) for a in activities]


@router.get("/activity-categories")
def list_activity_categories():
    return [
        {"id": c.value, "label": label, "description": description}
        for c, (label, description) in ACTIVITY_CATEGORY_LABELS.items()
    ]


@router.post("/trips/{trip_id}/activities", status_code=201)
def create_activity(
    trip_id: str,
    data: ActivityIn,
    request: Request,
    db: Session = Depends(get_db),
):
    trip = get_trip(trip_id, db)
    profile = get_current_profile(request, db)
    require_participant(db, trip, profile, "create activities")
    _check_within_trip(trip, data.start_date)

    activity = Activity(
        trip_id=trip.id,
        creator_id=profile.id,
        current_participants=1,
        **data.model_dump(),
    )
    # The creator takes part in their own activity
    activity.participants = [
        ActivityParticipant(participant_id=profile.id, status=ActivityParticipantStatus.CONFIRMED)
    ]
    db.add(activity)
    trip.updated_at = datetime.utcnow()
    try:
        db.commit()
    except SQLAlchemyError:
        logger.error("Activity write failed", exc_info=True, extra={"extra_data": {"trip_id": trip.id}})
        db.rollback()
        raise HTTPException(status_code=500, detail="Error setting up activity participation")

    db.refresh(activity)
    logger.info("Activity created", extra={"extra_data": {"trip_id": trip.id, "activity_id": activity.id}})
    return serialize_activity(activity)


@router.get("/trips/{trip_id}/activities")
def list_activities(
    trip_id: str,
    request: Request,
    db: Session = Depends(get_db),
):
    trip = get_trip(trip_id, db)
    require_participant(db, trip, get_current_profile(request, db), "view activities")
    return _trip_activities(db, trip.id)


@router.get("/trips/{trip_id}/itinerary")
def get_itinerary(
    trip_id: str,
    request: Request,
    db: Session = Depends(get_db),
):
    trip = get_trip(trip_id, db)
    require_participant(db, trip, get_current_profile(request, db), "view activities")
    days = group_into_itinerary(_trip_activities(db, trip.id))
    return [serialize_itinerary_day(d) for d in days]


@router.get("/trips/{trip_id}/activity-stats")
def get_activity_stats(
    trip_id: str,
    request: Request,
    db: Session = Depends(get_db),
):
    trip = get_trip(trip_id, db)
    require_participant(db, trip, get_current_profile(request, db), "view activities")
    stats = activity_stats(_trip_activities(db, trip.id), len(approved_roster(db, trip.id)))
    return serialize_stats(stats)


@router.patch("/trips/{trip_id}/activities/{activity_id}")
def update_activity(
    trip_id: str,
    activity_id: str,
    data: UpdateActivityIn,
    request: Request,
    db: Session = Depends(get_db),
):
    trip = get_trip(trip_id, db)
    profile = get_current_profile(request, db)
    require_participant(db, trip, profile, "update activities")
    activity = _get_activity(db, trip.id, activity_id)
    if activity.creator_id != profile.id:
        raise PermissionDenied("Only the activity creator can make updates")

    raw = data.model_dump(exclude_unset=True)
    if raw.get("start_date") is not None:
        _check_within_trip(trip, raw["start_date"])
    if raw.get("max_participants") is not None and raw["max_participants"] < activity.current_participants:
        raise HTTPException(status_code=400, detail="Activity already has more participants than that")

    for field, value in raw.items():
        # Null clears optional details only
        if value is None and field in REQUIRED_ACTIVITY_FIELDS:
            continue
        setattr(activity, field, value)

    activity.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(activity)
    return serialize_activity(activity)


@router.delete("/trips/{trip_id}/activities/{activity_id}", status_code=204)
def delete_activity(
    trip_id: str,
    activity_id: str,
    request: Request,
    db: Session = Depends(get_db),
):
    trip = get_trip(trip_id, db)
    profile = get_current_profile(request, db)
    require_participant(db, trip, profile, "delete activities")
    activity = _get_activity(db, trip.id, activity_id)
    if activity.creator_id != profile.id:
        raise PermissionDenied("Only the activity creator can delete this activity")

    db.delete(activity)
    trip.updated_at = datetime.utcnow()
    db.commit()
    logger.info("Activity deleted", extra={"extra_data": {"trip_id": trip.id, "activity_id": activity_id}})
    return None


@router.post("/trips/{trip_id}/activities/{activity_id}/join")
def join_activity(
    trip_id: str,
    activity_id: str,
    request: Request,
    db: Session = Depends(get_db),
):
    trip = get_trip(trip_id, db)
    profile = get_current_profile(request, db)
    require_participant(db, trip, profile, "join activities")
    activity = _get_activity(db, trip.id, activity_id)

    existing = db.query(ActivityParticipant).filter(
        ActivityParticipant.activity_id == activity.id,
        ActivityParticipant.participant_id == profile.id,
    ).first()

    if existing:
        raise HTTPException(status_code=409, detail="You are already participating in this activity")
    if activity.max_participants and activity.current_participants >= activity.max_participants:
        raise HTTPException(status_code=409, detail="Activity is at maximum capacity")

    db.add(ActivityParticipant(
        activity_id=activity.id,
        participant_id=profile.id,
        status=ActivityParticipantStatus.CONFIRMED,
    ))

    activity.current_participants += 1
    activity.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(activity)
    return serialize_activity(activity)


@router.post("/trips/{trip_id}/activities/{activity_id}/leave")
def leave_activity(
    trip_id: str,
    activity_id: str,
    request: Request,
    db: Session = Depends(get_db),
):
    trip = get_trip(trip_id, db)
    profile = get_current_profile(request, db)
    require_participant(db, trip, profile, "leave activities")
    activity = _get_activity(db, trip.id, activity_id)

    removed = db.query(ActivityParticipant).filter(
        ActivityParticipant.activity_id == activity.id,
        ActivityParticipant.participant_id == profile.id,
    ).delete()
    if not removed:
        raise HTTPException(status_code=409, detail="You are not participating in this activity")

    activity.current_participants = max(0, activity.current_participants - 1)
    activity.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(activity)
    return serialize_activity(activity)
