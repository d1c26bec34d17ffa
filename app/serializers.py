from app.balances import ParticipantBalance, Settlement
from app.itinerary import ActivityStats, ItineraryDay
from app.models import Activity, Expense, ExpenseSplit, Profile, Trip, TripParticipant


def _money(value) -> float | None:
    return float(value) if value is not None else None


def serialize_profile(profile: Profile | None) -> dict | None:
    if profile is None:
        return None
    return {
        "id": profile.id,
        "full_name": profile.full_name,
        "avatar_url": profile.avatar_url,
    }


def serialize_participant(participant: TripParticipant) -> dict:
    return {
        "id": participant.id,
        "user_id": participant.user_id,
        "status": participant.status.value,
        "message": participant.message,
        "joined_at": participant.joined_at.isoformat(),
        "profile": serialize_profile(participant.profile),
    }


def serialize_split(split: ExpenseSplit) -> dict:
    return {
        "expense_id": split.expense_id,
        "participant_id": split.participant_id,
        "amount_owed": _money(split.amount_owed),
        "paid": split.paid,
    }


def serialize_expense(expense: Expense, with_splits: bool = True) -> dict:
    data = {
        "id": expense.id,
        "trip_id": expense.trip_id,
        "payer_id": expense.payer_id,
        "amount": _money(expense.amount),
        "description": expense.description,
        "category": expense.category.value,
        "expense_date": expense.expense_date.isoformat(),
        "split_type": expense.split_type.value,
        "amount_per_person": _money(expense.amount_per_person),
        "created_at": expense.created_at.isoformat(),
    }
    if with_splits:
        data["splits"] = [serialize_split(s) for s in expense.splits]
    return data


def serialize_activity(activity: Activity) -> dict:
    return {
        "id": activity.id,
        "trip_id": activity.trip_id,
        "creator_id": activity.creator_id,
        "title": activity.title,
        "description": activity.description,
        "location": activity.location,
        "category": activity.category.value,
        "start_date": activity.start_date.isoformat(),
        "end_date": activity.end_date.isoformat() if activity.end_date else None,
        "start_time": activity.start_time,
        "end_time": activity.end_time,
        "cost_per_person": _money(activity.cost_per_person),
        "max_participants": activity.max_participants,
        "current_participants": activity.current_participants,
        "booking_url": activity.booking_url,
        "notes": activity.notes,
        "status": activity.status.value,
        "participants": [
            {"participant_id": p.participant_id, "status": p.status.value}
            for p in activity.participants
        ],
    }


def serialize_trip(trip: Trip, profile_id: str | None = None) -> dict:
    your_status = None
    if profile_id:
        for p in trip.participants:
            if p.user_id == profile_id:
                your_status = p.status.value
                break

    return {
        "id": trip.id,
        "title": trip.title,
        "description": trip.description,
        "destination": trip.destination,
        "start_date": trip.start_date.isoformat(),
        "end_date": trip.end_date.isoformat(),
        "max_participants": trip.max_participants,
        "current_participants": trip.current_participants,
        "organizer": serialize_profile(trip.organizer),
        "status": trip.status.value,
        "is_organizer": profile_id is not None and trip.organizer_id == profile_id,
        "your_status": your_status,
        "createdAt": trip.created_at.isoformat(),
        "updatedAt": trip.updated_at.isoformat(),
    }


def serialize_balance(balance: ParticipantBalance, names: dict[str, str | None] | None = None) -> dict:
    names = names or {}
    return {
        "participant_id": balance.participant_id,
        "participant_name": names.get(balance.participant_id),
        "total_paid": float(balance.total_paid),
        "total_owed": float(balance.total_owed),
        "net_balance": float(balance.net_balance),
    }


def serialize_settlement(settlement: Settlement, names: dict[str, str | None] | None = None) -> dict:
    names = names or {}
    return {
        "from": settlement.from_participant_id,
        "from_name": names.get(settlement.from_participant_id),
        "to": settlement.to_participant_id,
        "to_name": names.get(settlement.to_participant_id),
        "amount": float(settlement.amount),
    }


def serialize_itinerary_day(day: ItineraryDay) -> dict:
    return {
        "date": day.date.isoformat(),
        "day_of_week": day.day_of_week,
        "activities": day.activities,
        "total_cost": day.total_cost,
        "participant_count": day.participant_count,
    }


def serialize_stats(stats: ActivityStats) -> dict:
    return stats.model_dump()
