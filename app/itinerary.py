"""Day-by-day itinerary and activity statistics for a trip."""
from datetime import date as date_type

from pydantic import BaseModel

from app.balances import ZERO, qround, to_decimal


class ItineraryDay(BaseModel):
    date: date_type
    day_of_week: str
    activities: list[dict]
    total_cost: float
    participant_count: int


class ActivityStats(BaseModel):
    total_activities: int
    total_cost: float
    average_cost_per_day: float
    category_counts: dict[str, int]
    participation_rate: float


def _as_date(value) -> date_type:
    if isinstance(value, date_type):
        return value
    return date_type.fromisoformat(str(value)[:10])


def _activity_cost(activity: dict):
    cost = activity.get("cost_per_person")
    if cost is None:
        return ZERO
    return to_decimal(cost) * activity.get("current_participants", 0)


def _time_key(activity: dict):
    start_time = activity.get("start_time")
    # Untimed activities go last; sorted() keeps their input order
    return (not start_time, start_time or "")


def group_into_itinerary(activities: list[dict]) -> list[ItineraryDay]:
    groups: dict[date_type, list[dict]] = {}
    for activity in activities:
        groups.setdefault(_as_date(activity["start_date"]), []).append(activity)

    days = []
    for day, day_activities in sorted(groups.items()):
        ordered = sorted(day_activities, key=_time_key)
        total = sum((_activity_cost(a) for a in ordered), ZERO)
        days.append(ItineraryDay(
            date=day,
            day_of_week=day.strftime("%A"),
            activities=ordered,
            total_cost=float(qround(total)),
            participant_count=max((a.get("current_participants", 0) for a in ordered), default=0),
        ))
    return days


def activity_stats(activities: list[dict], roster_size: int) -> ActivityStats:
    """Summarise cost and participation across all of a trip's activities."""
    total_activities = len(activities)
    total_cost = sum((_activity_cost(a) for a in activities), ZERO)

    unique_dates = {_as_date(a["start_date"]) for a in activities}
    average = total_cost / len(unique_dates) if unique_dates else ZERO

    category_counts: dict[str, int] = {}
    for activity in activities:
        category = getattr(activity["category"], "value", activity["category"])
        category_counts[category] = category_counts.get(category, 0) + 1

    total_participations = sum(a.get("current_participants", 0) for a in activities)
    possible = total_activities * (roster_size or 1)
    rate = to_decimal(total_participations) / possible if possible else ZERO

    return ActivityStats(
        total_activities=total_activities,
        total_cost=float(qround(total_cost)),
        average_cost_per_day=float(qround(average)),
        category_counts=category_counts,
        participation_rate=float(qround(rate)),
    )
