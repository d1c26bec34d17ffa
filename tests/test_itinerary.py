from datetime import date

from app.itinerary import activity_stats, group_into_itinerary


def activity(aid, start_date, start_time=None, cost=None, participants=1, category="other"):
    return {
        "id": aid,
        "start_date": start_date,
        "start_time": start_time,
        "cost_per_person": cost,
        "current_participants": participants,
        "category": category,
    }


def test_day_orders_timed_activities_before_untimed():
    activities = [
        activity("lunch", "2026-07-01", "14:00"),
        activity("free-time", "2026-07-01"),
        activity("breakfast", "2026-07-01", "09:00"),
    ]
    [day] = group_into_itinerary(activities)

    assert [a["id"] for a in day.activities] == ["breakfast", "lunch", "free-time"]


def test_untimed_activities_keep_their_input_order():
    activities = [
        activity("beach", "2026-07-01"),
        activity("tour", "2026-07-01", "10:30"),
        activity("nap", "2026-07-01", ""),
        activity("market", "2026-07-01"),
    ]
    [day] = group_into_itinerary(activities)

    assert [a["id"] for a in day.activities] == ["tour", "beach", "nap", "market"]


def test_days_are_sorted_and_costed():
    activities = [
        activity("fado", "2026-07-02", "21:00", cost=35, participants=2, category="entertainment"),
        activity("tram", "2026-07-01", "09:00", cost=20, participants=3, category="sightseeing"),
        activity("pasteis", "2026-07-01", "14:00", cost=12.5, participants=2, category="food"),
        activity("stroll", "2026-07-01", participants=4),
    ]
    days = group_into_itinerary(activities)

    assert [d.date for d in days] == [date(2026, 7, 1), date(2026, 7, 2)]
    assert [d.day_of_week for d in days] == ["Wednesday", "Thursday"]
    assert [d.total_cost for d in days] == [85.0, 70.0]
    assert [d.participant_count for d in days] == [4, 2]


def test_accepts_date_objects():
    days = group_into_itinerary([activity("hike", date(2026, 7, 3), "07:00")])

    assert days[0].date == date(2026, 7, 3)
    assert days[0].total_cost == 0.0


def test_no_activities_gives_empty_itinerary():
    assert group_into_itinerary([]) == []


def test_activity_stats():
    activities = [
        activity("tram", "2026-07-01", "09:00", cost=20, participants=3, category="sightseeing"),
        activity("pasteis", "2026-07-01", "14:00", cost=12.5, participants=2, category="food"),
        activity("dinner", "2026-07-02", participants=1, category="food"),
    ]
    stats = activity_stats(activities, roster_size=4)

    assert stats.total_activities == 3
    assert stats.total_cost == 85.0
    assert stats.average_cost_per_day == 42.5
    assert stats.category_counts == {"sightseeing": 1, "food": 2}
    assert stats.participation_rate == 0.5


def test_activity_stats_without_activities():
    stats = activity_stats([], roster_size=0)

    assert stats.total_activities == 0
    assert stats.total_cost == 0.0
    assert stats.average_cost_per_day == 0.0
    assert stats.category_counts == {}
    assert stats.participation_rate == 0.0
