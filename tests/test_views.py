"""
Tests for derived views: partitions, filters and aggregates
"""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from campus_pulse.schemas import Category, Expense, Review
from campus_pulse.services import views
from campus_pulse.services.data_store import Snapshot
from tests.helpers import NOW, make_club, make_event

def _review(rating: int, day: int = 1) -> Review:
    return Review(
        id=f"r{rating}{day}",
        author="Sam",
        rating=rating,
        comment="Really enjoyed it",
        date=datetime(2024, 6, day, tzinfo=timezone.utc),
    )

def _expense(expense_id: str, amount: float, when: datetime, event_id: str = None) -> Expense:
    return Expense(id=expense_id, name="Supplies", amount=amount, date=when, event_id=event_id)

@pytest.fixture
def snapshot():
    clubs = [
        make_club("a", name="Art Club", category=Category.SOCIAL, description="Painting and drawing"),
        make_club("b", name="Band Club", category=Category.MUSIC, description="Live music nights"),
    ]
    events = [
        make_event("1", "a", NOW + timedelta(days=2), title="Open Studio", tags=["Painting"]),
        make_event("2", "missing", NOW + timedelta(days=1), title="Ghost Event"),
        make_event("3", "b", NOW - timedelta(days=3), title="Spring Concert", description="Bands on stage"),
        make_event("4", "b", NOW + timedelta(days=1), title="Jam Session"),
        make_event("5", "a", NOW - timedelta(days=10), title="Sketch Walk"),
    ]
    return Snapshot(clubs=clubs, events=events)

# -------- Temporal partition --------

def test_upcoming_boundary_is_inclusive():
    assert views.is_upcoming(make_event(date=NOW), NOW) is True
    assert views.is_upcoming(make_event(date=NOW - timedelta(milliseconds=1)), NOW) is False

def test_partition_is_exhaustive_and_exclusive(snapshot):
    upcoming, past = views.split_upcoming_past(snapshot.events, NOW)
    upcoming_ids = {e.id for e in upcoming}
    past_ids = {e.id for e in past}

    assert upcoming_ids.isdisjoint(past_ids)
    assert upcoming_ids | past_ids == {e.id for e in snapshot.events}
    for event in snapshot.events:
        assert (event.id in upcoming_ids) == (event.date >= NOW)

def test_partition_sort_order(snapshot):
    upcoming, past = views.split_upcoming_past(snapshot.events, NOW)
    assert [e.id for e in upcoming] == ["2", "4", "1"]
    assert [e.id for e in past] == ["3", "5"]

def test_partition_follows_the_clock():
    """The same event flips to past as time moves on, with nothing cached"""
    event = make_event(date=NOW)
    assert views.is_upcoming(event, NOW - timedelta(hours=1))
    assert not views.is_upcoming(event, NOW + timedelta(hours=1))

# -------- Orphans and club scoping --------

def test_orphan_events_never_visible(snapshot):
    assert "2" not in {e.id for e in views.visible_events(snapshot)}
    assert "2" not in {e.id for e in views.filter_events(snapshot)}
    assert views.events_for_club(snapshot, "missing") == []

def test_events_for_club_only_own_events():
    snapshot = Snapshot(
        clubs=[make_club("a")],
        events=[make_event("1", "a"), make_event("2", "missing")],
    )
    assert [e.id for e in views.events_for_club(snapshot, "a")] == ["1"]

# -------- Search and filters --------

def test_search_matches_title_description_or_tag(snapshot):
    by_id = {e.id: e for e in snapshot.events}
    assert views.matches_search(by_id["1"], "STUDIO")
    assert views.matches_search(by_id["3"], "bands")
    assert views.matches_search(by_id["1"], "paint")
    assert not views.matches_search(by_id["4"], "paint")
    assert views.matches_search(by_id["4"], "")

def test_filter_events_composes_with_and(snapshot):
    results = views.filter_events(snapshot, search="s", category="Music")
    assert [e.id for e in results] == ["3", "4"]

    assert [e.id for e in views.filter_events(snapshot, category="All")] == ["5", "3", "4", "1"]

def test_category_filter_uses_club_category(snapshot):
    # every event was created with the default Tech category; clubs decide
    assert views.filter_events(snapshot, category="Tech") == []
    assert {e.id for e in views.filter_events(snapshot, category="Social")} == {"1", "5"}

def test_date_range_upper_bound_is_end_of_day():
    to_day = date(2024, 6, 20)
    included = make_event(date=datetime(2024, 6, 20, 23, 59, 59, tzinfo=timezone.utc))
    excluded = make_event(date=datetime(2024, 6, 21, 0, 0, 0, 1000, tzinfo=timezone.utc))

    assert views.in_date_range(included, date_to=to_day)
    assert not views.in_date_range(excluded, date_to=to_day)

def test_date_range_lower_bound_is_an_instant():
    start = datetime(2024, 6, 20, 12, 0, tzinfo=timezone.utc)
    assert views.in_date_range(make_event(date=start), date_from=start)
    assert not views.in_date_range(make_event(date=start - timedelta(milliseconds=1)), date_from=start)

def test_date_range_day_end_uses_timezone():
    """The calendar day ends at local midnight"""
    tz = ZoneInfo("America/New_York")
    # 2024-06-21 02:00 UTC is still 2024-06-20 in New York
    event = make_event(date=datetime(2024, 6, 21, 2, 0, tzinfo=timezone.utc))
    assert views.in_date_range(event, date_to=date(2024, 6, 20), tz=tz)
    assert not views.in_date_range(event, date_to=date(2024, 6, 20))

def test_filter_events_date_range(snapshot):
    results = views.filter_events(
        snapshot,
        date_from=NOW - timedelta(days=4),
        date_to=(NOW + timedelta(days=1)).date(),
    )
    assert [e.id for e in results] == ["3", "4"]

def test_events_by_day(snapshot):
    days = views.events_by_day(views.visible_events(snapshot))
    assert [e.id for e in days["2024-06-16"]] == ["4"]
    assert list(days) == sorted(days)

def test_search_clubs(snapshot):
    assert [c.id for c in views.search_clubs(snapshot.clubs, "band")] == ["b"]
    assert [c.id for c in views.search_clubs(snapshot.clubs, "drawing")] == ["a"]
    assert len(views.search_clubs(snapshot.clubs, None)) == 2

def test_find_club_and_event(snapshot):
    club = views.find_club_by_slug(snapshot, "a")
    assert club.name == "Art Club"
    assert views.find_event(snapshot, club, "event-1").id == "1"
    assert views.find_event(snapshot, club, "event-3") is None
    assert views.find_club_by_slug(snapshot, "nope") is None

# -------- Ratings --------

def test_average_rating():
    assert views.average_rating([_review(5), _review(3), _review(4)]) == 4.0
    assert views.average_rating([_review(5), _review(4)]) == 4.5
    assert views.average_rating([_review(5), _review(4), _review(4)]) == 4.3

def test_average_rating_without_reviews_is_none():
    assert views.average_rating([]) is None

def test_sorted_reviews_newest_first():
    reviews = [_review(5, day=1), _review(3, day=9), _review(4, day=4)]
    assert [r.date.day for r in views.sorted_reviews(reviews)] == [9, 4, 1]

# -------- Budget --------

def test_budget_summary_counts_this_month_only():
    club = make_club(
        monthly_budget=500,
        expenses=[
            _expense("e1", 120.5, datetime(2024, 6, 1, tzinfo=timezone.utc)),
            _expense("e2", 79.5, datetime(2024, 6, 30, 23, tzinfo=timezone.utc)),
            _expense("e3", 1000, datetime(2024, 5, 31, tzinfo=timezone.utc)),
            _expense("e4", 1000, datetime(2023, 6, 10, tzinfo=timezone.utc)),
        ],
    )
    summary = views.budget_summary(club, NOW)
    assert summary.spent == 200
    assert summary.remaining == 300
    assert summary.progress == 40

def test_budget_progress_with_zero_budget():
    club = make_club(
        monthly_budget=0,
        expenses=[_expense("e1", 50, NOW)],
    )
    summary = views.budget_summary(club, NOW)
    assert summary.progress == 0
    assert summary.remaining == -50

def test_monthly_history_last_six_months():
    expenses = [
        _expense("e1", 10, datetime(2024, 6, 2, tzinfo=timezone.utc)),
        _expense("e2", 20, datetime(2024, 1, 31, tzinfo=timezone.utc)),
        _expense("e3", 5, datetime(2024, 1, 1, tzinfo=timezone.utc)),
        _expense("e4", 99, datetime(2023, 12, 31, tzinfo=timezone.utc)),  # seven months back
    ]
    history = views.monthly_history(expenses, NOW)

    assert [m.month for m in history] == ["2024-01", "2024-02", "2024-03", "2024-04", "2024-05", "2024-06"]
    assert [m.label for m in history] == ["Jan", "Feb", "Mar", "Apr", "May", "Jun"]
    assert [m.total for m in history] == [25, 0, 0, 0, 0, 10]

def test_monthly_history_crosses_year():
    history = views.monthly_history([], datetime(2024, 2, 10, tzinfo=timezone.utc))
    assert [m.month for m in history] == ["2023-09", "2023-10", "2023-11", "2023-12", "2024-01", "2024-02"]

def test_expenses_sorted_and_linked(snapshot):
    expenses = [
        _expense("old", 1, datetime(2024, 5, 1, tzinfo=timezone.utc), event_id="1"),
        _expense("new", 1, datetime(2024, 6, 1, tzinfo=timezone.utc), event_id="deleted"),
        _expense("none", 1, datetime(2024, 5, 15, tzinfo=timezone.utc)),
    ]
    assert [e.id for e in views.sorted_expenses(expenses)] == ["new", "none", "old"]
    assert views.expense_event_titles(expenses, snapshot.events) == {
        "old": "Open Studio",
        "new": None,
        "none": None,
    }
