"""
Tests for club administration
"""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from campus_pulse.schemas import (
    BudgetUpdate,
    EventCreate,
    ExpenseCreate,
    PersonCreate,
    ProfileUpdate,
    ResourceIn,
    ReviewCreate,
    Role,
)
from campus_pulse.services.club_service import ClubService, parse_tags
from campus_pulse.services.errors import (
    ClubNotFoundError,
    EventNotFoundError,
    ExpenseNotFoundError,
    PersonNotFoundError,
    ReviewNotAllowedError,
)
from tests.helpers import NOW, make_event

@pytest.fixture
def service(store):
    return ClubService(store, tz=timezone.utc)

def _event_form(**fields) -> EventCreate:
    values = {
        "title": "Open Studio",
        "description": "Bring your sketchbook along",
        "date": date(2024, 7, 1),
        "time": "19:30",
        "location": "Art Room",
        "registration_link": "https://example.com/rsvp",
    }
    values.update(fields)
    return EventCreate(**values)

def _review_form(rating: int = 4) -> ReviewCreate:
    return ReviewCreate(author="Jo", rating=rating, comment="Great night, well organised")

# -------- Events --------

def test_create_event(service, store, channel):
    event = service.create_event("a", _event_form(tags="Painting, ,Drawing "), origin="tab-1")

    assert event.slug == "open-studio"
    assert event.club_id == "a"
    assert event.category == store.clubs[0].category
    assert event.date == datetime(2024, 7, 1, 19, 30, tzinfo=timezone.utc)
    assert event.tags == ["Painting", "Drawing"]
    assert event.image == "https://picsum.photos/seed/open-studio/600/400"
    assert store.events[0].id == event.id
    assert channel.published[-1].origin == "tab-1"

def test_parse_tags_empty():
    assert parse_tags(None) == []

def test_event_time_is_local(store):
    service = ClubService(store, tz=ZoneInfo("America/New_York"))
    event = service.create_event("a", _event_form(time="18:00"))
    assert event.date == datetime(2024, 7, 1, 22, 0, tzinfo=timezone.utc)

def test_event_slug_unique_within_club(service, store):
    first = service.create_event("a", _event_form())
    second = service.create_event("a", _event_form())

    assert first.slug == "open-studio"
    assert second.slug == "open-studio-2"
    assert first.id != second.id

def test_event_slug_may_repeat_across_clubs(service, store):
    """Event URLs are scoped by club"""
    store.replace_events([*store.events, make_event("x", "missing", slug="open-studio")])
    assert service.create_event("a", _event_form()).slug == "open-studio"

def test_create_event_for_unknown_club(service):
    with pytest.raises(ClubNotFoundError):
        service.create_event("nope", _event_form())

def test_update_event_recomputes_slug(service, store):
    event = service.create_event("a", _event_form())
    updated = service.update_event("a", event.id, _event_form(title="Late Studio", image="https://img.example/x.png"))

    assert updated.id == event.id
    assert updated.slug == "late-studio"
    assert updated.image == "https://img.example/x.png"
    assert next(e for e in store.events if e.id == event.id).title == "Late Studio"

def test_update_keeps_own_slug(service):
    event = service.create_event("a", _event_form())
    assert service.update_event("a", event.id, _event_form(location="Main Hall")).slug == "open-studio"

def test_cannot_touch_other_clubs_events(service):
    """Event 2 belongs to a club that does not exist"""
    with pytest.raises(EventNotFoundError):
        service.update_event("a", "2", _event_form())
    with pytest.raises(EventNotFoundError):
        service.delete_event("a", "2")

def test_delete_event(service, store):
    service.delete_event("a", "1")
    assert [e.id for e in store.events] == ["2"]

def test_gallery_add_and_remove(service, store):
    service.add_gallery_images("a", "1", ["data:image/png;base64,AAA", "https://img.example/b.png"])
    event = service.remove_gallery_image("a", "1", "data:image/png;base64,AAA")

    assert event.gallery == ["https://img.example/b.png"]
    assert store.events[0].gallery == ["https://img.example/b.png"]

# -------- Reviews --------

def test_review_on_past_event(service, store):
    later = NOW + timedelta(hours=2)
    review = service.add_review("1", _review_form(5), now=later, origin="tab-9")

    assert review.rating == 5
    assert review.date == later
    assert [r.id for r in store.events[0].reviews] == [review.id]

def test_review_on_upcoming_event_refused(service, store):
    with pytest.raises(ReviewNotAllowedError):
        service.add_review("1", _review_form(), now=NOW - timedelta(days=1))
    assert store.events[0].reviews == []

def test_review_unknown_event(service):
    with pytest.raises(EventNotFoundError):
        service.add_review("nope", _review_form(), now=NOW)

# -------- Team --------

def test_add_person(service, store):
    club, person = service.save_person("a", PersonCreate(name="Ada", role=Role.LEADER, email="ada@campus.edu"))

    assert [p.id for p in club.leaders] == [person.id]
    assert club.members == []
    assert store.clubs[0].leaders[0].email == "ada@campus.edu"

def test_person_defaults_to_member(service):
    club, person = service.save_person("a", PersonCreate(name="Bo"))
    assert person.role == Role.MEMBER
    assert [p.id for p in club.members] == [person.id]

def test_role_change_moves_person(service, store):
    _, lead = service.save_person("a", PersonCreate(name="Ada", role=Role.LEADER))
    club, moved = service.save_person("a", PersonCreate(name="Ada", role=Role.MEMBER), person_id=lead.id)

    assert moved.id == lead.id
    assert club.leaders == []
    assert [p.id for p in club.members] == [lead.id]

def test_edit_keeps_position(service):
    service.save_person("a", PersonCreate(name="Ann"))
    _, second = service.save_person("a", PersonCreate(name="Ben"))
    service.save_person("a", PersonCreate(name="Cat"))

    club, _ = service.save_person("a", PersonCreate(name="Benjamin"), person_id=second.id)

    assert [p.name for p in club.members] == ["Ann", "Benjamin", "Cat"]

def test_edit_unknown_person(service):
    with pytest.raises(PersonNotFoundError):
        service.save_person("a", PersonCreate(name="Ghost"), person_id="nope")
    with pytest.raises(PersonNotFoundError):
        service.delete_person("a", "nope")

def test_delete_person(service):
    _, person = service.save_person("a", PersonCreate(name="Ada", role=Role.LEADER))
    club = service.delete_person("a", person.id)
    assert club.leaders == [] and club.members == []

# -------- Budget --------

def test_add_expense_without_event(service, store):
    club, expense = service.save_expense(
        "a", ExpenseCreate(name="Paint", amount=42.5, date=NOW, event_id="none")
    )
    assert expense.event_id is None
    assert [e.id for e in club.expenses] == [expense.id]
    assert store.clubs[0].expenses[0].amount == 42.5

def test_update_expense_links_event(service):
    _, expense = service.save_expense("a", ExpenseCreate(name="Paint", amount=10, date=NOW))
    club, updated = service.save_expense(
        "a", ExpenseCreate(name="Paint", amount=12, date=NOW, event_id="1"), expense_id=expense.id
    )

    assert updated.id == expense.id
    assert updated.event_id == "1"
    assert [e.amount for e in club.expenses] == [12]

def test_delete_expense(service):
    _, expense = service.save_expense("a", ExpenseCreate(name="Paint", amount=10, date=NOW))
    assert service.delete_expense("a", expense.id).expenses == []

    with pytest.raises(ExpenseNotFoundError):
        service.delete_expense("a", expense.id)

def test_set_monthly_budget(service, store):
    club = service.set_monthly_budget("a", BudgetUpdate(monthly_budget=750))
    assert club.monthly_budget == 750
    assert store.clubs[0].monthly_budget == 750

# -------- Profile --------

def test_update_profile(service, store):
    club = service.update_profile("a", ProfileUpdate(
        description="We paint every Thursday evening",
        resources=[ResourceIn(label="Discord", url="https://discord.example/art")],
    ))

    assert club.description == "We paint every Thursday evening"
    assert club.theme_color == "#8B5CF6"
    assert club.resources[0].label == "Discord"
    assert club.resources[0].id
    assert club.name == "Art Club" and club.slug == "art-club"

def test_update_profile_keeps_unset_fields(service):
    service.update_profile("a", ProfileUpdate(theme_color="#FF0000", logo="https://img.example/logo.png"))
    club = service.update_profile("a", ProfileUpdate(description="A brand new description"))

    assert club.theme_color == "#FF0000"
    assert club.logo == "https://img.example/logo.png"
