"""
Public API routes - no login required
"""

from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Header, Query

from campus_pulse.api.deps import get_club_service, get_store, get_tab_sessions, get_timezone
from campus_pulse.schemas import ReviewCreate
from campus_pulse.services import views
from campus_pulse.services.club_service import ClubService
from campus_pulse.services.data_store import DataStore
from campus_pulse.services.errors import CampusPulseError
from campus_pulse.services.session import TabSessions
from campus_pulse.utils.responses import (
    domain_error_response,
    dump,
    dump_all,
    not_found_error,
    public_club,
    success_response,
)
from campus_pulse.utils.security import TAB_HEADER

router = APIRouter()

@router.get("/health")
async def health_check(store: DataStore = Depends(get_store)):
    """Health check endpoint"""
    return {"status": "ok", "loading": store.loading}

@router.get("/events")
async def list_events(
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[date] = Query(None),
    store: DataStore = Depends(get_store),
    tz: ZoneInfo = Depends(get_timezone)
):
    """Home feed: every filter applies, soonest first"""
    snapshot = store.snapshot
    events = views.filter_events(snapshot, search, category, date_from, date_to, tz)
    known = views.clubs_by_id(snapshot.clubs)

    return success_response(
        message="Events retrieved successfully",
        data={
            "events": [
                {**dump(event), "clubName": known[event.club_id].name, "clubSlug": known[event.club_id].slug}
                for event in events
            ],
            "featured_clubs": [public_club(c) for c in views.featured_clubs(snapshot.clubs)],
            "loading": snapshot.loading
        }
    )

@router.get("/events/calendar")
async def events_calendar(
    store: DataStore = Depends(get_store),
    tz: ZoneInfo = Depends(get_timezone)
):
    """Visible events grouped by local day"""
    days = views.events_by_day(views.visible_events(store.snapshot), tz)
    return success_response(
        message="Calendar retrieved successfully",
        data={day: dump_all(events) for day, events in days.items()}
    )

@router.get("/clubs")
async def list_clubs(
    search: Optional[str] = Query(None),
    store: DataStore = Depends(get_store)
):
    """Club directory"""
    clubs = views.search_clubs(store.clubs, search)
    return success_response(
        message="Clubs retrieved successfully",
        data=[public_club(c) for c in clubs]
    )

@router.get("/clubs/{club_slug}")
async def get_club(
    club_slug: str,
    store: DataStore = Depends(get_store)
):
    """Club page with its upcoming and past events"""
    snapshot = store.snapshot
    club = views.find_club_by_slug(snapshot, club_slug)
    if not club:
        raise not_found_error("Club")

    now = datetime.now(timezone.utc)
    upcoming, past = views.split_upcoming_past(views.events_for_club(snapshot, club.id), now)

    return success_response(
        message="Club retrieved successfully",
        data={
            "club": public_club(club),
            "upcoming": dump_all(upcoming),
            "past": dump_all(past)
        }
    )

@router.get("/clubs/{club_slug}/events/{event_slug}")
async def get_event(
    club_slug: str,
    event_slug: str,
    store: DataStore = Depends(get_store),
    sessions: TabSessions = Depends(get_tab_sessions),
    tab_id: Optional[str] = Header(None, alias=TAB_HEADER)
):
    """Event page: details, rating and reviews"""
    snapshot = store.snapshot
    club = views.find_club_by_slug(snapshot, club_slug)
    if not club:
        raise not_found_error("Club")
    event = views.find_event(snapshot, club, event_slug)
    if not event:
        raise not_found_error("Event")

    logged_in = sessions.get(tab_id).current() if tab_id and tab_id in sessions else None
    now = datetime.now(timezone.utc)

    return success_response(
        message="Event retrieved successfully",
        data={
            "event": dump(event),
            "club": public_club(club),
            "is_past": not views.is_upcoming(event, now),
            "average_rating": views.average_rating(event.reviews),
            "reviews": dump_all(views.sorted_reviews(event.reviews)),
            "is_club_admin": logged_in is not None and logged_in.id == event.club_id
        }
    )

@router.post("/clubs/{club_slug}/events/{event_slug}/reviews")
async def submit_review(
    club_slug: str,
    event_slug: str,
    review_data: ReviewCreate,
    store: DataStore = Depends(get_store),
    service: ClubService = Depends(get_club_service),
    tab_id: Optional[str] = Header(None, alias=TAB_HEADER)
):
    """Leave a review on an event that has already happened"""
    snapshot = store.snapshot
    club = views.find_club_by_slug(snapshot, club_slug)
    if not club:
        raise not_found_error("Club")
    event = views.find_event(snapshot, club, event_slug)
    if not event:
        raise not_found_error("Event")

    try:
        review = service.add_review(event.id, review_data, origin=tab_id)
    except CampusPulseError as e:
        return domain_error_response(e)

    return success_response(
        message="Review submitted. Thank you for your feedback.",
        data=dump(review),
        status_code=201
    )
