"""
Admin API routes - login state is per tab
"""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends

from campus_pulse.api.deps import get_club_service, get_store, get_timezone
from campus_pulse.schemas import (
    BudgetUpdate,
    Club,
    ClubRegister,
    EventCreate,
    ExpenseCreate,
    GalleryRemove,
    GalleryUpload,
    LoginRequest,
    PersonCreate,
    ProfileUpdate,
)
from campus_pulse.services import views
from campus_pulse.services.club_service import ClubService
from campus_pulse.services.data_store import DataStore
from campus_pulse.services.errors import CampusPulseError
from campus_pulse.services.session import SessionIdentity
from campus_pulse.utils.responses import (
    domain_error_response,
    dump,
    dump_all,
    public_club,
    success_response,
)
from campus_pulse.utils.security import get_session, get_tab_id, require_club

router = APIRouter()

# -------- Login --------

@router.post("/login")
async def login(
    credentials: LoginRequest,
    session: SessionIdentity = Depends(get_session)
):
    """Log this tab in as a club"""
    try:
        club = session.login(credentials.name, credentials.password)
    except CampusPulseError as e:
        return domain_error_response(e)
    return success_response(message=f"Welcome, {club.name}!", data=public_club(club))

@router.post("/register")
async def register(
    club_data: ClubRegister,
    session: SessionIdentity = Depends(get_session)
):
    """Register a new club and log this tab in as it"""
    try:
        club = session.register(club_data)
    except CampusPulseError as e:
        return domain_error_response(e)
    return success_response(message=f"Welcome, {club.name}!", data=public_club(club), status_code=201)

@router.post("/logout")
async def logout(session: SessionIdentity = Depends(get_session)):
    session.logout()
    return success_response(message="Logged out")

@router.get("/me")
async def whoami(session: SessionIdentity = Depends(get_session)):
    """The club logged in on this tab, or null"""
    club = session.current()
    return success_response(
        message="Session retrieved",
        data=public_club(club) if club else None
    )

# -------- Dashboard --------

@router.get("/dashboard")
async def dashboard(
    club: Club = Depends(require_club),
    store: DataStore = Depends(get_store),
    tz: ZoneInfo = Depends(get_timezone)
):
    """Club's events split by time, team roster and budget position"""
    now = datetime.now(timezone.utc)
    club_events = views.events_for_club(store.snapshot, club.id)
    upcoming, past = views.split_upcoming_past(club_events, now)
    return success_response(
        message="Dashboard retrieved",
        data={
            "club": public_club(club),
            "upcoming": dump_all(upcoming),
            "past": dump_all(past),
            "budget": dump(views.budget_summary(club, now, tz))
        }
    )

# -------- Events --------

@router.post("/events")
async def create_event(
    event_data: EventCreate,
    club: Club = Depends(require_club),
    tab_id: str = Depends(get_tab_id),
    service: ClubService = Depends(get_club_service)
):
    """Create a new event for the logged-in club"""
    try:
        event = service.create_event(club.id, event_data, origin=tab_id)
    except CampusPulseError as e:
        return domain_error_response(e)
    return success_response(message=f'"{event.title}" has been added.', data=dump(event), status_code=201)

@router.put("/events/{event_id}")
async def update_event(
    event_id: str,
    event_data: EventCreate,
    club: Club = Depends(require_club),
    tab_id: str = Depends(get_tab_id),
    service: ClubService = Depends(get_club_service)
):
    try:
        event = service.update_event(club.id, event_id, event_data, origin=tab_id)
    except CampusPulseError as e:
        return domain_error_response(e)
    return success_response(message=f'"{event.title}" has been updated.', data=dump(event))

@router.delete("/events/{event_id}")
async def delete_event(
    event_id: str,
    club: Club = Depends(require_club),
    tab_id: str = Depends(get_tab_id),
    service: ClubService = Depends(get_club_service)
):
    try:
        service.delete_event(club.id, event_id, origin=tab_id)
    except CampusPulseError as e:
        return domain_error_response(e)
    return success_response(message="Event deleted")

@router.post("/events/{event_id}/gallery")
async def add_gallery_images(
    event_id: str,
    upload: GalleryUpload,
    club: Club = Depends(require_club),
    tab_id: str = Depends(get_tab_id),
    service: ClubService = Depends(get_club_service)
):
    """Append images (URLs or data URLs) to an event's gallery"""
    try:
        event = service.add_gallery_images(club.id, event_id, upload.images, origin=tab_id)
    except CampusPulseError as e:
        return domain_error_response(e)
    return success_response(message=f"{len(upload.images)} image(s) added to the gallery.", data=dump(event))

@router.post("/events/{event_id}/gallery/remove")
async def remove_gallery_image(
    event_id: str,
    removal: GalleryRemove,
    club: Club = Depends(require_club),
    tab_id: str = Depends(get_tab_id),
    service: ClubService = Depends(get_club_service)
):
    try:
        event = service.remove_gallery_image(club.id, event_id, removal.image, origin=tab_id)
    except CampusPulseError as e:
        return domain_error_response(e)
    return success_response(message="Image deleted", data=dump(event))

# -------- Team --------

@router.post("/team")
async def add_person(
    person_data: PersonCreate,
    club: Club = Depends(require_club),
    session: SessionIdentity = Depends(get_session),
    service: ClubService = Depends(get_club_service)
):
    try:
        updated, person = service.save_person(club.id, person_data, origin=session.tab_id)
        session.remember(updated)
    except CampusPulseError as e:
        return domain_error_response(e)
    return success_response(message="Team member added", data=dump(person), status_code=201)

@router.put("/team/{person_id}")
async def update_person(
    person_id: str,
    person_data: PersonCreate,
    club: Club = Depends(require_club),
    session: SessionIdentity = Depends(get_session),
    service: ClubService = Depends(get_club_service)
):
    try:
        updated, person = service.save_person(club.id, person_data, person_id=person_id, origin=session.tab_id)
        session.remember(updated)
    except CampusPulseError as e:
        return domain_error_response(e)
    return success_response(message="Team member updated", data=dump(person))

@router.delete("/team/{person_id}")
async def delete_person(
    person_id: str,
    club: Club = Depends(require_club),
    session: SessionIdentity = Depends(get_session),
    service: ClubService = Depends(get_club_service)
):
    try:
        updated = service.delete_person(club.id, person_id, origin=session.tab_id)
        session.remember(updated)
    except CampusPulseError as e:
        return domain_error_response(e)
    return success_response(message="Team member deleted")

# -------- Budget --------

@router.get("/expenses")
async def list_expenses(
    club: Club = Depends(require_club),
    store: DataStore = Depends(get_store),
    tz: ZoneInfo = Depends(get_timezone)
):
    """Expenses newest first, with budget position and six-month history"""
    now = datetime.now(timezone.utc)
    club_events = views.events_for_club(store.snapshot, club.id)
    titles = views.expense_event_titles(club.expenses, club_events)
    return success_response(
        message="Expenses retrieved",
        data={
            "expenses": [
                {**dump(expense), "eventTitle": titles[expense.id]}
                for expense in views.sorted_expenses(club.expenses)
            ],
            "budget": dump(views.budget_summary(club, now, tz)),
            "history": dump_all(views.monthly_history(club.expenses, now, tz))
        }
    )

@router.post("/expenses")
async def add_expense(
    expense_data: ExpenseCreate,
    club: Club = Depends(require_club),
    session: SessionIdentity = Depends(get_session),
    service: ClubService = Depends(get_club_service)
):
    try:
        updated, expense = service.save_expense(club.id, expense_data, origin=session.tab_id)
        session.remember(updated)
    except CampusPulseError as e:
        return domain_error_response(e)
    return success_response(message="Expense added", data=dump(expense), status_code=201)

@router.put("/expenses/{expense_id}")
async def update_expense(
    expense_id: str,
    expense_data: ExpenseCreate,
    club: Club = Depends(require_club),
    session: SessionIdentity = Depends(get_session),
    service: ClubService = Depends(get_club_service)
):
    try:
        updated, expense = service.save_expense(
            club.id, expense_data, expense_id=expense_id, origin=session.tab_id
        )
        session.remember(updated)
    except CampusPulseError as e:
        return domain_error_response(e)
    return success_response(message="Expense updated", data=dump(expense))

@router.delete("/expenses/{expense_id}")
async def delete_expense(
    expense_id: str,
    club: Club = Depends(require_club),
    session: SessionIdentity = Depends(get_session),
    service: ClubService = Depends(get_club_service)
):
    try:
        updated = service.delete_expense(club.id, expense_id, origin=session.tab_id)
        session.remember(updated)
    except CampusPulseError as e:
        return domain_error_response(e)
    return success_response(message="Expense deleted")

@router.put("/budget")
async def set_budget(
    budget_data: BudgetUpdate,
    club: Club = Depends(require_club),
    session: SessionIdentity = Depends(get_session),
    service: ClubService = Depends(get_club_service)
):
    try:
        updated = service.set_monthly_budget(club.id, budget_data, origin=session.tab_id)
        session.remember(updated)
    except CampusPulseError as e:
        return domain_error_response(e)
    return success_response(
        message=f"Monthly budget set to {updated.monthly_budget:.2f}.",
        data=public_club(updated)
    )

# -------- Profile --------

@router.put("/profile")
async def update_profile(
    profile_data: ProfileUpdate,
    club: Club = Depends(require_club),
    session: SessionIdentity = Depends(get_session),
    service: ClubService = Depends(get_club_service)
):
    """Description, theme color, logo and resource links"""
    try:
        updated = service.update_profile(club.id, profile_data, origin=session.tab_id)
        session.remember(updated)
    except CampusPulseError as e:
        return domain_error_response(e)
    return success_response(message="Your club profile has been saved.", data=public_club(updated))
