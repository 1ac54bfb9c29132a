"""
Club administration: events, gallery, reviews, team, expenses and profile
"""

import logging
import secrets
from datetime import datetime, timezone, tzinfo
from typing import List, Optional, Tuple
from zoneinfo import ZoneInfo

from campus_pulse.core.config import settings
from campus_pulse.schemas import (
    BudgetUpdate,
    Club,
    Event,
    EventCreate,
    Expense,
    ExpenseCreate,
    Person,
    PersonCreate,
    ProfileUpdate,
    Resource,
    Review,
    ReviewCreate,
    Role,
)
from campus_pulse.services.data_store import DataStore
from campus_pulse.services.errors import (
    ClubNotFoundError,
    EventNotFoundError,
    ExpenseNotFoundError,
    PersonNotFoundError,
    ReviewNotAllowedError,
)
from campus_pulse.services.views import is_upcoming
from campus_pulse.utils.slug import unique_slug

logger = logging.getLogger(__name__)

DEFAULT_THEME_COLOR = "#8B5CF6"


def new_id() -> str:
    return secrets.token_urlsafe(8)


def default_image(slug: str) -> str:
    return f"https://picsum.photos/seed/{slug}/600/400"


def parse_tags(raw: Optional[str]) -> List[str]:
    """Comma separated list, blanks dropped"""
    if not raw:
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


class ClubService:
    """Mutation intents; each builds the next full collection and replaces it"""

    def __init__(self, store: DataStore, tz: Optional[tzinfo] = None):
        self.store = store
        self.tz = tz or ZoneInfo(settings.TIMEZONE)

    # -------- Helpers --------

    def _club(self, club_id: str) -> Club:
        club = next((c for c in self.store.clubs if c.id == club_id), None)
        if club is None:
            raise ClubNotFoundError(club_id)
        return club

    def _club_event(self, club: Club, event_id: str) -> Event:
        event = next(
            (e for e in self.store.events if e.id == event_id and e.club_id == club.id),
            None,
        )
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def _replace_club(self, updated: Club, origin: Optional[str]) -> Club:
        self.store.replace_clubs(
            [updated if c.id == updated.id else c for c in self.store.clubs],
            origin=origin,
        )
        return updated

    def _replace_event(self, updated: Event, origin: Optional[str]) -> Event:
        self.store.replace_events(
            [updated if e.id == updated.id else e for e in self.store.events],
            origin=origin,
        )
        return updated

    def _event_date(self, data: EventCreate) -> datetime:
        hours, minutes = (int(part) for part in data.time.split(":"))
        local = datetime(data.date.year, data.date.month, data.date.day, hours, minutes, tzinfo=self.tz)
        return local.astimezone(timezone.utc)

    # -------- Events --------

    def create_event(self, club_id: str, data: EventCreate, origin: Optional[str] = None) -> Event:
        club = self._club(club_id)
        taken = [e.slug for e in self.store.events if e.club_id == club.id]
        slug = unique_slug(data.title, taken)
        event = Event(
            id=new_id(),
            club_id=club.id,
            slug=slug,
            title=data.title,
            description=data.description,
            date=self._event_date(data),
            location=data.location,
            category=club.category,
            registration_link=data.registration_link,
            image=data.image or default_image(slug),
            tags=parse_tags(data.tags),
        )
        # newest first
        self.store.replace_events([event, *self.store.events], origin=origin)
        logger.info(f"Club {club.id} created event {event.slug}")
        return event

    def update_event(self, club_id: str, event_id: str, data: EventCreate, origin: Optional[str] = None) -> Event:
        club = self._club(club_id)
        event = self._club_event(club, event_id)
        taken = [e.slug for e in self.store.events if e.club_id == club.id and e.id != event.id]
        slug = unique_slug(data.title, taken)
        updated = event.model_copy(update={
            "slug": slug,
            "title": data.title,
            "description": data.description,
            "date": self._event_date(data),
            "location": data.location,
            "registration_link": data.registration_link,
            "image": data.image or default_image(slug),
            "tags": parse_tags(data.tags),
        })
        return self._replace_event(updated, origin)

    def delete_event(self, club_id: str, event_id: str, origin: Optional[str] = None) -> None:
        club = self._club(club_id)
        event = self._club_event(club, event_id)
        self.store.replace_events([e for e in self.store.events if e.id != event.id], origin=origin)
        logger.info(f"Club {club.id} deleted event {event.slug}")

    def add_gallery_images(self, club_id: str, event_id: str, images: List[str], origin: Optional[str] = None) -> Event:
        event = self._club_event(self._club(club_id), event_id)
        updated = event.model_copy(update={"gallery": [*event.gallery, *images]})
        return self._replace_event(updated, origin)

    def remove_gallery_image(self, club_id: str, event_id: str, image: str, origin: Optional[str] = None) -> Event:
        event = self._club_event(self._club(club_id), event_id)
        updated = event.model_copy(update={"gallery": [g for g in event.gallery if g != image]})
        return self._replace_event(updated, origin)

    # -------- Reviews --------

    def add_review(
        self,
        event_id: str,
        data: ReviewCreate,
        now: Optional[datetime] = None,
        origin: Optional[str] = None,
    ) -> Review:
        now = now or datetime.now(timezone.utc)
        event = next((e for e in self.store.events if e.id == event_id), None)
        if event is None:
            raise EventNotFoundError(event_id)
        if is_upcoming(event, now):
            raise ReviewNotAllowedError("Reviews open once the event has taken place.")
        review = Review(id=new_id(), date=now, **data.model_dump())
        self._replace_event(event.model_copy(update={"reviews": [*event.reviews, review]}), origin)
        return review

    # -------- Team --------

    def save_person(
        self,
        club_id: str,
        data: PersonCreate,
        person_id: Optional[str] = None,
        origin: Optional[str] = None,
    ) -> Tuple[Club, Person]:
        """Add a team member, or edit one; a role change moves them between leaders and members"""
        club = self._club(club_id)
        fields = data.model_dump()
        if person_id is None:
            person = Person(id=new_id(), **fields)
        else:
            existing = next((p for p in [*club.leaders, *club.members] if p.id == person_id), None)
            if existing is None:
                raise PersonNotFoundError(person_id)
            person = existing.model_copy(update=fields)

        leaders = [p for p in club.leaders if p.id != person.id]
        members = [p for p in club.members if p.id != person.id]
        if person.role == Role.LEADER:
            target, previous = leaders, club.leaders
        else:
            target, previous = members, club.members
        # an edit that keeps the role keeps its position
        index = next((i for i, p in enumerate(previous) if p.id == person.id), None)
        if index is None:
            target.append(person)
        else:
            target.insert(index, person)

        updated = club.model_copy(update={"leaders": leaders, "members": members})
        return self._replace_club(updated, origin), person

    def delete_person(self, club_id: str, person_id: str, origin: Optional[str] = None) -> Club:
        club = self._club(club_id)
        if not any(p.id == person_id for p in [*club.leaders, *club.members]):
            raise PersonNotFoundError(person_id)
        updated = club.model_copy(update={
            "leaders": [p for p in club.leaders if p.id != person_id],
            "members": [p for p in club.members if p.id != person_id],
        })
        return self._replace_club(updated, origin)

    # -------- Budget --------

    def save_expense(
        self,
        club_id: str,
        data: ExpenseCreate,
        expense_id: Optional[str] = None,
        origin: Optional[str] = None,
    ) -> Tuple[Club, Expense]:
        club = self._club(club_id)
        fields = data.model_dump()
        if fields.get("event_id") in ("", "none"):
            fields["event_id"] = None
        if expense_id is None:
            expense = Expense(id=new_id(), **fields)
            expenses = [*club.expenses, expense]
        else:
            existing = next((e for e in club.expenses if e.id == expense_id), None)
            if existing is None:
                raise ExpenseNotFoundError(expense_id)
            expense = Expense(id=existing.id, **fields)
            expenses = [expense if e.id == expense_id else e for e in club.expenses]
        updated = club.model_copy(update={"expenses": expenses})
        return self._replace_club(updated, origin), expense

    def delete_expense(self, club_id: str, expense_id: str, origin: Optional[str] = None) -> Club:
        club = self._club(club_id)
        if not any(e.id == expense_id for e in club.expenses):
            raise ExpenseNotFoundError(expense_id)
        updated = club.model_copy(update={"expenses": [e for e in club.expenses if e.id != expense_id]})
        return self._replace_club(updated, origin)

    def set_monthly_budget(self, club_id: str, data: BudgetUpdate, origin: Optional[str] = None) -> Club:
        club = self._club(club_id)
        updated = club.model_copy(update={"monthly_budget": data.monthly_budget})
        logger.info(f"Club {club.id} monthly budget set to {data.monthly_budget:.2f}")
        return self._replace_club(updated, origin)

    # -------- Profile --------

    def update_profile(self, club_id: str, data: ProfileUpdate, origin: Optional[str] = None) -> Club:
        """Name and slug are never touched, so the club's public URL stays put"""
        club = self._club(club_id)
        changes = {"theme_color": data.theme_color or club.theme_color or DEFAULT_THEME_COLOR}
        if data.description is not None:
            changes["description"] = data.description
        if data.logo is not None:
            changes["logo"] = data.logo
        if data.resources is not None:
            changes["resources"] = [
                Resource(id=r.id or new_id(), label=r.label, url=r.url) for r in data.resources
            ]
        return self._replace_club(club.model_copy(update=changes), origin)
