"""
Builders and fakes shared by the test modules
"""

from datetime import datetime, timezone
from typing import List

from campus_pulse.schemas import Category, Club, Event
from campus_pulse.services.channels import ChangeChannel, StorageChange

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)

class RecordingChannel(ChangeChannel):
    """Delivers synchronously like the in-process bus and remembers every message"""

    def __init__(self, name: str = "fake"):
        super().__init__(name)
        self.published: List[StorageChange] = []

    def publish(self, change: StorageChange) -> None:
        self.published.append(change)
        self._deliver(change)

    def inject(self, change: StorageChange) -> None:
        """Simulate a signal arriving from somewhere else"""
        self._deliver(change)

def make_club(club_id: str = "a", name: str = None, **fields) -> Club:
    name = name or f"Club {club_id.upper()}"
    return Club(
        id=club_id,
        slug=fields.pop("slug", club_id),
        name=name,
        password=fields.pop("password", "secret"),
        category=fields.pop("category", Category.TECH),
        **fields
    )

def make_event(event_id: str = "1", club_id: str = "a", date: datetime = NOW, **fields) -> Event:
    return Event(
        id=event_id,
        club_id=club_id,
        slug=fields.pop("slug", f"event-{event_id}"),
        title=fields.pop("title", f"Event {event_id}"),
        description=fields.pop("description", "A campus event for everyone"),
        date=date,
        location=fields.pop("location", "Main Hall"),
        category=fields.pop("category", Category.TECH),
        registration_link=fields.pop("registration_link", "#"),
        image=fields.pop("image", "https://picsum.photos/seed/test/600/400"),
        **fields
    )
