"""
Shared data store for the clubs and events collections.

The store treats key-value storage as a small database with two tables,
each stored as one JSON array under a fixed key. The only mutations are
``replace_clubs`` and ``replace_events``: callers compute the next full
array and hand it over. After every write the store announces the changed
key on each of its channels; every store subscribed to those channels
(including this one) re-runs ``load()`` and passes the fresh snapshot to
its listeners.

Optional collections (``leaders``, ``tags``, ``reviews``, ...) are filled in
with empty lists when records are parsed, so nothing past this module has to
deal with absent fields.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from campus_pulse.core.config import settings
from campus_pulse.schemas import Club, Event
from campus_pulse.services.channels import ChangeChannel, StorageChange
from campus_pulse.services.errors import StorageCorruptError
from campus_pulse.services.seed import initial_clubs, initial_events
from campus_pulse.services.storage import KeyValueStorage

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

CORRUPT_POLICIES = ("seed", "raise")


@dataclass(frozen=True)
class Snapshot:
    """The collections as last read from (or written to) storage"""

    clubs: List[Club] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)
    loading: bool = False


Listener = Callable[[Snapshot], None]


class DataStore:
    def __init__(
        self,
        storage: KeyValueStorage,
        channels: Sequence[ChangeChannel] = (),
        clubs_key: str = settings.CLUBS_STORAGE_KEY,
        events_key: str = settings.EVENTS_STORAGE_KEY,
        seed_clubs: Callable[[], List[Club]] = initial_clubs,
        seed_events: Callable[[], List[Event]] = initial_events,
        corrupt_policy: str = settings.CORRUPT_DATA_POLICY,
    ):
        if corrupt_policy not in CORRUPT_POLICIES:
            raise ValueError(f"corrupt_policy must be one of {CORRUPT_POLICIES}, got {corrupt_policy!r}")
        self.storage = storage
        self.channels = list(channels)
        self.clubs_key = clubs_key
        self.events_key = events_key
        self.seed_clubs = seed_clubs
        self.seed_events = seed_events
        self.corrupt_policy = corrupt_policy

        self.loading = True
        self._snapshot = Snapshot(loading=True)
        self._listeners: List[Listener] = []
        self._unsubscribers: List[Callable[[], None]] = []

    # -------- Lifecycle --------

    def open(self) -> Snapshot:
        """Start listening for changes and read the collections for the first time"""
        if not self._unsubscribers:
            for channel in self.channels:
                self._unsubscribers.append(channel.subscribe(self._on_change))
        return self.load()

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self._listeners.clear()

    def __enter__(self) -> "DataStore":
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -------- Reads --------

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def clubs(self) -> List[Club]:
        return self._snapshot.clubs

    @property
    def events(self) -> List[Event]:
        return self._snapshot.events

    def load(self) -> Snapshot:
        """Read both collections, seeding whichever is missing"""
        clubs = self._read(self.clubs_key, Club, self.seed_clubs)
        events = self._read(self.events_key, Event, self.seed_events)
        self.loading = False
        self._snapshot = Snapshot(clubs=clubs, events=events)
        self._notify()
        return self._snapshot

    def _read(self, key: str, model: Type[T], seed: Callable[[], List[T]]) -> List[T]:
        raw = self.storage.get_item(key)
        if raw is None:
            items = seed()
            logger.info(f"No stored value for {key}, seeding {len(items)} records")
            self._write(key, model, items)
            return items

        try:
            return TypeAdapter(List[model]).validate_json(raw)
        except ValidationError as e:
            if self.corrupt_policy == "raise":
                raise StorageCorruptError(key, str(e)) from e
            items = seed()
            logger.warning(f"Stored value for {key} is corrupt, replacing it with {len(items)} seed records: {e}")
            self._write(key, model, items)
            return items

    # -------- Writes --------

    def replace_clubs(self, clubs: Sequence[Club], origin: Optional[str] = None) -> None:
        clubs = list(clubs)
        self._write(self.clubs_key, Club, clubs)
        self._snapshot = Snapshot(clubs=clubs, events=self._snapshot.events)
        self._broadcast(self.clubs_key, origin)

    def replace_events(self, events: Sequence[Event], origin: Optional[str] = None) -> None:
        events = list(events)
        self._write(self.events_key, Event, events)
        self._snapshot = Snapshot(clubs=self._snapshot.clubs, events=events)
        self._broadcast(self.events_key, origin)

    def _write(self, key: str, model: Type[T], items: List[T]) -> None:
        payload = TypeAdapter(List[model]).dump_json(items, by_alias=True, exclude_none=True)
        self.storage.set_item(key, payload.decode("utf-8"))

    # -------- Change notification --------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener` with every new snapshot; returns an unsubscribe callable"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _broadcast(self, key: str, origin: Optional[str]) -> None:
        change = StorageChange(key=key, origin=origin)
        for channel in self.channels:
            channel.publish(change)

    def _on_change(self, change: StorageChange) -> None:
        if change.key not in (self.clubs_key, self.events_key):
            return
        self.load()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._snapshot)
