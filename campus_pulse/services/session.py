"""
Per-tab session identity: which club, if any, is logged in.

Each tab has its own session storage and its own holder, so two tabs can be
logged in as different clubs. Login state changes are announced on the
in-process ``loginChange`` channel only; they never reach other tabs.

Passwords are stored and compared as plaintext, exactly as the stored data
expects. Nothing here is meant to be secure.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Callable, Optional

from pydantic import ValidationError

from campus_pulse.core.config import settings
from campus_pulse.schemas import Club, ClubRegister
from campus_pulse.services.channels import ChangeChannel, StorageChange
from campus_pulse.services.data_store import DataStore
from campus_pulse.services.errors import AuthenticationError, DuplicateClubError, StorageWriteError
from campus_pulse.services.storage import KeyValueStorage, MemoryKeyValueStorage
from campus_pulse.utils.slug import unique_slug

logger = logging.getLogger(__name__)


class SessionIdentity:
    """The logged-in club of a single tab"""

    def __init__(
        self,
        tab_id: str,
        storage: KeyValueStorage,
        store: DataStore,
        channel: Optional[ChangeChannel] = None,
        key: str = settings.AUTH_SESSION_KEY,
    ):
        self.tab_id = tab_id
        self.storage = storage
        self.store = store
        self.channel = channel
        self.key = key

    def _held(self) -> Optional[Club]:
        raw = self.storage.get_item(self.key)
        if raw is None:
            return None
        try:
            return Club.model_validate_json(raw)
        except ValidationError:
            logger.warning(f"Discarding unreadable session for tab {self.tab_id}")
            self.storage.remove_item(self.key)
            return None

    def current(self) -> Optional[Club]:
        """The held club, refreshed from the store; None once the club is gone"""
        held = self._held()
        if held is None:
            return None
        fresh = next((c for c in self.store.clubs if c.id == held.id), None)
        if fresh is None:
            self.storage.remove_item(self.key)
            self._announce()
            return None
        if fresh.model_dump() != held.model_dump():
            try:
                self.remember(fresh)
            except StorageWriteError as e:
                # the held copy stays stale until a refresh fits
                logger.warning(f"Could not refresh session of tab {self.tab_id}: {e}")
        return fresh

    @property
    def is_logged_in(self) -> bool:
        return self.current() is not None

    def login(self, name: str, password: str) -> Club:
        """Exact match on name and password; the error never says which was wrong"""
        club = next(
            (c for c in self.store.clubs if c.name == name and c.password == password),
            None,
        )
        if club is None:
            logger.warning(f"Failed login for {name!r} in tab {self.tab_id}")
            raise AuthenticationError()
        self.remember(club)
        logger.info(f"Tab {self.tab_id} logged in as {club.name}")
        return club

    def register(self, data: ClubRegister) -> Club:
        """Create a club with empty rosters and log it in"""
        clubs = self.store.clubs
        if any(c.name == data.name for c in clubs):
            raise DuplicateClubError(data.name)

        slug = unique_slug(data.name, (c.slug for c in clubs))
        club_id = unique_slug(data.name, (c.id for c in clubs))
        club = Club(
            id=club_id,
            slug=slug,
            name=data.name,
            password=data.password,
            category=data.category,
            logo=data.logo,
            description=(
                f"Welcome to {data.name}! We are a new club focused on "
                f"{data.category.value}. Join us to learn more."
            ),
        )
        self.store.replace_clubs([*clubs, club], origin=self.tab_id)
        self.remember(club)
        logger.info(f"Registered club {club.name} ({club.slug}) from tab {self.tab_id}")
        return club

    def logout(self) -> None:
        self.storage.remove_item(self.key)
        self._announce()

    def remember(self, club: Club) -> None:
        """Hold `club` as the tab's identity, e.g. after its profile was edited"""
        self.storage.set_item(self.key, club.model_dump_json(by_alias=True, exclude_none=True))
        self._announce()

    def _announce(self) -> None:
        if self.channel is not None:
            self.channel.publish(StorageChange(key=self.key, origin=self.tab_id))


class TabSessions:
    """Session identity per open tab, least recently used evicted beyond `max_tabs`"""

    def __init__(
        self,
        store: DataStore,
        channel: Optional[ChangeChannel] = None,
        max_tabs: int = settings.SESSION_MAX_TABS,
        storage_factory: Callable[[], KeyValueStorage] = lambda: MemoryKeyValueStorage(
            quota=settings.SESSION_STORAGE_QUOTA
        ),
    ):
        self.store = store
        self.channel = channel
        self.max_tabs = max_tabs
        self.storage_factory = storage_factory
        self._sessions: "OrderedDict[str, SessionIdentity]" = OrderedDict()

    def get(self, tab_id: str) -> SessionIdentity:
        session = self._sessions.get(tab_id)
        if session is None:
            session = SessionIdentity(tab_id, self.storage_factory(), self.store, self.channel)
            self._sessions[tab_id] = session
            while len(self._sessions) > self.max_tabs:
                evicted, _ = self._sessions.popitem(last=False)
                logger.info(f"Evicted session of tab {evicted}")
        else:
            self._sessions.move_to_end(tab_id)
        return session

    def discard(self, tab_id: str) -> None:
        session = self._sessions.pop(tab_id, None)
        if session is not None:
            session.storage.clear()

    def __contains__(self, tab_id: str) -> bool:
        return tab_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
