"""
Shared fixtures
"""

import pytest

from campus_pulse.services.data_store import DataStore
from campus_pulse.services.storage import MemoryKeyValueStorage
from tests.helpers import RecordingChannel, make_club, make_event

@pytest.fixture
def channel():
    return RecordingChannel()

@pytest.fixture
def storage():
    return MemoryKeyValueStorage()

@pytest.fixture
def store(storage, channel):
    """Opened store seeded with one club and its event plus an orphan event"""
    data_store = DataStore(
        storage,
        channels=[channel],
        seed_clubs=lambda: [make_club("a", name="Art Club", slug="art-club")],
        seed_events=lambda: [make_event("1", "a"), make_event("2", "missing")],
    )
    data_store.open()
    yield data_store
    data_store.close()
