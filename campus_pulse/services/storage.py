"""
Key-value storage layer abstracting durable storage (SQLAlchemy) vs tab session storage (memory).
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campus_pulse.models import StorageEntry
from campus_pulse.services.errors import StorageQuotaExceededError, StorageWriteError

logger = logging.getLogger(__name__)


class KeyValueStorage:
    """String keys to string values, the shape of browser storage"""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError

    def keys(self) -> List[str]:
        raise NotImplementedError

    def clear(self) -> None:
        for key in self.keys():
            self.remove_item(key)


# -------- Durable storage --------

class SqlKeyValueStorage(KeyValueStorage):
    """Durable storage shared by every tab, one `storage_entries` row per key"""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get_item(self, key: str) -> Optional[str]:
        with self.session_factory() as db:
            entry = db.get(StorageEntry, key)
            return entry.value if entry else None

    def set_item(self, key: str, value: str) -> None:
        try:
            with self.session_factory() as db:
                entry = db.get(StorageEntry, key)
                if entry is None:
                    db.add(StorageEntry(key=key, value=value))
                else:
                    entry.value = value
                    entry.updated_at = datetime.utcnow()
                db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to write storage key {key}: {e}")
            raise StorageWriteError(f"Could not persist {key!r}") from e

    def remove_item(self, key: str) -> None:
        try:
            with self.session_factory() as db:
                db.query(StorageEntry).filter(StorageEntry.key == key).delete()
                db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to remove storage key {key}: {e}")
            raise StorageWriteError(f"Could not remove {key!r}") from e

    def keys(self) -> List[str]:
        with self.session_factory() as db:
            return [key for (key,) in db.query(StorageEntry.key).order_by(StorageEntry.key).all()]


# -------- Session storage --------

class MemoryKeyValueStorage(KeyValueStorage):
    """Tab-scoped storage; gone when the tab is discarded"""

    def __init__(self, quota: Optional[int] = None):
        # quota is in bytes of key + value text, like a browser's storage limit
        self.quota = quota
        self._items: Dict[str, str] = {}

    def _size_with(self, key: str, value: str) -> int:
        size = sum(len(k) + len(v) for k, v in self._items.items() if k != key)
        return size + len(key) + len(value)

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.quota is not None and self._size_with(key, value) > self.quota:
            raise StorageQuotaExceededError(f"Setting {key!r} exceeds the {self.quota} byte quota")
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._items)

    def clear(self) -> None:
        self._items.clear()
