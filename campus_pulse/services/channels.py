"""
Change notification channels.

Every write to a stored collection is announced on two channels:

- ``InProcessChannel``: the same-tab custom event (``storageChange``).
  Delivery is synchronous, so a listener has re-read the store before ``publish`` returns.
- ``CrossTabChannel``: the equivalent of the browser ``storage`` event. The
  writing tab is excluded and delivery is scheduled on the running event
  loop, so other tabs hear about the change some time later.

Login state uses ``SameTabChannel`` instead: in-process delivery plus a
``login`` message to the acting tab's own WebSocket, never to other tabs.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Awaitable, Callable, List, Optional, Set

if TYPE_CHECKING:
    from campus_pulse.api.ws import WebSocketManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StorageChange:
    key: str
    origin: Optional[str] = None  # tab id that made the write


Handler = Callable[[StorageChange], None]


class ChangeChannel:
    """Publish/subscribe for storage change signals"""

    def __init__(self, name: str):
        self.name = name
        self._handlers: List[Handler] = []

    def subscribe(self, handler: Handler) -> Callable[[], None]:
        """Register a handler; returns a callable that removes it again"""
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def publish(self, change: StorageChange) -> None:
        raise NotImplementedError

    def _deliver(self, change: StorageChange) -> None:
        # handlers may unsubscribe while being called
        for handler in list(self._handlers):
            handler(change)

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def close(self) -> None:
        self._handlers.clear()


class InProcessChannel(ChangeChannel):
    """Same-tab event bus"""

    def publish(self, change: StorageChange) -> None:
        logger.debug(f"{self.name}: {change.key} changed")
        self._deliver(change)


class SocketChannel(ChangeChannel):
    """A channel that also pushes its signals out over tab WebSockets, best effort"""

    message_type = "storage"

    def __init__(self, websocket_manager: "WebSocketManager", name: str):
        super().__init__(name)
        self.websocket_manager = websocket_manager
        self._pending: Set[asyncio.Task] = set()

    def _message(self, change: StorageChange) -> dict:
        return {
            "type": self.message_type,
            "key": change.key,
            "timestamp": datetime.utcnow().isoformat()
        }

    def _schedule(self, send: Callable[[], Awaitable[None]], change: StorageChange) -> None:
        # `send` builds the coroutine only once a loop is known to be running
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(f"No running event loop, {self.name} signal for {change.key} dropped")
            return
        task = loop.create_task(send())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def close(self) -> None:
        super().close()
        for task in list(self._pending):
            task.cancel()
        self._pending.clear()


class CrossTabChannel(SocketChannel):
    """Storage signals to and from the other open tabs, over their WebSockets"""

    def __init__(self, websocket_manager: "WebSocketManager", name: str = "storage"):
        super().__init__(websocket_manager, name)

    def publish(self, change: StorageChange) -> None:
        """Tell every tab except the writer"""
        message = self._message(change)
        self._schedule(
            lambda: self.websocket_manager.broadcast(message, exclude=change.origin),
            change,
        )

    def receive(self, change: StorageChange) -> None:
        """A tab reported a change: refresh local subscribers and relay to the other tabs"""
        logger.info(f"Cross-tab change for {change.key} from tab {change.origin}")
        self._deliver(change)
        self.publish(change)


class SameTabChannel(SocketChannel):
    """In-process delivery, plus a notice to the writing tab's own WebSocket.

    Used for ``loginChange``: the tab that logged in or out re-reads its
    session, and no other tab hears about it.
    """

    message_type = "login"

    def publish(self, change: StorageChange) -> None:
        self._deliver(change)
        if change.origin is None:
            return
        message = self._message(change)
        self._schedule(
            lambda: self.websocket_manager.send_to_tab(change.origin, message),
            change,
        )
