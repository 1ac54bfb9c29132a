"""
WebSocket manager for cross-tab storage change signals
"""

import json
import logging
from typing import Dict, List, Optional
from fastapi import APIRouter, Request, WebSocket, WebSocketDisconnect

from campus_pulse.services.channels import StorageChange

logger = logging.getLogger(__name__)

class WebSocketManager:
    """Manages one WebSocket connection per open tab"""

    def __init__(self):
        # tab_id -> websocket
        self.active_connections: Dict[str, WebSocket] = {}

    async def connect(self, websocket: WebSocket, tab_id: str):
        """Accept WebSocket connection and register the tab"""
        await websocket.accept()
        self.active_connections[tab_id] = websocket
        logger.info(f"Tab {tab_id} connected. Total connections: {len(self.active_connections)}")

    def disconnect(self, tab_id: str, websocket: Optional[WebSocket] = None) -> bool:
        """Remove a tab's connection; a stale socket never evicts a newer one.

        Returns whether the tab's current connection was removed.
        """
        current = self.active_connections.get(tab_id)
        if current is None or (websocket is not None and current is not websocket):
            return False
        del self.active_connections[tab_id]
        logger.info(f"Tab {tab_id} disconnected. Remaining connections: {len(self.active_connections)}")
        return True

    async def send_personal_message(self, message: dict, websocket: WebSocket):
        """Send message to specific WebSocket"""
        try:
            await websocket.send_text(json.dumps(message))
        except Exception as e:
            logger.error(f"Error sending personal message: {e}")

    async def send_to_tab(self, tab_id: str, message: dict):
        """Send a message to one tab, if it is connected"""
        websocket = self.active_connections.get(tab_id)
        if websocket is None:
            logger.debug(f"Tab {tab_id} not connected, {message.get('type')} message dropped")
            return
        await self.send_personal_message(message, websocket)

    async def broadcast(self, message: dict, exclude: Optional[str] = None):
        """Send a message to every connected tab except `exclude`"""
        # Copy to avoid modification during iteration
        connections = [
            (tab_id, websocket)
            for tab_id, websocket in self.active_connections.items()
            if tab_id != exclude
        ]
        if not connections:
            logger.debug(f"No other tabs to notify for {message.get('key')}")
            return

        disconnected = []
        for tab_id, websocket in connections:
            try:
                await websocket.send_text(json.dumps(message))
            except Exception as e:
                logger.error(f"Error broadcasting to tab {tab_id}: {e}")
                disconnected.append((tab_id, websocket))

        for tab_id, websocket in disconnected:
            self.disconnect(tab_id, websocket)

    def get_connection_count(self) -> int:
        return len(self.active_connections)

    def get_tab_ids(self) -> List[str]:
        return list(self.active_connections)

# Router for WebSocket endpoints
router = APIRouter()

@router.websocket("/tabs/{tab_id}")
async def websocket_endpoint(websocket: WebSocket, tab_id: str):
    """Per-tab channel: storage change signals out, pings and relayed changes in"""
    state = websocket.app.state
    manager: WebSocketManager = state.websocket_manager

    await manager.connect(websocket, tab_id)

    try:
        welcome_message = {
            "type": "connection",
            "tab_id": tab_id,
            "connection_count": manager.get_connection_count()
        }
        await manager.send_personal_message(welcome_message, websocket)

        while True:
            data = await websocket.receive_text()
            try:
                client_message = json.loads(data)
            except json.JSONDecodeError:
                logger.warning(f"Invalid JSON received from tab {tab_id}: {data}")
                continue

            message_type = client_message.get("type")
            if message_type == "ping":
                pong_message = {
                    "type": "pong",
                    "timestamp": client_message.get("timestamp")
                }
                await manager.send_personal_message(pong_message, websocket)
            elif message_type == "storage" and client_message.get("key"):
                state.cross_tab_channel.receive(
                    StorageChange(key=client_message["key"], origin=tab_id)
                )

    except WebSocketDisconnect:
        pass
    finally:
        # Closing the tab ends its session storage; a replaced socket closing late does not
        if manager.disconnect(tab_id, websocket):
            state.tab_sessions.discard(tab_id)

@router.get("/stats")
async def websocket_stats(request: Request):
    """Get WebSocket connection statistics (for debugging)"""
    manager: WebSocketManager = request.app.state.websocket_manager
    return {
        "total_connections": manager.get_connection_count(),
        "tab_ids": manager.get_tab_ids()
    }
