import json
import logging
from typing import Dict, Optional
from fastapi import WebSocket

logger = logging.getLogger(__name__)

LOCATION_UPDATE = "location_update"

# WebSocket connection manager
class ConnectionManager:
    """
    Registry of live websocket sessions for one process.

    Location updates are fanned out to every other session as-is; there is
    no per-guardian scoping and no delivery guarantee.
    """

    def __init__(self):
        self.active_connections: Dict[str, WebSocket] = {}

    async def connect(self, websocket: WebSocket, session_id: str):
        await websocket.accept()
        self.active_connections[session_id] = websocket
        logger.info(f"WebSocket connected: {session_id}")

    def disconnect(self, session_id: str, websocket: Optional[WebSocket] = None):
        """Drop a session; with a socket given, only if it is still the registered one."""
        current = self.active_connections.get(session_id)
        if current is None:
            return
        # A reconnect under the same id replaces the socket; the stale one must not evict it
        if websocket is not None and current is not websocket:
            return
        del self.active_connections[session_id]
        logger.info(f"WebSocket disconnected: {session_id}")

    async def broadcast(self, message: str, exclude: Optional[str] = None) -> int:
        disconnected = []
        delivered = 0
        for session_id, websocket in list(self.active_connections.items()):
            if session_id == exclude:
                continue
            try:
                await websocket.send_text(message)
                delivered += 1
            except Exception as e:
                logger.warning(f"Error broadcasting to {session_id}: {e}")
                disconnected.append((session_id, websocket))

        # Clean up disconnected clients
        for session_id, websocket in disconnected:
            self.disconnect(session_id, websocket)

        return delivered

    async def handle_message(self, session_id: str, raw: str) -> bool:
        """Relay a location update from one session; anything else is dropped."""
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            logger.debug(f"Dropping malformed message from {session_id}")
            return False

        if not isinstance(data, dict) or data.get("type") != LOCATION_UPDATE:
            return False

        # Forward the original text untouched
        await self.broadcast(raw, exclude=session_id)
        return True

    async def close_all(self):
        for session_id, websocket in list(self.active_connections.items()):
            try:
                await websocket.close()
            except Exception as e:
                logger.debug(f"Error closing {session_id}: {e}")
            self.disconnect(session_id, websocket)
