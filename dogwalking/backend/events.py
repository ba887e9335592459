"""Publication of friends-met events to websocket subscribers."""

from __future__ import annotations

import logging

from fastapi import WebSocket

from dogwalking.backend.models import MetFriends

logger = logging.getLogger(__name__)


class FriendsEventHub:
    def __init__(self) -> None:
        self._connections: set[WebSocket] = set()

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._connections.add(websocket)

    def disconnect(self, websocket: WebSocket) -> None:
        self._connections.discard(websocket)

    @property
    def subscriber_count(self) -> int:
        return len(self._connections)

    async def publish(self, event: MetFriends) -> None:
        logger.info("Met friends: %s", ", ".join(event.friends))
        payload = {"type": "friends.met", "friends": list(event.friends)}
        stale_connections: list[WebSocket] = []
        for websocket in list(self._connections):
            try:
                await websocket.send_json(payload)
            except RuntimeError:
                stale_connections.append(websocket)
        for websocket in stale_connections:
            self.disconnect(websocket)
