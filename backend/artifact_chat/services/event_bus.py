"""Fan-out of agent events to websocket listeners."""

import asyncio
import logging
from typing import Set

from fastapi import WebSocket

from artifact_chat.core.events import AgentEvent

logger = logging.getLogger(__name__)


class EventBus:
    def __init__(self):
        self.connections: Set[WebSocket] = set()
        self._lock = asyncio.Lock()

    @property
    def listener_count(self) -> int:
        return len(self.connections)

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        async with self._lock:
            self.connections.add(websocket)
        logger.info("Event listener connected (%d total)", self.listener_count)

    async def disconnect(self, websocket: WebSocket):
        async with self._lock:
            self.connections.discard(websocket)

    async def publish(self, event: AgentEvent) -> None:
        """Send one agent event to every listener, dropping dead sockets."""
        if not self.connections:
            return

        message = event.model_dump_json()
        stale = set()

        for ws in self.connections.copy():
            try:
                await ws.send_text(message)
            except Exception as e:
                logger.debug("Dropping event listener: %s", e)
                stale.add(ws)

        if stale:
            async with self._lock:
                self.connections -= stale


# Singleton instance
event_bus = EventBus()
