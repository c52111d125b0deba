"""
Real-time fan-out of forum events to WebSocket clients.

Delivery is best effort: an event goes out once to every matching
connection, and a connection whose send fails is dropped. Nothing is
queued or retried.
"""
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Set
from fastapi import Request, WebSocket


@dataclass
class Connection:
    websocket: WebSocket
    user_id: Optional[int] = None
    # Empty means the client wants every event
    post_ids: Set[int] = field(default_factory=set)

    def wants(self, post_id: Optional[int]) -> bool:
        return post_id is None or not self.post_ids or post_id in self.post_ids


class ConnectionRegistry:
    """Live connections for one server process.

    Created when the application starts and closed when it stops; routes
    reach it through ``get_registry``.
    """

    def __init__(self):
        self._connections: Dict[str, Connection] = {}

    def __len__(self):
        return len(self._connections)

    async def connect(self, websocket: WebSocket) -> str:
        await websocket.accept()
        connection_id = uuid.uuid4().hex
        self._connections[connection_id] = Connection(websocket=websocket)
        logging.info(f"New client connected: {connection_id}")
        return connection_id

    def disconnect(self, connection_id: str) -> Optional[int]:
        """Forget a connection and return the user bound to it, if any."""
        connection = self._connections.pop(connection_id, None)
        logging.info(f"Client disconnected: {connection_id}")
        return connection.user_id if connection else None

    def authenticate(self, connection_id: str, user_id: int):
        self._connections[connection_id].user_id = user_id

    def subscribe(self, connection_id: str, post_id: int):
        self._connections[connection_id].post_ids.add(post_id)

    def unsubscribe(self, connection_id: str, post_id: int):
        self._connections[connection_id].post_ids.discard(post_id)

    def online_users(self) -> Set[int]:
        return {c.user_id for c in self._connections.values() if c.user_id is not None}

    async def send(self, connection_id: str, event: str, data: Dict[str, Any]):
        connection = self._connections.get(connection_id)
        if connection is not None:
            await self._deliver(connection_id, connection, event, data)

    async def broadcast(self, event: str, data: Dict[str, Any],
                        post_id: Optional[int] = None, exclude: Optional[str] = None) -> int:
        """Send ``event`` to every connection interested in ``post_id``.

        Returns the number of connections the event reached.
        """
        delivered = 0
        for connection_id, connection in list(self._connections.items()):
            if connection_id == exclude or not connection.wants(post_id):
                continue
            if await self._deliver(connection_id, connection, event, data):
                delivered += 1
        logging.debug(f"Broadcast {event} to {delivered} client(s)")
        return delivered

    async def _deliver(self, connection_id: str, connection: Connection,
                       event: str, data: Dict[str, Any]) -> bool:
        try:
            await connection.websocket.send_json({"event": event, "data": data})
            return True
        except Exception as exc:
            logging.warning(f"Dropping client {connection_id} after failed send: {exc}")
            self._connections.pop(connection_id, None)
            return False

    async def close(self):
        for connection_id, connection in list(self._connections.items()):
            try:
                await connection.websocket.close()
            except Exception as exc:
                logging.debug(f"Client {connection_id} already gone on shutdown: {exc}")
        self._connections.clear()


def get_registry(request: Request) -> ConnectionRegistry:
    return request.app.state.registry
