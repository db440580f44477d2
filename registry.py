from dataclasses import dataclass
from typing import Dict, List, Optional, Set
from logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Connection:
    id: str
    name: str
    room_id: str

    def as_user(self) -> dict:
        return {"id": self.id, "name": self.name}


class ConnectionRegistry:
    """Connection id -> Connection for every connection that has joined a room."""

    def __init__(self):
        self._connections: Dict[str, Connection] = {}

    def register(self, connection: Connection) -> Optional[Connection]:
        """Store a connection, returning the entry it replaced (if any)."""
        previous = self._connections.get(connection.id)
        self._connections[connection.id] = connection
        logger.debug(f"Registered connection {connection.id} as {connection.name} in room {connection.room_id}")
        return previous

    def get(self, connection_id: str) -> Optional[Connection]:
        return self._connections.get(connection_id)

    def remove(self, connection_id: str) -> Optional[Connection]:
        connection = self._connections.pop(connection_id, None)
        if connection:
            logger.debug(f"Removed connection {connection_id} from registry")
        return connection

    def __contains__(self, connection_id: str) -> bool:
        return connection_id in self._connections

    def __len__(self) -> int:
        return len(self._connections)

    def clear(self):
        self._connections.clear()


class RoomDirectory:
    """Room id -> member connection ids. A room exists only while it has members."""

    def __init__(self):
        self._rooms: Dict[str, Set[str]] = {}

    def add_member(self, room_id: str, connection_id: str):
        members = self._rooms.get(room_id)
        if members is None:
            members = set()
            self._rooms[room_id] = members
            logger.info(f"Room {room_id} created")
        members.add(connection_id)
        logger.debug(f"Added {connection_id} to room {room_id} ({len(members)} members)")

    def remove_member(self, room_id: str, connection_id: str) -> bool:
        """Remove a member; returns True if the room was deleted because it became empty."""
        members = self._rooms.get(room_id)
        if members is None:
            return False
        members.discard(connection_id)
        logger.debug(f"Removed {connection_id} from room {room_id} ({len(members)} members)")
        if not members:
            del self._rooms[room_id]
            logger.info(f"Room {room_id} is empty, deleted")
            return True
        return False

    def members(self, room_id: str) -> List[str]:
        """Snapshot of the member ids of a room (empty for unknown rooms)."""
        return list(self._rooms.get(room_id, ()))

    def __len__(self) -> int:
        return len(self._rooms)

    def clear(self):
        self._rooms.clear()
