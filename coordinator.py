import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional, Tuple
from pydantic import BaseModel, ValidationError
import event_names
from logging_config import get_logger
from registry import Connection, ConnectionRegistry, RoomDirectory
from schemas.events import (
    INBOUND_EVENTS,
    AnswerEvent,
    ChatMessage,
    DisconnectEvent,
    ExistingUser,
    IceCandidateEvent,
    JoinRoomEvent,
    OfferEvent,
    RelayedAnswer,
    RelayedIceCandidate,
    RelayedOffer,
    SendMessageEvent,
    UserPresence,
)

logger = get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def isoformat_utc(moment: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a Z suffix."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class Emit:
    """One outbound event addressed to an explicit set of connection ids."""
    event: str
    payload: Any
    to: Tuple[str, ...]


class SessionCoordinator:
    """Room membership and signaling relay.

    Owns the connection registry and the room directory. Every public
    operation runs as one critical section and returns the outbound events it
    produced instead of sending them, so the transports decide how to deliver.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self.registry = ConnectionRegistry()
        self.rooms = RoomDirectory()
        self._clock = clock
        self._lock = threading.Lock()

    def handle(self, sender_id: str, event_name: str, data: Any = None) -> List[Emit]:
        """Validate a raw inbound event and route it to its operation.

        Unknown events and malformed payloads are logged and dropped; nothing
        is ever reported back to the sender.
        """
        model = INBOUND_EVENTS.get(event_name)
        if model is None:
            logger.warning(f"Dropping unknown event {event_name!r} from {sender_id}")
            return []
        try:
            event = model.model_validate(data if data is not None else {})
        except ValidationError as e:
            logger.warning(f"Dropping malformed {event_name} from {sender_id}: {e.error_count()} error(s): {e.errors(include_url=False)}")
            return []
        return self.dispatch(sender_id, event)

    def dispatch(self, sender_id: str, event: BaseModel) -> List[Emit]:
        if isinstance(event, JoinRoomEvent):
            return self.join(sender_id, event.roomId, event.userName)
        if isinstance(event, OfferEvent):
            return self.relay(sender_id, event_names.OFFER, event.offer, event.targetUserId)
        if isinstance(event, AnswerEvent):
            return self.relay(sender_id, event_names.ANSWER, event.answer, event.targetUserId)
        if isinstance(event, IceCandidateEvent):
            return self.relay(sender_id, event_names.ICE_CANDIDATE, event.candidate, event.targetUserId)
        if isinstance(event, SendMessageEvent):
            return self.chat(sender_id, event.message, event.roomId)
        if isinstance(event, DisconnectEvent):
            return self.disconnect(sender_id)
        raise TypeError(f"Unsupported event type: {type(event).__name__}")

    def join(self, sender_id: str, room_id: str, user_name: str) -> List[Emit]:
        if not _is_filled(room_id) or not _is_filled(user_name):
            logger.warning(f"Dropping join from {sender_id}: room id and user name are required")
            return []

        outbound: List[Emit] = []
        with self._lock:
            previous = self.registry.register(Connection(id=sender_id, name=user_name, room_id=room_id))
            if previous and previous.room_id != room_id:
                logger.info(f"Connection {sender_id} moving from room {previous.room_id} to {room_id}")
                outbound.extend(self._leave_room(previous))

            others = [member for member in self.rooms.members(room_id) if member != sender_id]
            self.rooms.add_member(room_id, sender_id)

            if others:
                presence = UserPresence(userId=sender_id, userName=user_name).model_dump()
                outbound.append(Emit(event_names.USER_JOINED, presence, tuple(others)))
            existing = [
                ExistingUser(id=member, name=self.registry.get(member).name).model_dump()
                for member in others
                if member in self.registry
            ]
            outbound.append(Emit(event_names.EXISTING_USERS, existing, (sender_id,)))

        logger.info(f"User {sender_id} ({user_name}) joined room {room_id} with {len(others)} other member(s)")
        return outbound

    def relay(self, sender_id: str, kind: str, payload: Any, target_id: str) -> List[Emit]:
        field = event_names.RELAY_PAYLOAD_FIELDS.get(kind)
        if field is None:
            raise ValueError(f"Not a relay event: {kind}")

        with self._lock:
            if target_id == sender_id or target_id not in self.registry:
                logger.debug(f"Dropping {kind} from {sender_id}: target {target_id} is not connected")
                return []
            if kind == event_names.OFFER:
                sender = self.registry.get(sender_id)
                message = RelayedOffer(offer=payload, fromUserId=sender_id, fromUserName=sender.name if sender else None)
            elif kind == event_names.ANSWER:
                message = RelayedAnswer(answer=payload, fromUserId=sender_id)
            else:
                message = RelayedIceCandidate(candidate=payload, fromUserId=sender_id)

        logger.debug(f"Relaying {kind} from {sender_id} to {target_id}")
        return [Emit(kind, message.model_dump(), (target_id,))]

    def chat(self, sender_id: str, message: str, room_id: str) -> List[Emit]:
        if not isinstance(message, str):
            logger.warning(f"Dropping chat from {sender_id}: message is not text")
            return []

        with self._lock:
            sender = self.registry.get(sender_id)
            if sender is None:
                logger.debug(f"Dropping chat from {sender_id}: sender has not joined a room")
                return []
            # room_id is taken from the client without a membership check
            members = self.rooms.members(room_id)
            timestamp = isoformat_utc(self._clock())

        if not members:
            logger.debug(f"Chat from {sender_id} to room {room_id} has no recipients")
            return []
        payload = ChatMessage(message=message, userName=sender.name, userId=sender_id, timestamp=timestamp).model_dump()
        logger.debug(f"Chat from {sender_id} to room {room_id}: {len(members)} recipient(s)")
        return [Emit(event_names.RECEIVE_MESSAGE, payload, tuple(members))]

    def disconnect(self, sender_id: str) -> List[Emit]:
        with self._lock:
            connection = self.registry.get(sender_id)
            if connection is None:
                logger.debug(f"Disconnect from {sender_id}, which never joined a room")
                return []
            outbound = self._leave_room(connection)
            self.registry.remove(sender_id)

        logger.info(f"User {sender_id} ({connection.name}) left room {connection.room_id}")
        return outbound

    def query_room_members(self, room_id: str) -> List[dict]:
        with self._lock:
            return [
                self.registry.get(member).as_user()
                for member in self.rooms.members(room_id)
                if member in self.registry
            ]

    def clear(self):
        with self._lock:
            dropped_connections, dropped_rooms = len(self.registry), len(self.rooms)
            self.registry.clear()
            self.rooms.clear()
        logger.info(f"Cleared {dropped_connections} connection(s) and {dropped_rooms} room(s)")

    def _leave_room(self, connection: Connection) -> List[Emit]:
        # Caller holds the lock; the registry entry must still resolve the name.
        self.rooms.remove_member(connection.room_id, connection.id)
        remaining = [member for member in self.rooms.members(connection.room_id) if member != connection.id]
        if not remaining:
            return []
        presence = UserPresence(userId=connection.id, userName=connection.name).model_dump()
        return [Emit(event_names.USER_LEFT, presence, tuple(remaining))]


def _is_filled(value: Optional[str]) -> bool:
    return isinstance(value, str) and bool(value.strip())


coordinator = SessionCoordinator()
