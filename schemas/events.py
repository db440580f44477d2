from pydantic import BaseModel, field_validator
from typing import Any, Dict, Optional, Type
import event_names


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be empty")
    return value


class JoinRoomEvent(BaseModel):
    roomId: str
    userName: str

    @field_validator("roomId", "userName")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _not_blank(value)


class OfferEvent(BaseModel):
    offer: Any
    targetUserId: str


class AnswerEvent(BaseModel):
    answer: Any
    targetUserId: str


class IceCandidateEvent(BaseModel):
    candidate: Any
    targetUserId: str


class SendMessageEvent(BaseModel):
    message: str
    roomId: str


class DisconnectEvent(BaseModel):
    pass


class ExistingUser(BaseModel):
    id: str
    name: str


class UserPresence(BaseModel):
    userId: str
    userName: str


class RelayedOffer(BaseModel):
    offer: Any
    fromUserId: str
    fromUserName: Optional[str] = None


class RelayedAnswer(BaseModel):
    answer: Any
    fromUserId: str


class RelayedIceCandidate(BaseModel):
    candidate: Any
    fromUserId: str


class ChatMessage(BaseModel):
    message: str
    userName: str
    userId: str
    timestamp: str


INBOUND_EVENTS: Dict[str, Type[BaseModel]] = {
    event_names.JOIN_ROOM: JoinRoomEvent,
    event_names.OFFER: OfferEvent,
    event_names.ANSWER: AnswerEvent,
    event_names.ICE_CANDIDATE: IceCandidateEvent,
    event_names.SEND_MESSAGE: SendMessageEvent,
    event_names.DISCONNECT: DisconnectEvent,
}
