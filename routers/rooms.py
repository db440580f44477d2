from fastapi import APIRouter, Request
from coordinator import coordinator
from schemas.rooms import RoomUsersResponse
from logging_config import get_logger

logger = get_logger(__name__)

rooms_router = APIRouter(prefix="/rooms", tags=["rooms"])


@rooms_router.get("/{room_id}/users", response_model=RoomUsersResponse)
async def get_room_users(room_id: str, request: Request):
    """
    List the connections currently in a room.

    Unknown rooms are not an error: they report an empty `users` list.
    """
    client_host = request.client.host if request.client else "unknown"
    users = coordinator.query_room_members(room_id)
    logger.debug(f"Room users request for {room_id} from {client_host}: {len(users)} user(s)")
    return RoomUsersResponse(users=users)
