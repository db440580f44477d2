from pydantic import BaseModel


class RoomUser(BaseModel):
    id: str
    name: str


class RoomUsersResponse(BaseModel):
    users: list[RoomUser]


class HealthResponse(BaseModel):
    status: str
    timestamp: str
