from fastapi import APIRouter
from coordinator import isoformat_utc, utc_now
from schemas.rooms import HealthResponse

health_router = APIRouter(tags=["health"])


@health_router.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(status="OK", timestamp=isoformat_utc(utc_now()))
