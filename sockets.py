import socketio
import event_names
from constants import CORS_ORIGINS
from coordinator import coordinator
from logging_config import get_logger
from transport import transport

logger = get_logger(__name__)

# Socket.IO keeps the wire protocol of the browser client: one named event per
# message, payloads as plain JSON objects.
sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins="*" if CORS_ORIGINS == ["*"] else CORS_ORIGINS,
    # events from one client must be handled in arrival order, disconnect included
    async_handlers=False,
    logger=False,
    engineio_logger=False,
)


async def handle_event(sid: str, event_name: str, data=None) -> int:
    if event_name != event_names.DISCONNECT and not transport.is_connected(sid):
        logger.debug(f"Dropping {event_name} from {sid}: connection already closed")
        return 0
    outbound = coordinator.handle(sid, event_name, data)
    return await transport.deliver(outbound)


@sio.event
async def connect(sid, environ, auth=None):
    async def send(event, payload):
        await sio.emit(event, payload, to=sid)

    transport.register(sid, send)
    logger.info(f"User connected: {sid}")


@sio.event
async def disconnect(sid, *args):
    logger.info(f"User disconnected: {sid}")
    try:
        await handle_event(sid, event_names.DISCONNECT)
    finally:
        transport.unregister(sid)


@sio.on(event_names.JOIN_ROOM)
async def join_room(sid, data=None):
    await handle_event(sid, event_names.JOIN_ROOM, data)


@sio.on(event_names.OFFER)
async def offer(sid, data=None):
    await handle_event(sid, event_names.OFFER, data)


@sio.on(event_names.ANSWER)
async def answer(sid, data=None):
    await handle_event(sid, event_names.ANSWER, data)


@sio.on(event_names.ICE_CANDIDATE)
async def ice_candidate(sid, data=None):
    await handle_event(sid, event_names.ICE_CANDIDATE, data)


@sio.on(event_names.SEND_MESSAGE)
async def send_message(sid, data=None):
    await handle_event(sid, event_names.SEND_MESSAGE, data)
