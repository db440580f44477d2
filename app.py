from contextlib import asynccontextmanager
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
import socketio
import uuid
import json
import event_names
from constants import API_PREFIX, CORS_ORIGINS, LOG_FILE, LOG_LEVEL, SOCKETIO_PATH
from coordinator import coordinator
from logging_config import get_logger, setup_logging
from routers.health import health_router
from routers.rooms import rooms_router
from sockets import sio
from transport import transport

# Setup logging
setup_logging(log_level=LOG_LEVEL, log_file=LOG_FILE)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Signaling server starting")
    yield
    logger.info(f"Signaling server stopping with {len(transport)} live connection(s)")
    coordinator.clear()
    transport.clear()
    logger.info("Signaling server stopped")


app = FastAPI(title="WebRTC signaling relay", lifespan=lifespan)

# CORS for browser clients served from other origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router, prefix=API_PREFIX)
app.include_router(rooms_router, prefix=API_PREFIX)

logger.info("FastAPI application initialized")


def parse_frame(connection_id: str, data: str):
    """Decode a `{"event": ..., "data": ...}` text frame, or None if it is unusable."""
    try:
        frame = json.loads(data)
    except json.JSONDecodeError:
        logger.warning(f"Dropping non-JSON frame from connection {connection_id}")
        return None
    if not isinstance(frame, dict) or not isinstance(frame.get("event"), str):
        logger.warning(f"Dropping frame without an event name from connection {connection_id}")
        return None
    if frame["event"] == event_names.DISCONNECT:
        # only the transport may report a disconnect
        logger.warning(f"Dropping client-sent disconnect event from connection {connection_id}")
        return None
    return frame["event"], frame.get("data")


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """Plain WebSocket transport carrying the same events as Socket.IO.

    Every text frame, in both directions, is a JSON object
    `{"event": "<name>", "data": <payload>}`.
    """
    await websocket.accept()
    connection_id = str(uuid.uuid4())

    async def send(event, payload):
        await websocket.send_text(json.dumps({"event": event, "data": payload}))

    transport.register(connection_id, send)
    logger.info(f"User connected: {connection_id}")

    message_count = 0
    try:
        while True:
            data = await websocket.receive_text()
            message_count += 1
            logger.debug(f"Received message #{message_count} from connection {connection_id}")

            parsed = parse_frame(connection_id, data)
            if parsed is None:
                continue
            event_name, payload = parsed
            await transport.deliver(coordinator.handle(connection_id, event_name, payload))
    except WebSocketDisconnect:
        logger.info(f"User disconnected: {connection_id}")
    except Exception as e:
        logger.error(f"WebSocket error for connection {connection_id}: {e}", exc_info=True)
        try:
            await websocket.close()
        except RuntimeError as close_error:
            logger.debug(f"Error closing WebSocket: {close_error}")
    finally:
        # Abrupt loss and a clean close are the same leave
        transport.unregister(connection_id)
        await transport.deliver(coordinator.handle(connection_id, event_names.DISCONNECT))


# Socket.IO in front, everything else falls through to FastAPI
asgi_app = socketio.ASGIApp(sio, other_asgi_app=app, socketio_path=SOCKETIO_PATH)
