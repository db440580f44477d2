import os

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 5000))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", None)

CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

API_PREFIX = os.getenv("API_PREFIX", "").rstrip("/")
SOCKETIO_PATH = os.getenv("SOCKETIO_PATH", "socket.io")

RELOAD = os.getenv("RELOAD", "false").lower() in ("1", "true", "yes")
