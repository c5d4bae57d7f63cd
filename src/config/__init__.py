"""Configuration module exports (env names and defaults only)."""

from .websocket import WS_ENDPOINT_PATH
from .server import DEFAULT_PORT, HTTP_HEALTH_PATH

__all__ = [
    "DEFAULT_PORT",
    "HTTP_HEALTH_PATH",
    "WS_ENDPOINT_PATH",
]
