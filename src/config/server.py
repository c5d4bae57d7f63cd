"""HTTP server configuration (env names and defaults)."""

from __future__ import annotations

ENV_HOST = "HOST"
ENV_PORT = "PORT"
ENV_CORS_ALLOW_ORIGINS = "CORS_ALLOW_ORIGINS"

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
DEFAULT_CORS_ALLOW_ORIGINS = "*"

SERVICE_MESSAGE = "Live relay backend"
SERVICE_VERSION = "1.0.0"

# HTTP routes
HTTP_ROOT_PATH = "/"
HTTP_HEALTH_PATH = "/api/health"
HTTP_GENERATE_PATH = "/api/generate"
HTTP_GENERATE_TTS_PATH = "/api/generate-tts"

__all__ = [
    "ENV_HOST",
    "ENV_PORT",
    "ENV_CORS_ALLOW_ORIGINS",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DEFAULT_CORS_ALLOW_ORIGINS",
    "SERVICE_MESSAGE",
    "SERVICE_VERSION",
    "HTTP_ROOT_PATH",
    "HTTP_HEALTH_PATH",
    "HTTP_GENERATE_PATH",
    "HTTP_GENERATE_TTS_PATH",
]
