"""WebSocket protocol configuration and constants."""

from __future__ import annotations

WS_ENDPOINT_PATH = "/api/live"

# Envelope keys
WS_KEY_TYPE = "type"
WS_KEY_CONFIG = "config"
WS_KEY_DATA = "data"
WS_KEY_ERROR = "error"
WS_KEY_AUDIO_DATA = "audioData"
WS_KEY_MIME_TYPE = "mimeType"

# connect.config keys
WS_CONFIG_VOICE_NAME = "voiceName"
WS_CONFIG_USER_NAME = "userName"
WS_CONFIG_TOPIC = "topic"
WS_CONFIG_API_KEY = "apiKey"

# Inbound message types
WS_MSG_CONNECT = "connect"
WS_MSG_AUDIO_INPUT = "audio-input"
WS_MSG_DISCONNECT = "disconnect"

# Outbound message types
WS_MSG_CONNECTED = "connected"
WS_MSG_DISCONNECTED = "disconnected"
WS_MSG_RELAY_EVENT = "gemini-message"
WS_MSG_ERROR = "error"

DEFAULT_AUDIO_MIME_TYPE = "audio/pcm;rate=16000"

# Close codes
WS_CLOSE_CLIENT_REQUEST_CODE = 1000
WS_CLOSE_IDLE_CODE = 4000
WS_CLOSE_BUSY_CODE = 4002
WS_CLOSE_MAX_DURATION_CODE = 4003

WS_CLOSE_IDLE_REASON = "idle timeout"
WS_CLOSE_MAX_DURATION_REASON = "max connection duration reached"

# Watchdog env names and defaults
ENV_WS_IDLE_TIMEOUT_S = "WS_IDLE_TIMEOUT_S"
ENV_WS_WATCHDOG_TICK_S = "WS_WATCHDOG_TICK_S"
ENV_WS_MAX_CONNECTION_DURATION_S = "WS_MAX_CONNECTION_DURATION_S"

DEFAULT_WS_IDLE_TIMEOUT_S = 300.0
DEFAULT_WS_WATCHDOG_TICK_S = 5.0
DEFAULT_WS_MAX_CONNECTION_DURATION_S = 0.0

# Client-facing error messages
WS_ERROR_MISSING_API_KEY = "Missing API key"
WS_ERROR_SERVER_AT_CAPACITY = "Server cannot accept new connections. Please try again later."

__all__ = [
    "WS_ENDPOINT_PATH",
    "WS_KEY_TYPE",
    "WS_KEY_CONFIG",
    "WS_KEY_DATA",
    "WS_KEY_ERROR",
    "WS_KEY_AUDIO_DATA",
    "WS_KEY_MIME_TYPE",
    "WS_CONFIG_VOICE_NAME",
    "WS_CONFIG_USER_NAME",
    "WS_CONFIG_TOPIC",
    "WS_CONFIG_API_KEY",
    "WS_MSG_CONNECT",
    "WS_MSG_AUDIO_INPUT",
    "WS_MSG_DISCONNECT",
    "WS_MSG_CONNECTED",
    "WS_MSG_DISCONNECTED",
    "WS_MSG_RELAY_EVENT",
    "WS_MSG_ERROR",
    "DEFAULT_AUDIO_MIME_TYPE",
    "WS_CLOSE_CLIENT_REQUEST_CODE",
    "WS_CLOSE_IDLE_CODE",
    "WS_CLOSE_BUSY_CODE",
    "WS_CLOSE_MAX_DURATION_CODE",
    "WS_CLOSE_IDLE_REASON",
    "WS_CLOSE_MAX_DURATION_REASON",
    "ENV_WS_IDLE_TIMEOUT_S",
    "ENV_WS_WATCHDOG_TICK_S",
    "ENV_WS_MAX_CONNECTION_DURATION_S",
    "DEFAULT_WS_IDLE_TIMEOUT_S",
    "DEFAULT_WS_WATCHDOG_TICK_S",
    "DEFAULT_WS_MAX_CONNECTION_DURATION_S",
    "WS_ERROR_MISSING_API_KEY",
    "WS_ERROR_SERVER_AT_CAPACITY",
]
