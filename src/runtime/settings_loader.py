"""Environment parsing for runtime settings."""

from __future__ import annotations

import os
import logging
from pathlib import Path

from src.state.settings import (
    AppSettings,
    ModelSettings,
    LimitsSettings,
    PromptSettings,
    ServerSettings,
    SynthesisSettings,
    WebSocketSettings,
)
from src.config.server import (
    ENV_HOST,
    ENV_PORT,
    DEFAULT_HOST,
    DEFAULT_PORT,
    ENV_CORS_ALLOW_ORIGINS,
    DEFAULT_CORS_ALLOW_ORIGINS,
)
from src.config.models import (
    ENV_GEMINI_MODEL,
    ENV_GEMINI_TTS_MODEL,
    DEFAULT_GEMINI_MODEL,
    ENV_GEMINI_LIVE_MODEL,
    DEFAULT_GEMINI_TTS_MODEL,
    DEFAULT_GEMINI_LIVE_MODEL,
)
from src.config.prompts import (
    DEFAULT_TOPIC,
    ENV_DEFAULT_TOPIC,
    DEFAULT_USER_NAME,
    ENV_DEFAULT_USER_NAME,
    ENV_SYSTEM_INSTRUCTION_FILE,
    DEFAULT_SYSTEM_INSTRUCTION_TEMPLATE,
)
from src.config.synthesis import (
    DEFAULT_VOICE_NAME,
    ENV_LOCAL_TTS_BINARY,
    ENV_LOCAL_TTS_ENABLED,
    ENV_DEFAULT_VOICE_NAME,
    ENV_TTS_PRIMARY_TIMEOUT_S,
    DEFAULT_LOCAL_TTS_ENABLED,
    DEFAULT_TTS_PRIMARY_TIMEOUT_S,
)
from src.config.limits import (
    ENV_WS_MESSAGE_WINDOW_SECONDS,
    ENV_MAX_CONCURRENT_CONNECTIONS,
    ENV_WS_MAX_MESSAGES_PER_WINDOW,
    DEFAULT_WS_MESSAGE_WINDOW_SECONDS,
    DEFAULT_MAX_CONCURRENT_CONNECTIONS,
    DEFAULT_WS_MAX_MESSAGES_PER_WINDOW,
)
from src.config.websocket import (
    ENV_WS_IDLE_TIMEOUT_S,
    ENV_WS_WATCHDOG_TICK_S,
    DEFAULT_WS_IDLE_TIMEOUT_S,
    DEFAULT_WS_WATCHDOG_TICK_S,
    ENV_WS_MAX_CONNECTION_DURATION_S,
    DEFAULT_WS_MAX_CONNECTION_DURATION_S,
)

logger = logging.getLogger(__name__)


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _csv_env(name: str, default: str) -> tuple[str, ...]:
    items = [item.strip() for item in _str_env(name, default).split(",")]
    return tuple(item for item in items if item)


def _load_server_settings() -> ServerSettings:
    return ServerSettings(
        host=_str_env(ENV_HOST, DEFAULT_HOST),
        port=_int_env(ENV_PORT, DEFAULT_PORT),
        cors_allow_origins=_csv_env(ENV_CORS_ALLOW_ORIGINS, DEFAULT_CORS_ALLOW_ORIGINS),
    )


def _load_model_settings() -> ModelSettings:
    return ModelSettings(
        text_model=_str_env(ENV_GEMINI_MODEL, DEFAULT_GEMINI_MODEL),
        live_model=_str_env(ENV_GEMINI_LIVE_MODEL, DEFAULT_GEMINI_LIVE_MODEL),
        tts_model=_str_env(ENV_GEMINI_TTS_MODEL, DEFAULT_GEMINI_TTS_MODEL),
    )


def _load_instruction_template() -> str:
    path_raw = (os.getenv(ENV_SYSTEM_INSTRUCTION_FILE) or "").strip()
    if not path_raw:
        return DEFAULT_SYSTEM_INSTRUCTION_TEMPLATE
    path = Path(path_raw).expanduser()
    try:
        text = path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise ValueError(f"{ENV_SYSTEM_INSTRUCTION_FILE} points to an unreadable file: {path} ({exc})") from exc
    if not text:
        raise ValueError(f"{ENV_SYSTEM_INSTRUCTION_FILE} points to an empty file: {path}")
    return text


def _load_prompt_settings() -> PromptSettings:
    return PromptSettings(
        system_instruction_template=_load_instruction_template(),
        default_topic=_str_env(ENV_DEFAULT_TOPIC, DEFAULT_TOPIC),
        default_user_name=_str_env(ENV_DEFAULT_USER_NAME, DEFAULT_USER_NAME),
    )


def _load_synthesis_settings() -> SynthesisSettings:
    return SynthesisSettings(
        default_voice=_str_env(ENV_DEFAULT_VOICE_NAME, DEFAULT_VOICE_NAME),
        primary_timeout_s=max(0.0, _float_env(ENV_TTS_PRIMARY_TIMEOUT_S, DEFAULT_TTS_PRIMARY_TIMEOUT_S)),
        local_enabled=_bool_env(ENV_LOCAL_TTS_ENABLED, DEFAULT_LOCAL_TTS_ENABLED),
        local_binary=_str_env(ENV_LOCAL_TTS_BINARY, ""),
    )


def _load_limits_settings() -> LimitsSettings:
    max_connections = _int_env(ENV_MAX_CONCURRENT_CONNECTIONS, DEFAULT_MAX_CONCURRENT_CONNECTIONS)
    msg_window = _float_env(ENV_WS_MESSAGE_WINDOW_SECONDS, DEFAULT_WS_MESSAGE_WINDOW_SECONDS)
    msg_limit = _int_env(ENV_WS_MAX_MESSAGES_PER_WINDOW, DEFAULT_WS_MAX_MESSAGES_PER_WINDOW)

    return LimitsSettings(
        max_concurrent_connections=max(1, max_connections),
        ws_message_window_seconds=msg_window,
        ws_max_messages_per_window=msg_limit,
    )


def _load_websocket_settings() -> WebSocketSettings:
    return WebSocketSettings(
        idle_timeout_s=_float_env(ENV_WS_IDLE_TIMEOUT_S, DEFAULT_WS_IDLE_TIMEOUT_S),
        watchdog_tick_s=_float_env(ENV_WS_WATCHDOG_TICK_S, DEFAULT_WS_WATCHDOG_TICK_S),
        max_connection_duration_s=_float_env(ENV_WS_MAX_CONNECTION_DURATION_S, DEFAULT_WS_MAX_CONNECTION_DURATION_S),
    )


def load_settings() -> AppSettings:
    return AppSettings(
        server=_load_server_settings(),
        models=_load_model_settings(),
        prompts=_load_prompt_settings(),
        synthesis=_load_synthesis_settings(),
        limits=_load_limits_settings(),
        websocket=_load_websocket_settings(),
    )


__all__ = ["load_settings"]
