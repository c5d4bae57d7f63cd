"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ServerSettings:
    host: str
    port: int
    cors_allow_origins: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ModelSettings:
    text_model: str
    live_model: str
    tts_model: str


@dataclass(frozen=True, slots=True)
class PromptSettings:
    system_instruction_template: str
    default_topic: str
    default_user_name: str


@dataclass(frozen=True, slots=True)
class SynthesisSettings:
    default_voice: str
    primary_timeout_s: float
    local_enabled: bool
    local_binary: str


@dataclass(frozen=True, slots=True)
class LimitsSettings:
    max_concurrent_connections: int
    ws_message_window_seconds: float
    ws_max_messages_per_window: int


@dataclass(frozen=True, slots=True)
class WebSocketSettings:
    idle_timeout_s: float
    watchdog_tick_s: float
    max_connection_duration_s: float


@dataclass(frozen=True, slots=True)
class AppSettings:
    server: ServerSettings
    models: ModelSettings
    prompts: PromptSettings
    synthesis: SynthesisSettings
    limits: LimitsSettings
    websocket: WebSocketSettings


__all__ = [
    "AppSettings",
    "LimitsSettings",
    "ModelSettings",
    "PromptSettings",
    "ServerSettings",
    "SynthesisSettings",
    "WebSocketSettings",
]
