"""Client envelopes exchanged over the /api/live WebSocket.

Inbound frames are JSON objects tagged by ``type`` (connect, audio-input,
disconnect). Outbound frames are built from the immutable envelope classes
below and serialized with orjson.
"""

from __future__ import annotations

import base64
import binascii
from typing import Any, Union
from dataclasses import dataclass, field

import orjson

from src.errors import DecodeError
from src.config.websocket import (
    WS_KEY_DATA,
    WS_KEY_TYPE,
    WS_MSG_ERROR,
    WS_KEY_ERROR,
    WS_KEY_CONFIG,
    WS_CONFIG_TOPIC,
    WS_MSG_CONNECT,
    WS_KEY_MIME_TYPE,
    WS_MSG_CONNECTED,
    WS_KEY_AUDIO_DATA,
    WS_MSG_DISCONNECT,
    WS_CONFIG_API_KEY,
    WS_MSG_RELAY_EVENT,
    WS_MSG_AUDIO_INPUT,
    WS_CONFIG_USER_NAME,
    WS_MSG_DISCONNECTED,
    WS_CONFIG_VOICE_NAME,
    DEFAULT_AUDIO_MIME_TYPE,
)


@dataclass(frozen=True, slots=True)
class ConnectEnvelope:
    api_key: str | None = None
    voice_name: str | None = None
    user_name: str | None = None
    topic: str | None = None


@dataclass(frozen=True, slots=True)
class AudioInputEnvelope:
    audio: bytes
    mime_type: str = DEFAULT_AUDIO_MIME_TYPE


@dataclass(frozen=True, slots=True)
class DisconnectEnvelope:
    pass


@dataclass(frozen=True, slots=True)
class ConnectedEnvelope:
    def to_wire(self) -> dict[str, Any]:
        return {WS_KEY_TYPE: WS_MSG_CONNECTED}


@dataclass(frozen=True, slots=True)
class DisconnectedEnvelope:
    def to_wire(self) -> dict[str, Any]:
        return {WS_KEY_TYPE: WS_MSG_DISCONNECTED}


@dataclass(frozen=True, slots=True)
class RelayEventEnvelope:
    payload: dict[str, Any] = field(default_factory=dict)

    def to_wire(self) -> dict[str, Any]:
        return {WS_KEY_TYPE: WS_MSG_RELAY_EVENT, WS_KEY_DATA: self.payload}


@dataclass(frozen=True, slots=True)
class ErrorEnvelope:
    message: str

    def to_wire(self) -> dict[str, Any]:
        return {WS_KEY_TYPE: WS_MSG_ERROR, WS_KEY_ERROR: self.message}


InboundEnvelope = Union[ConnectEnvelope, AudioInputEnvelope, DisconnectEnvelope]
OutboundEnvelope = Union[ConnectedEnvelope, DisconnectedEnvelope, RelayEventEnvelope, ErrorEnvelope]


def _optional_str(config: dict[str, Any], key: str) -> str | None:
    value = config.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodeError(f"connect.config.{key} must be a string")
    value = value.strip()
    return value or None


def _decode_connect(msg: dict[str, Any]) -> ConnectEnvelope:
    config = msg.get(WS_KEY_CONFIG)
    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise DecodeError("connect 'config' must be an object")
    return ConnectEnvelope(
        api_key=_optional_str(config, WS_CONFIG_API_KEY),
        voice_name=_optional_str(config, WS_CONFIG_VOICE_NAME),
        user_name=_optional_str(config, WS_CONFIG_USER_NAME),
        topic=_optional_str(config, WS_CONFIG_TOPIC),
    )


def _decode_audio_input(msg: dict[str, Any]) -> AudioInputEnvelope:
    audio_b64 = msg.get(WS_KEY_AUDIO_DATA)
    if not isinstance(audio_b64, str) or not audio_b64.strip():
        raise DecodeError("audio-input requires non-empty base64 'audioData'")
    try:
        audio = base64.b64decode(audio_b64.strip(), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"audio-input 'audioData' is not valid base64: {exc}") from exc

    mime_type = msg.get(WS_KEY_MIME_TYPE)
    if mime_type is not None and not isinstance(mime_type, str):
        raise DecodeError("audio-input 'mimeType' must be a string")
    return AudioInputEnvelope(audio=audio, mime_type=(mime_type or "").strip() or DEFAULT_AUDIO_MIME_TYPE)


def decode_envelope(raw: str | bytes) -> InboundEnvelope:
    """Parse one inbound frame; raises DecodeError for anything malformed."""
    try:
        msg = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise DecodeError(f"invalid JSON: {exc}") from exc

    if not isinstance(msg, dict):
        raise DecodeError("message must be a JSON object")

    msg_type = msg.get(WS_KEY_TYPE)
    if not isinstance(msg_type, str) or not msg_type.strip():
        raise DecodeError("message missing non-empty 'type'")
    msg_type = msg_type.strip()

    if msg_type == WS_MSG_CONNECT:
        return _decode_connect(msg)
    if msg_type == WS_MSG_AUDIO_INPUT:
        return _decode_audio_input(msg)
    if msg_type == WS_MSG_DISCONNECT:
        return DisconnectEnvelope()
    raise DecodeError(f"message type '{msg_type}' is not supported")


def encode_envelope(envelope: OutboundEnvelope) -> str:
    return orjson.dumps(envelope.to_wire()).decode("utf-8")


__all__ = [
    "AudioInputEnvelope",
    "ConnectEnvelope",
    "ConnectedEnvelope",
    "DisconnectEnvelope",
    "DisconnectedEnvelope",
    "ErrorEnvelope",
    "InboundEnvelope",
    "OutboundEnvelope",
    "RelayEventEnvelope",
    "decode_envelope",
    "encode_envelope",
]
