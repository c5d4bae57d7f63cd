"""Speech synthesis configuration (env names and defaults)."""

from __future__ import annotations

ENV_DEFAULT_VOICE_NAME = "DEFAULT_VOICE_NAME"
ENV_TTS_PRIMARY_TIMEOUT_S = "TTS_PRIMARY_TIMEOUT_S"
ENV_LOCAL_TTS_ENABLED = "LOCAL_TTS_ENABLED"
ENV_LOCAL_TTS_BINARY = "LOCAL_TTS_BINARY"

DEFAULT_VOICE_NAME = "Puck"
DEFAULT_TTS_PRIMARY_TIMEOUT_S = 30.0
DEFAULT_LOCAL_TTS_ENABLED = True

# Searched on PATH in order when LOCAL_TTS_BINARY is unset.
LOCAL_TTS_BINARY_CANDIDATES: tuple[str, ...] = ("espeak-ng", "espeak")

# Gemini TTS returns raw 16-bit PCM at 24kHz when the part carries no mime type.
PRIMARY_AUDIO_MIME_TYPE = "audio/L16;codec=pcm;rate=24000"
LOCAL_AUDIO_MIME_TYPE = "audio/wav"

__all__ = [
    "ENV_DEFAULT_VOICE_NAME",
    "ENV_TTS_PRIMARY_TIMEOUT_S",
    "ENV_LOCAL_TTS_ENABLED",
    "ENV_LOCAL_TTS_BINARY",
    "DEFAULT_VOICE_NAME",
    "DEFAULT_TTS_PRIMARY_TIMEOUT_S",
    "DEFAULT_LOCAL_TTS_ENABLED",
    "LOCAL_TTS_BINARY_CANDIDATES",
    "PRIMARY_AUDIO_MIME_TYPE",
    "LOCAL_AUDIO_MIME_TYPE",
]
