"""Gemini model configuration (env names and defaults)."""

from __future__ import annotations

ENV_GEMINI_MODEL = "GEMINI_MODEL"
ENV_GEMINI_LIVE_MODEL = "GEMINI_LIVE_MODEL"
ENV_GEMINI_TTS_MODEL = "GEMINI_TTS_MODEL"

# Default for the one-shot /api/generate passthrough; callers may override per request.
DEFAULT_GEMINI_MODEL = "gemini-2.0-flash-exp"
DEFAULT_GEMINI_LIVE_MODEL = "gemini-2.5-flash-native-audio-preview-09-2025"
DEFAULT_GEMINI_TTS_MODEL = "gemini-2.5-flash-preview-tts"

__all__ = [
    "ENV_GEMINI_MODEL",
    "ENV_GEMINI_LIVE_MODEL",
    "ENV_GEMINI_TTS_MODEL",
    "DEFAULT_GEMINI_MODEL",
    "DEFAULT_GEMINI_LIVE_MODEL",
    "DEFAULT_GEMINI_TTS_MODEL",
]
