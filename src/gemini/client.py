"""google-genai client construction."""

from __future__ import annotations

from google import genai
from google.genai import types

from src.errors import MissingCredentialError


def build_genai_client(api_key: str, timeout_ms: int | None = None) -> genai.Client:
    if not api_key or not api_key.strip():
        raise MissingCredentialError("Missing Gemini API key")
    if timeout_ms:
        http_options = types.HttpOptions(timeout=max(1000, int(timeout_ms)))
        return genai.Client(api_key=api_key.strip(), http_options=http_options)
    return genai.Client(api_key=api_key.strip())


def build_speech_config(voice_name: str) -> types.SpeechConfig:
    return types.SpeechConfig(
        voice_config=types.VoiceConfig(
            prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice_name),
        ),
    )


__all__ = ["build_genai_client", "build_speech_config"]
