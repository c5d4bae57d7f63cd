"""Gemini speech generation (primary synthesis tier)."""

from __future__ import annotations

import base64
import logging
from typing import Any
from collections.abc import Callable

from google import genai
from google.genai import types

from src.config.synthesis import PRIMARY_AUDIO_MIME_TYPE

from .client import build_genai_client, build_speech_config

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str, int | None], genai.Client]


def extract_audio(response: Any) -> tuple[bytes, str]:
    candidates = getattr(response, "candidates", None) or []
    for cand in candidates:
        content = getattr(cand, "content", None)
        parts = getattr(content, "parts", None) or []
        for part in parts:
            inline_data = getattr(part, "inline_data", None)
            if inline_data is None:
                continue
            data = getattr(inline_data, "data", None)
            if not data:
                continue
            mime_type = getattr(inline_data, "mime_type", None) or PRIMARY_AUDIO_MIME_TYPE
            if isinstance(data, str):
                data = base64.b64decode(data)
            return bytes(data), mime_type
    raise ValueError("No audio payload returned by Gemini.")


class GeminiSpeechProvider:
    def __init__(
        self,
        *,
        model: str,
        timeout_s: float = 0.0,
        client_factory: ClientFactory = build_genai_client,
    ) -> None:
        self._model = model
        self._timeout_ms = int(timeout_s * 1000) if timeout_s > 0 else None
        self._client_factory = client_factory

    async def synthesize(self, text: str, voice: str, api_key: str) -> tuple[bytes, str]:
        client = self._client_factory(api_key, self._timeout_ms)
        response = await client.aio.models.generate_content(
            model=self._model,
            contents=text,
            config=types.GenerateContentConfig(
                response_modalities=["AUDIO"],
                speech_config=build_speech_config(voice),
            ),
        )
        audio, mime_type = extract_audio(response)
        logger.debug("Gemini synthesis done voice=%s bytes=%s mime=%s", voice, len(audio), mime_type)
        return audio, mime_type


__all__ = ["GeminiSpeechProvider", "extract_audio"]
