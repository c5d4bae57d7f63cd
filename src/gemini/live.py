"""Gemini Live implementation of the realtime backend contract."""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack
from collections.abc import Callable

from google import genai
from google.genai import types

from src.realtime.backend import LiveSessionConfig

from .handle import GeminiLiveHandle
from .client import build_genai_client, build_speech_config

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], genai.Client]


def build_live_config(config: LiveSessionConfig) -> types.LiveConnectConfig:
    return types.LiveConnectConfig(
        response_modalities=[types.Modality.AUDIO],
        input_audio_transcription=types.AudioTranscriptionConfig(),
        output_audio_transcription=types.AudioTranscriptionConfig(),
        system_instruction=types.Content(parts=[types.Part(text=config.system_instruction)]),
        speech_config=build_speech_config(config.voice),
    )


class GeminiLiveBackend:
    def __init__(self, *, client_factory: ClientFactory = build_genai_client) -> None:
        self._client_factory = client_factory

    async def connect(self, config: LiveSessionConfig) -> GeminiLiveHandle:
        client = self._client_factory(config.api_key)
        stack = AsyncExitStack()
        try:
            session = await stack.enter_async_context(
                client.aio.live.connect(model=config.model, config=build_live_config(config))
            )
        except BaseException:
            await stack.aclose()
            raise
        logger.debug("Gemini Live session opened model=%s voice=%s", config.model, config.voice)
        return GeminiLiveHandle(session, stack)


__all__ = ["GeminiLiveBackend", "build_live_config"]
