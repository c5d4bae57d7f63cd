"""One-shot Gemini text generation used by /api/generate."""

from __future__ import annotations

from collections.abc import Callable

from google import genai

from .client import build_genai_client

ClientFactory = Callable[[str], genai.Client]


class GeminiTextGenerator:
    def __init__(self, *, client_factory: ClientFactory = build_genai_client) -> None:
        self._client_factory = client_factory

    async def generate(self, prompt: str, model: str, api_key: str) -> str:
        client = self._client_factory(api_key)
        response = await client.aio.models.generate_content(model=model, contents=prompt)
        return response.text or ""


__all__ = ["GeminiTextGenerator"]
