"""Contract for the one-shot text generator behind /api/generate."""

from __future__ import annotations

from typing import Protocol


class TextGenerator(Protocol):
    async def generate(self, prompt: str, model: str, api_key: str) -> str: ...


__all__ = ["TextGenerator"]
