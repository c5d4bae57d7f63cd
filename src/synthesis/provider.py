"""Contract of the primary (networked) speech provider."""

from __future__ import annotations

from typing import Protocol


class SpeechProvider(Protocol):
    async def synthesize(self, text: str, voice: str, api_key: str) -> tuple[bytes, str]:
        """Return (audio bytes, mime type) for ``text`` spoken by ``voice``."""
        ...


__all__ = ["SpeechProvider"]
