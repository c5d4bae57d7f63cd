"""Contract of the on-host fallback synthesizer."""

from __future__ import annotations

from typing import Protocol


class LocalSynthesizer(Protocol):
    """Given text and a local voice name, produce playable audio bytes or raise."""

    mime_type: str

    async def synthesize(self, text: str, voice: str) -> bytes: ...


__all__ = ["LocalSynthesizer"]
