"""Contract between the relay and a realtime generation backend."""

from __future__ import annotations

from typing import Protocol
from dataclasses import dataclass

from .handle import LiveHandle


@dataclass(frozen=True, slots=True)
class LiveSessionConfig:
    """Everything the backend needs to open one conversational session."""

    api_key: str
    model: str
    voice: str
    system_instruction: str


class LiveBackend(Protocol):
    async def connect(self, config: LiveSessionConfig) -> LiveHandle:
        """Open a backend session; raises if the backend refuses or is unreachable.

        Implementations must not leak a half-open session when cancelled.
        """
        ...


__all__ = ["LiveBackend", "LiveSessionConfig"]
