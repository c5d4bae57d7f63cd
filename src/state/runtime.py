"""Typed runtime state objects for dependency wiring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from src.realtime.backend import LiveBackend
    from src.state.settings import AppSettings
    from src.gemini.generator import TextGenerator
    from src.synthesis.resolver import SynthesisResolver
    from src.handlers.connections import ConnectionRegistry


@dataclass(slots=True)
class RuntimeDeps:
    connections: ConnectionRegistry
    live_backend: LiveBackend
    synthesis: SynthesisResolver
    text_generator: TextGenerator
    settings: AppSettings

    async def shutdown(self) -> None:
        try:
            await self.connections.close_all()
        except Exception:
            logger.exception("runtime shutdown failed")


__all__ = ["RuntimeDeps"]
