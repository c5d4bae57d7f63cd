"""Runtime dependency construction (Gemini clients, synthesis tiers, admission control)."""

from __future__ import annotations

import logging

from src.state import RuntimeDeps
from src.state.settings import AppSettings
from src.synthesis.resolver import SynthesisResolver
from src.handlers.connections import ConnectionRegistry
from src.synthesis.local import detect_local_synthesizer
from src.gemini import GeminiLiveBackend, GeminiTextGenerator, GeminiSpeechProvider

from .settings_loader import load_settings

logger = logging.getLogger(__name__)


def build_synthesis_resolver(settings: AppSettings) -> SynthesisResolver:
    synthesis = settings.synthesis
    # Host capability is evaluated once per process, not per request.
    local = detect_local_synthesizer(enabled=synthesis.local_enabled, binary=synthesis.local_binary)
    primary = GeminiSpeechProvider(model=settings.models.tts_model, timeout_s=synthesis.primary_timeout_s)
    return SynthesisResolver(primary=primary, local=local, primary_timeout_s=synthesis.primary_timeout_s)


async def build_runtime_deps(settings: AppSettings | None = None) -> RuntimeDeps:
    settings = settings or load_settings()

    synthesis = build_synthesis_resolver(settings)
    connections = ConnectionRegistry(max_connections=settings.limits.max_concurrent_connections)

    logger.info(
        "runtime: live_model=%s tts_model=%s fallback_available=%s max_connections=%s",
        settings.models.live_model,
        settings.models.tts_model,
        synthesis.fallback_available,
        settings.limits.max_concurrent_connections,
    )

    return RuntimeDeps(
        connections=connections,
        live_backend=GeminiLiveBackend(),
        synthesis=synthesis,
        text_generator=GeminiTextGenerator(),
        settings=settings,
    )


__all__ = ["RuntimeDeps", "build_runtime_deps", "build_synthesis_resolver"]
