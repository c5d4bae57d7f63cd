"""Primary WebSocket connection handler orchestration."""

from __future__ import annotations

import uuid
import logging
import contextlib

from fastapi import WebSocket

from src.state import RuntimeDeps
from src.realtime.relay import RelayPump
from src.realtime.envelope import OutboundEnvelope
from src.handlers.limits import SlidingWindowRateLimiter
from src.config.websocket import WS_CLOSE_BUSY_CODE, WS_ERROR_SERVER_AT_CAPACITY

from .lifecycle import WebSocketLifecycle
from .message_loop import run_message_loop
from .errors import reject_connection, safe_send_envelope

logger = logging.getLogger(__name__)


def build_relay(ws: WebSocket, runtime_deps: RuntimeDeps, connection_id: str) -> RelayPump:
    settings = runtime_deps.settings

    async def emit(envelope: OutboundEnvelope) -> bool:
        return await safe_send_envelope(ws, envelope)

    return RelayPump(
        backend=runtime_deps.live_backend,
        emit=emit,
        models=settings.models,
        prompts=settings.prompts,
        default_voice=settings.synthesis.default_voice,
        connection_id=connection_id,
    )


def _create_rate_limiter(runtime_deps: RuntimeDeps) -> SlidingWindowRateLimiter:
    limits = runtime_deps.settings.limits
    return SlidingWindowRateLimiter(
        limit=limits.ws_max_messages_per_window,
        window_seconds=limits.ws_message_window_seconds,
    )


async def _prepare_connection(ws: WebSocket, runtime_deps: RuntimeDeps, relay: RelayPump) -> bool:
    if not await runtime_deps.connections.register(ws, relay):
        await reject_connection(ws, message=WS_ERROR_SERVER_AT_CAPACITY, close_code=WS_CLOSE_BUSY_CODE)
        return False

    try:
        await ws.accept()
    except Exception:
        with contextlib.suppress(Exception):
            await runtime_deps.connections.unregister(ws)
        raise
    return True


async def handle_websocket_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> None:
    connection_id = uuid.uuid4().hex[:8]
    relay = build_relay(ws, runtime_deps, connection_id)
    lifecycle: WebSocketLifecycle | None = None
    admitted = False
    try:
        if not await _prepare_connection(ws, runtime_deps, relay):
            logger.warning("WebSocket connection %s rejected: server at capacity", connection_id)
            return
        admitted = True

        ws_settings = runtime_deps.settings.websocket
        lifecycle = WebSocketLifecycle(
            ws,
            is_busy_fn=relay.is_busy,
            idle_timeout_s=ws_settings.idle_timeout_s,
            watchdog_tick_s=ws_settings.watchdog_tick_s,
            max_connection_duration_s=ws_settings.max_connection_duration_s,
        )
        lifecycle.start()

        logger.info(
            "WebSocket connection %s accepted. Active: %s",
            connection_id,
            runtime_deps.connections.get_connection_count(),
        )
        await run_message_loop(ws, lifecycle, _create_rate_limiter(runtime_deps), relay)
    finally:
        if lifecycle is not None:
            with contextlib.suppress(Exception):
                await lifecycle.stop()

        with contextlib.suppress(Exception):
            await relay.close()

        if admitted:
            with contextlib.suppress(Exception):
                await runtime_deps.connections.unregister(ws)
            logger.info(
                "WebSocket connection %s closed (forwarded=%s dropped=%s events=%s). Active: %s",
                connection_id,
                relay.forwarded_audio_frames,
                relay.dropped_audio_frames,
                relay.relayed_events,
                runtime_deps.connections.get_connection_count(),
            )


__all__ = ["build_relay", "handle_websocket_connection"]
