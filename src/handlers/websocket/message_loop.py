"""WebSocket receive loop for the live relay (/api/live)."""

from __future__ import annotations

import asyncio
import logging
import contextlib

from fastapi import WebSocket, WebSocketDisconnect

from src.realtime.relay import RelayPump
from src.handlers.limits import SlidingWindowRateLimiter

from .limits import consume_limiter
from .lifecycle import WebSocketLifecycle

logger = logging.getLogger(__name__)


async def _recv_frame_with_watchdog(
    ws: WebSocket,
    lifecycle: WebSocketLifecycle,
) -> tuple[str | bytes | None, bool]:
    try:
        message = await asyncio.wait_for(ws.receive(), timeout=lifecycle.watchdog_tick_s * 2)
    except TimeoutError:
        return None, lifecycle.should_close()

    if message.get("type") == "websocket.disconnect":
        raise WebSocketDisconnect(code=message.get("code") or 1000)
    text = message.get("text")
    if text is not None:
        return text, False
    # Binary frames carrying UTF-8 JSON are accepted as well.
    return message.get("bytes"), False


async def run_message_loop(
    ws: WebSocket,
    lifecycle: WebSocketLifecycle,
    message_limiter: SlidingWindowRateLimiter,
    relay: RelayPump,
) -> None:
    """Feed frames to the relay in arrival order until the transport closes."""
    try:
        while True:
            raw, should_exit = await _recv_frame_with_watchdog(ws, lifecycle)
            if should_exit:
                return
            if raw is None:
                continue

            lifecycle.touch()

            if not await consume_limiter(ws, message_limiter):
                continue

            await relay.handle_frame(raw)
    except WebSocketDisconnect:
        return
    finally:
        with contextlib.suppress(Exception):
            await relay.close()


__all__ = ["run_message_loop"]
