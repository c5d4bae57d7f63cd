"""Send helpers for outbound client envelopes."""

from __future__ import annotations

import logging

from fastapi import WebSocket, WebSocketDisconnect

from src.realtime.envelope import ErrorEnvelope, OutboundEnvelope, encode_envelope

logger = logging.getLogger(__name__)


async def safe_send_text(ws: WebSocket, text: str) -> bool:
    try:
        await ws.send_text(text)
    except WebSocketDisconnect:
        return False
    except Exception:
        logger.debug("WebSocket send failed", exc_info=True)
        return False
    return True


async def safe_send_envelope(ws: WebSocket, envelope: OutboundEnvelope) -> bool:
    return await safe_send_text(ws, encode_envelope(envelope))


async def send_error(ws: WebSocket, message: str) -> bool:
    return await safe_send_envelope(ws, ErrorEnvelope(message))


async def reject_connection(ws: WebSocket, *, message: str, close_code: int) -> None:
    # Accept so we can send a structured error, then close.
    try:
        await ws.accept()
    except Exception:
        return
    await send_error(ws, message)
    try:
        await ws.close(code=close_code, reason=message)
    except Exception:
        return


__all__ = ["reject_connection", "safe_send_envelope", "safe_send_text", "send_error"]
