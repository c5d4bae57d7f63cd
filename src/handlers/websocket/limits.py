"""Rate limiting for inbound WebSocket frames."""

from __future__ import annotations

import math
import logging

from fastapi import WebSocket

from src.errors import RateLimitError
from src.handlers.limits import SlidingWindowRateLimiter

from .errors import send_error

logger = logging.getLogger(__name__)


async def consume_limiter(ws: WebSocket, limiter: SlidingWindowRateLimiter) -> bool:
    """Consume one slot; on saturation tell the client and return False (frame is dropped)."""
    try:
        limiter.consume()
    except RateLimitError as exc:
        retry_in_s = int(max(1, math.ceil(float(exc.retry_in)))) if exc.retry_in else 1
        logger.debug("inbound frame rate limited; retry in %ss", retry_in_s)
        await send_error(
            ws,
            f"message rate limit: at most {exc.limit} per {int(exc.window_seconds)} seconds; "
            f"retry in {retry_in_s} seconds",
        )
        return False
    return True


__all__ = ["consume_limiter"]
