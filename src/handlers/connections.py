"""Process-wide registry of live WebSocket relays (admission + guaranteed teardown)."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import TYPE_CHECKING, Any

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from src.realtime.relay import RelayPump


class ConnectionRegistry:
    def __init__(self, *, max_connections: int) -> None:
        self._max = max(1, int(max_connections))
        self._lock = asyncio.Lock()
        self._active: dict[int, RelayPump] = {}

    async def register(self, ws: Any, relay: RelayPump) -> bool:
        """Attempt to admit a websocket connection (without accepting it)."""
        key = id(ws)
        async with self._lock:
            if key in self._active:
                return True
            if len(self._active) >= self._max:
                return False
            self._active[key] = relay
            return True

    async def unregister(self, ws: Any) -> RelayPump | None:
        async with self._lock:
            return self._active.pop(id(ws), None)

    def get(self, ws: Any) -> RelayPump | None:
        return self._active.get(id(ws))

    def get_connection_count(self) -> int:
        return len(self._active)

    async def close_all(self) -> None:
        async with self._lock:
            relays = list(self._active.values())
            self._active.clear()
        for relay in relays:
            with contextlib.suppress(Exception):
                await relay.close()
        if relays:
            logger.info("closed %s live relay(s) on shutdown", len(relays))


__all__ = ["ConnectionRegistry"]
