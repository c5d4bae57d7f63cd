"""An open realtime backend session as seen by the relay."""

from __future__ import annotations

from typing import Any, Protocol
from collections.abc import AsyncIterator


class LiveHandle(Protocol):
    """An open backend session. Owned by exactly one relay Session."""

    async def send_audio(self, audio: bytes, mime_type: str) -> None: ...

    def events(self) -> AsyncIterator[dict[str, Any]]:
        """Yield opaque event payloads until the backend closes the stream.

        Ends normally on a clean backend close; raises on a stream failure.
        """
        ...

    async def close(self) -> None: ...


__all__ = ["LiveHandle"]
