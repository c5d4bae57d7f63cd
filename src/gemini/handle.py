"""Adapter from an open google-genai live session to the relay's handle contract."""

from __future__ import annotations

from typing import Any
from contextlib import AsyncExitStack
from collections.abc import AsyncIterator

from google.genai import types
from websockets.exceptions import ConnectionClosedOK


def message_to_payload(message: Any) -> dict[str, Any]:
    """Wrap a LiveServerMessage as ``{"serverContent": ...}`` in the camelCase wire shape."""
    payload: dict[str, Any] = {}
    server_content = getattr(message, "server_content", None)
    if server_content is not None:
        payload["serverContent"] = server_content.model_dump(mode="json", by_alias=True, exclude_none=True)
    return payload


class GeminiLiveHandle:
    def __init__(self, session: Any, stack: AsyncExitStack) -> None:
        self._session = session
        self._stack = stack
        self._closed = False

    async def send_audio(self, audio: bytes, mime_type: str) -> None:
        await self._session.send_realtime_input(audio=types.Blob(data=audio, mime_type=mime_type))

    async def events(self) -> AsyncIterator[dict[str, Any]]:
        # receive() ends after each turn_complete; keep reading until the socket closes.
        try:
            while not self._closed:
                async for message in self._session.receive():
                    yield message_to_payload(message)
        except ConnectionClosedOK:
            return

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._stack.aclose()


__all__ = ["GeminiLiveHandle", "message_to_payload"]
