"""Per-connection realtime session: owns at most one backend handle at a time."""

from __future__ import annotations

import uuid
import asyncio
import logging
from typing import Any
from collections.abc import Callable, Awaitable

from src.state.session import SessionState
from src.config.websocket import WS_ERROR_MISSING_API_KEY
from src.errors import BackendStreamError, BackendConnectError, MissingCredentialError

from .handle import LiveHandle
from .backend import LiveBackend, LiveSessionConfig
from .envelope import ErrorEnvelope, OutboundEnvelope, ConnectedEnvelope, DisconnectedEnvelope

logger = logging.getLogger(__name__)

EmitFn = Callable[[OutboundEnvelope], Awaitable[Any]]
EventFn = Callable[[dict[str, Any]], Awaitable[Any]]


class Session:
    """Lifecycle of one realtime conversation.

    idle -> connecting -> active -> closing -> closed, with errored as the
    failure terminal. The backend connect runs in its own task so that a
    disconnect or transport close can cancel it; a backend open that lands
    after teardown is closed immediately instead of re-entering active.
    Every path out of connecting/active releases the backend handle exactly once.
    """

    def __init__(
        self,
        *,
        backend: LiveBackend,
        emit: EmitFn,
        on_event: EventFn,
        session_id: str | None = None,
    ) -> None:
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self._backend = backend
        self._emit = emit
        self._on_event = on_event
        self._state = SessionState.IDLE
        self._config: LiveSessionConfig | None = None
        self._handle: LiveHandle | None = None
        self._connect_task: asyncio.Task | None = None
        self._receive_task: asyncio.Task | None = None
        self._teardown_done: asyncio.Event | None = None
        self.connect_attempts = 0
        self.backend_closes = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def config(self) -> LiveSessionConfig | None:
        return self._config

    @property
    def voice(self) -> str | None:
        return self._config.voice if self._config is not None else None

    @property
    def has_backend_handle(self) -> bool:
        return self._handle is not None

    def connect(self, config: LiveSessionConfig) -> None:
        """Start connecting to the backend; the open itself completes asynchronously."""
        if self._state is not SessionState.IDLE:
            raise RuntimeError(f"session {self.session_id} cannot connect from state {self._state.value}")
        if not config.api_key or not config.api_key.strip():
            raise MissingCredentialError(WS_ERROR_MISSING_API_KEY)

        self._config = config
        self._transition(SessionState.CONNECTING)
        self.connect_attempts += 1
        self._connect_task = asyncio.create_task(
            self._open_backend(config),
            name=f"live-connect-{self.session_id}",
        )

    async def send_audio(self, audio: bytes, mime_type: str) -> bool:
        """Forward one audio frame; returns False when the session is not active."""
        handle = self._handle
        if self._state is not SessionState.ACTIVE or handle is None:
            return False
        try:
            await handle.send_audio(audio, mime_type)
        except Exception as exc:
            raise BackendStreamError(f"Error sending audio to Gemini: {exc}") from exc
        return True

    async def disconnect(self) -> bool:
        """Client-requested teardown. Returns False when there was nothing to tear down."""
        if not self._state.is_live:
            return False
        await self._teardown(SessionState.CLOSED, DisconnectedEnvelope())
        return True

    async def close(self) -> None:
        """Transport went away: release everything without notifying the client.

        Returns only once the backend handle is released, including when a
        teardown started elsewhere is still in flight.
        """
        if self._state.is_terminal:
            return
        if self._state is SessionState.IDLE:
            self._transition(SessionState.CLOSED)
            return
        if self._state is SessionState.CLOSING:
            await self._wait_teardown()
            return
        await self._teardown(SessionState.CLOSED, None)

    async def on_backend_open(self, handle: LiveHandle) -> None:
        if self._state is not SessionState.CONNECTING:
            logger.info(
                "session %s: backend opened after teardown (state=%s); closing it",
                self.session_id,
                self._state.value,
            )
            await self._close_handle(handle)
            return

        self._handle = handle
        self._connect_task = None
        self._transition(SessionState.ACTIVE)
        logger.info("session %s: connected to Gemini Live voice=%s", self.session_id, self.voice)
        await self._emit(ConnectedEnvelope())

        # connected must reach the client before any relayed backend event.
        if self._state is SessionState.ACTIVE and self._handle is handle:
            self._receive_task = asyncio.create_task(
                self._pump_events(handle),
                name=f"live-receive-{self.session_id}",
            )

    async def _open_backend(self, config: LiveSessionConfig) -> None:
        try:
            handle = await self._backend.connect(config)
        except asyncio.CancelledError:
            logger.info("session %s: backend connect cancelled", self.session_id)
            raise
        except Exception as exc:
            logger.warning("session %s: failed to connect to Gemini: %s", self.session_id, exc)
            self._connect_task = None
            await self._fail(BackendConnectError(f"Failed to connect to Gemini: {exc}"))
            return
        await self.on_backend_open(handle)

    async def _pump_events(self, handle: LiveHandle) -> None:
        try:
            async for payload in handle.events():
                await self._on_event(payload)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.warning("session %s: Gemini Live stream error: %s", self.session_id, exc)
            self._receive_task = None
            await self._fail(BackendStreamError(str(exc) or type(exc).__name__))
            return

        self._receive_task = None
        if self._state is SessionState.ACTIVE:
            logger.info("session %s: Gemini Live session closed by backend", self.session_id)
            await self._teardown(SessionState.CLOSED, DisconnectedEnvelope())

    async def _fail(self, error: BackendConnectError | BackendStreamError) -> None:
        if not self._state.is_live:
            return
        await self._teardown(SessionState.ERRORED, ErrorEnvelope(error.message))

    async def _wait_teardown(self) -> None:
        done = self._teardown_done
        if done is not None:
            await done.wait()

    async def _teardown(self, final_state: SessionState, envelope: OutboundEnvelope | None) -> None:
        if self._teardown_done is not None:
            await self._wait_teardown()
            return
        done = self._teardown_done = asyncio.Event()
        self._transition(SessionState.CLOSING)

        try:
            current = asyncio.current_task()
            for task in (self._connect_task, self._receive_task):
                if task is not None and task is not current and not task.done():
                    task.cancel()
                    await asyncio.wait({task})
            self._connect_task = None
            self._receive_task = None

            handle, self._handle = self._handle, None
            if handle is not None:
                await self._close_handle(handle)
        finally:
            self._transition(final_state)
            done.set()

        if envelope is not None:
            await self._emit(envelope)

    async def _close_handle(self, handle: LiveHandle) -> None:
        self.backend_closes += 1
        try:
            # Shielded so a cancelled caller cannot leave the backend half-closed.
            await asyncio.shield(handle.close())
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.warning("session %s: backend close failed", self.session_id, exc_info=True)

    def _transition(self, state: SessionState) -> None:
        if state is self._state:
            return
        if self._state.is_terminal:
            logger.debug("session %s: ignoring %s after %s", self.session_id, state.value, self._state.value)
            return
        logger.debug("session %s: %s -> %s", self.session_id, self._state.value, state.value)
        self._state = state


__all__ = ["EmitFn", "EventFn", "Session"]
