"""Relay between client envelopes and the per-connection backend session."""

from __future__ import annotations

import logging
from string import Template
from typing import Any
from collections.abc import Callable, Awaitable

from src.state.session import SessionState
from src.config.websocket import WS_ERROR_MISSING_API_KEY
from src.synthesis.voices import resolve_voice
from src.state.settings import ModelSettings, PromptSettings
from src.errors import DecodeError, BackendStreamError, MissingCredentialError

from .session import EmitFn, Session
from .backend import LiveBackend, LiveSessionConfig
from .envelope import (
    ErrorEnvelope,
    ConnectEnvelope,
    InboundEnvelope,
    AudioInputEnvelope,
    DisconnectEnvelope,
    RelayEventEnvelope,
    decode_envelope,
)

logger = logging.getLogger(__name__)


def render_system_instruction(template: str, *, user_name: str, topic: str) -> str:
    return Template(template).safe_substitute(user_name=user_name, topic=topic)


class RelayPump:
    """Decode inbound frames, drive the Session, and wrap backend events for the client.

    Frames from one client are handled strictly in arrival order by the caller's
    receive loop. Audio that arrives before the session is active is dropped
    and counted rather than treated as a protocol error.
    """

    def __init__(
        self,
        *,
        backend: LiveBackend,
        emit: EmitFn,
        models: ModelSettings,
        prompts: PromptSettings,
        default_voice: str,
        connection_id: str | None = None,
    ) -> None:
        self._backend = backend
        self._emit = emit
        self._models = models
        self._prompts = prompts
        self._default_voice = default_voice
        self._connection_id = connection_id
        self._session: Session | None = None
        self.dropped_audio_frames = 0
        self.forwarded_audio_frames = 0
        self.relayed_events = 0

        self._handlers: dict[type, Callable[[Any], Awaitable[None]]] = {
            ConnectEnvelope: self._handle_connect,
            AudioInputEnvelope: self._handle_audio_input,
            DisconnectEnvelope: self._handle_disconnect,
        }

    @property
    def session(self) -> Session | None:
        return self._session

    def is_busy(self) -> bool:
        session = self._session
        return session is not None and session.state.is_live

    async def handle_frame(self, raw: str | bytes) -> None:
        try:
            envelope = decode_envelope(raw)
        except DecodeError as exc:
            logger.info("connection %s: rejected frame: %s", self._connection_id, exc.message)
            await self._emit(ErrorEnvelope(exc.message))
            return
        await self.dispatch(envelope)

    async def dispatch(self, envelope: InboundEnvelope) -> None:
        handler = self._handlers.get(type(envelope))
        if handler is None:
            raise TypeError(f"no handler for {type(envelope).__name__}")
        await handler(envelope)

    async def close(self) -> None:
        """Transport closed: guarantee teardown of any live backend session."""
        session = self._session
        if session is not None:
            await session.close()

    def build_session_config(self, envelope: ConnectEnvelope) -> LiveSessionConfig:
        voice = resolve_voice(envelope.voice_name or self._default_voice)
        instruction = render_system_instruction(
            self._prompts.system_instruction_template,
            user_name=envelope.user_name or self._prompts.default_user_name,
            topic=envelope.topic or self._prompts.default_topic,
        )
        return LiveSessionConfig(
            api_key=envelope.api_key or "",
            model=self._models.live_model,
            voice=voice.backend_voice,
            system_instruction=instruction,
        )

    async def _handle_connect(self, envelope: ConnectEnvelope) -> None:
        config = self.build_session_config(envelope)
        # Checked before the live session is replaced.
        if not config.api_key.strip():
            logger.info("connection %s: connect rejected: missing API key", self._connection_id)
            await self._emit(ErrorEnvelope(WS_ERROR_MISSING_API_KEY))
            return

        previous = self._session
        if previous is not None and previous.state.is_live:
            logger.info("connection %s: replacing session %s", self._connection_id, previous.session_id)
            await previous.close()

        session = Session(backend=self._backend, emit=self._emit, on_event=self._relay_backend_event)
        self._session = session
        try:
            session.connect(config)
        except MissingCredentialError as exc:
            await self._emit(ErrorEnvelope(exc.message))
            return
        logger.info(
            "connection %s: session %s connecting voice=%s",
            self._connection_id,
            session.session_id,
            session.voice,
        )

    async def _handle_audio_input(self, envelope: AudioInputEnvelope) -> None:
        session = self._session
        if session is None or session.state is not SessionState.ACTIVE:
            self.dropped_audio_frames += 1
            logger.debug(
                "connection %s: dropped audio frame (state=%s, dropped=%s)",
                self._connection_id,
                session.state.value if session is not None else "none",
                self.dropped_audio_frames,
            )
            return

        try:
            sent = await session.send_audio(envelope.audio, envelope.mime_type)
        except BackendStreamError as exc:
            logger.warning("connection %s: %s", self._connection_id, exc.message)
            await self._emit(ErrorEnvelope(exc.message))
            return
        if sent:
            self.forwarded_audio_frames += 1
        else:
            self.dropped_audio_frames += 1

    async def _handle_disconnect(self, _envelope: DisconnectEnvelope) -> None:
        session = self._session
        if session is None:
            return
        if await session.disconnect():
            logger.info("connection %s: session %s disconnected by client", self._connection_id, session.session_id)

    async def _relay_backend_event(self, payload: dict[str, Any]) -> None:
        self.relayed_events += 1
        await self._emit(RelayEventEnvelope(payload=payload))


__all__ = ["RelayPump", "render_system_instruction"]
