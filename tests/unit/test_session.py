from __future__ import annotations

import asyncio

import pytest
from fakes import Outbox, FakeHandle, FakeBackend, wait_until, live_config

from src.realtime.session import Session
from src.state.session import SessionState
from src.errors import BackendStreamError, MissingCredentialError
from src.realtime.envelope import ErrorEnvelope, ConnectedEnvelope, DisconnectedEnvelope


class _Events:
    def __init__(self) -> None:
        self.payloads: list[dict] = []

    async def __call__(self, payload: dict) -> None:
        self.payloads.append(payload)


def _session(backend: FakeBackend) -> tuple[Session, Outbox, _Events]:
    outbox = Outbox()
    events = _Events()
    return Session(backend=backend, emit=outbox, on_event=events), outbox, events


async def _connected(backend: FakeBackend) -> tuple[Session, Outbox, _Events]:
    session, outbox, events = _session(backend)
    session.connect(live_config())
    await wait_until(lambda: session.state is SessionState.ACTIVE)
    return session, outbox, events


@pytest.mark.asyncio
async def test_missing_credential_leaves_session_idle() -> None:
    backend = FakeBackend()
    session, outbox, _ = _session(backend)

    with pytest.raises(MissingCredentialError):
        session.connect(live_config(api_key="  "))

    assert session.state is SessionState.IDLE
    assert backend.configs == []
    assert outbox.envelopes == []


@pytest.mark.asyncio
async def test_connect_reaches_active_and_emits_connected() -> None:
    backend = FakeBackend()
    session, outbox, _ = await _connected(backend)

    assert outbox.envelopes == [ConnectedEnvelope()]
    assert session.has_backend_handle
    assert session.connect_attempts == 1
    assert backend.configs[0].voice == "Puck"

    await session.close()


@pytest.mark.asyncio
async def test_connect_twice_is_rejected() -> None:
    session, _, _ = await _connected(FakeBackend())
    with pytest.raises(RuntimeError):
        session.connect(live_config())
    await session.close()


@pytest.mark.asyncio
async def test_backend_events_are_forwarded_after_connected() -> None:
    backend = FakeBackend(events=[{"serverContent": {"turnComplete": True}}])
    session, outbox, events = await _connected(backend)

    await wait_until(lambda: len(events.payloads) == 1)
    assert events.payloads == [{"serverContent": {"turnComplete": True}}]
    assert outbox.envelopes[0] == ConnectedEnvelope()

    await session.close()


@pytest.mark.asyncio
async def test_backend_close_moves_to_closed_and_notifies() -> None:
    backend = FakeBackend()
    session, outbox, _ = await _connected(backend)

    backend.handles[0].finish()
    await wait_until(lambda: session.state is SessionState.CLOSED)

    assert outbox.envelopes == [ConnectedEnvelope(), DisconnectedEnvelope()]
    assert backend.handles[0].close_calls == 1
    assert not session.has_backend_handle


@pytest.mark.asyncio
async def test_backend_stream_error_moves_to_errored() -> None:
    backend = FakeBackend()
    session, outbox, _ = await _connected(backend)

    backend.handles[0].fail(RuntimeError("socket reset"))
    await wait_until(lambda: session.state is SessionState.ERRORED)

    assert outbox.envelopes[-1] == ErrorEnvelope("socket reset")
    assert backend.handles[0].close_calls == 1


@pytest.mark.asyncio
async def test_backend_connect_failure_reports_error() -> None:
    backend = FakeBackend(fail_with=RuntimeError("invalid api key"))
    session, outbox, _ = _session(backend)

    session.connect(live_config())
    await wait_until(lambda: session.state is SessionState.ERRORED)

    assert outbox.envelopes == [ErrorEnvelope("Failed to connect to Gemini: invalid api key")]
    assert session.backend_closes == 0


@pytest.mark.asyncio
async def test_disconnect_is_idempotent() -> None:
    backend = FakeBackend()
    session, outbox, _ = await _connected(backend)

    assert await session.disconnect()
    assert not await session.disconnect()

    assert session.state is SessionState.CLOSED
    assert backend.handles[0].close_calls == 1
    assert outbox.of_type(DisconnectedEnvelope) == [DisconnectedEnvelope()]


@pytest.mark.asyncio
async def test_disconnect_while_idle_is_noop() -> None:
    session, outbox, _ = _session(FakeBackend())
    assert not await session.disconnect()
    assert session.state is SessionState.IDLE
    assert outbox.envelopes == []


@pytest.mark.asyncio
async def test_close_while_connecting_cancels_and_releases_late_handle() -> None:
    backend = FakeBackend(hold_open=True)
    session, outbox, _ = _session(backend)

    session.connect(live_config())
    await wait_until(lambda: len(backend.configs) == 1)
    assert session.state is SessionState.CONNECTING

    await session.close()
    assert session.state is SessionState.CLOSED
    assert backend.cancelled == 1

    late = FakeHandle()
    await session.on_backend_open(late)
    assert late.close_calls == 1
    assert session.state is SessionState.CLOSED
    assert not session.has_backend_handle
    assert outbox.envelopes == []


@pytest.mark.asyncio
async def test_close_is_silent_and_releases_handle_once() -> None:
    backend = FakeBackend()
    session, outbox, _ = await _connected(backend)

    await session.close()
    await session.close()

    assert session.state is SessionState.CLOSED
    assert backend.handles[0].close_calls == 1
    assert outbox.envelopes == [ConnectedEnvelope()]


@pytest.mark.asyncio
async def test_send_audio_before_active_returns_false() -> None:
    backend = FakeBackend(hold_open=True)
    session, _, _ = _session(backend)

    assert not await session.send_audio(b"\x00", "audio/pcm;rate=16000")
    session.connect(live_config())
    assert not await session.send_audio(b"\x00", "audio/pcm;rate=16000")

    await session.close()


@pytest.mark.asyncio
async def test_send_audio_forwards_and_wraps_failures() -> None:
    backend = FakeBackend()
    session, _, _ = await _connected(backend)
    handle = backend.handles[0]

    assert await session.send_audio(b"\x01\x02", "audio/pcm;rate=16000")
    assert handle.sent == [(b"\x01\x02", "audio/pcm;rate=16000")]

    handle.send_error = ConnectionError("pipe closed")
    with pytest.raises(BackendStreamError):
        await session.send_audio(b"\x03", "audio/pcm;rate=16000")

    await session.close()


@pytest.mark.asyncio
async def test_close_from_idle_goes_straight_to_closed() -> None:
    session, _, _ = _session(FakeBackend())
    await session.close()
    assert session.state is SessionState.CLOSED
    await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_close_during_error_teardown_waits_and_keeps_terminal_state() -> None:
    backend = FakeBackend()
    session, outbox, _ = await _connected(backend)
    handle = backend.handles[0]
    handle.close_gate = asyncio.Event()

    handle.fail(RuntimeError("boom"))
    await wait_until(lambda: session.state is SessionState.CLOSING)

    closer = asyncio.create_task(session.close())
    await asyncio.sleep(0.01)
    assert not closer.done()

    handle.close_gate.set()
    await asyncio.wait_for(closer, timeout=1.0)
    await wait_until(lambda: len(outbox.envelopes) == 2)

    assert session.state is SessionState.ERRORED
    assert handle.close_calls == 1
    assert outbox.envelopes == [ConnectedEnvelope(), ErrorEnvelope("boom")]

    await session.close()
    assert not await session.disconnect()
    assert session.state is SessionState.ERRORED
    assert handle.close_calls == 1
