from __future__ import annotations

import base64
import contextlib

import pytest
from fakes import (
    FakeBackend,
    FakeTextGenerator,
    FakeSpeechProvider,
    FakeLocalSynthesizer,
    make_settings,
)
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from src.server import create_app
from src.state import RuntimeDeps
from src.state.settings import LimitsSettings
from src.synthesis.resolver import SynthesisResolver
from src.handlers.connections import ConnectionRegistry
from src.config.websocket import WS_CLOSE_BUSY_CODE, WS_ERROR_SERVER_AT_CAPACITY


def _deps(
    *,
    backend: FakeBackend | None = None,
    primary: FakeSpeechProvider | None = None,
    local: FakeLocalSynthesizer | None = None,
    text_generator: FakeTextGenerator | None = None,
    max_connections: int = 10,
) -> RuntimeDeps:
    settings = make_settings(
        limits=LimitsSettings(
            max_concurrent_connections=max_connections,
            ws_message_window_seconds=60.0,
            ws_max_messages_per_window=1000,
        )
    )
    return RuntimeDeps(
        connections=ConnectionRegistry(max_connections=max_connections),
        live_backend=backend or FakeBackend(),
        synthesis=SynthesisResolver(
            primary=primary or FakeSpeechProvider(),
            local=local,
            primary_timeout_s=1.0,
        ),
        text_generator=text_generator or FakeTextGenerator(),
        settings=settings,
    )


@pytest.fixture
def client_factory():
    with contextlib.ExitStack() as stack:
        yield lambda deps: stack.enter_context(TestClient(create_app(runtime_deps=deps)))


def test_root_and_health(client_factory) -> None:
    client = client_factory(_deps())

    root = client.get("/")
    assert root.status_code == 200
    assert root.json() == {"status": "ok", "message": "Live relay backend", "version": "1.0.0"}

    health = client.get("/api/health")
    assert health.status_code == 200
    assert health.json() == {"status": "ok"}


def test_generate_tts_returns_base64_audio(client_factory) -> None:
    primary = FakeSpeechProvider(audio=base64.b64decode("AAA="), mime_type="audio/L16;codec=pcm;rate=24000")
    client = client_factory(_deps(primary=primary))

    response = client.post("/api/generate-tts", json={"text": "hello", "voice": "Kore", "apiKey": "k"})

    assert response.status_code == 200
    assert response.json() == {"audioBase64": "AAA=", "audioMimeType": "audio/L16;codec=pcm;rate=24000"}
    assert primary.calls == [("hello", "Kore", "k")]


def test_generate_tts_accepts_voice_name_alias(client_factory) -> None:
    primary = FakeSpeechProvider()
    client = client_factory(_deps(primary=primary))

    client.post("/api/generate-tts", json={"text": "hello", "voiceName": "Leda", "apiKey": "k"})

    assert primary.calls[0][1] == "Leda"


def test_generate_tts_uses_fallback(client_factory) -> None:
    primary = FakeSpeechProvider(error=RuntimeError("quota"))
    local = FakeLocalSynthesizer(audio=b"RIFF")
    client = client_factory(_deps(primary=primary, local=local))

    response = client.post("/api/generate-tts", json={"text": "hello", "apiKey": "k"})

    assert response.status_code == 200
    assert response.json() == {"audioBase64": base64.b64encode(b"RIFF").decode(), "audioMimeType": "audio/wav"}


@pytest.mark.parametrize(
    "body",
    [
        {"apiKey": "k"},
        {"text": "", "apiKey": "k"},
        {"text": "hello"},
    ],
)
def test_generate_tts_rejects_bad_requests(client_factory, body: dict) -> None:
    primary = FakeSpeechProvider()
    client = client_factory(_deps(primary=primary))

    response = client.post("/api/generate-tts", json=body)

    assert response.status_code == 400
    assert "error" in response.json()
    assert primary.calls == []


def test_generate_tts_rejects_invalid_json(client_factory) -> None:
    client = client_factory(_deps())
    response = client.post("/api/generate-tts", content=b"{nope", headers={"content-type": "application/json"})
    assert response.status_code == 400


def test_generate_tts_failure_is_500(client_factory) -> None:
    client = client_factory(_deps(primary=FakeSpeechProvider(error=RuntimeError("quota"))))

    response = client.post("/api/generate-tts", json={"text": "hello", "apiKey": "k"})

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Failed to generate TTS"
    assert "quota" in body["details"]


def test_generate_returns_text(client_factory) -> None:
    generator = FakeTextGenerator(text="bonjour")
    client = client_factory(_deps(text_generator=generator))

    response = client.post("/api/generate", json={"prompt": "say hi", "apiKey": "k"})

    assert response.status_code == 200
    assert response.json() == {"text": "bonjour"}
    assert generator.calls == [("say hi", "text-model", "k")]


def test_generate_honours_model_override(client_factory) -> None:
    generator = FakeTextGenerator()
    client = client_factory(_deps(text_generator=generator))

    client.post("/api/generate", json={"prompt": "hi", "apiKey": "k", "model": "other-model"})

    assert generator.calls[0][1] == "other-model"


def test_generate_missing_prompt_is_400(client_factory) -> None:
    client = client_factory(_deps())
    response = client.post("/api/generate", json={"apiKey": "k"})
    assert response.status_code == 400
    assert response.json() == {"error": "Missing prompt in request body"}


def test_generate_missing_api_key_is_400(client_factory) -> None:
    client = client_factory(_deps())
    response = client.post("/api/generate", json={"prompt": "hi"})
    assert response.status_code == 400
    assert response.json() == {"error": "Missing API key"}


def test_generate_failure_is_500(client_factory) -> None:
    client = client_factory(_deps(text_generator=FakeTextGenerator(error=RuntimeError("bad model"))))

    response = client.post("/api/generate", json={"prompt": "hi", "apiKey": "k"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate content", "details": "bad model"}


def test_live_session_round_trip(client_factory) -> None:
    event = {"serverContent": {"turnComplete": True}}
    backend = FakeBackend(events=[event])
    client = client_factory(_deps(backend=backend))

    with client.websocket_connect("/api/live") as ws:
        ws.send_json({"type": "connect", "config": {"apiKey": "k", "voiceName": "Kore", "topic": "music"}})
        assert ws.receive_json() == {"type": "connected"}
        assert ws.receive_json() == {"type": "gemini-message", "data": event}

        ws.send_json({"type": "audio-input", "audioData": base64.b64encode(b"\x01\x02").decode()})
        ws.send_json({"type": "disconnect"})
        assert ws.receive_json() == {"type": "disconnected"}

    assert backend.configs[0].voice == "Kore"
    assert "music" in backend.configs[0].system_instruction
    assert backend.handles[0].sent == [(b"\x01\x02", "audio/pcm;rate=16000")]
    assert backend.handles[0].close_calls == 1


def test_live_connect_without_api_key(client_factory) -> None:
    backend = FakeBackend()
    client = client_factory(_deps(backend=backend))

    with client.websocket_connect("/api/live") as ws:
        ws.send_json({"type": "connect", "config": {}})
        assert ws.receive_json() == {"type": "error", "error": "Missing API key"}

    assert backend.configs == []


def test_live_malformed_frame_reports_error(client_factory) -> None:
    client = client_factory(_deps())

    with client.websocket_connect("/api/live") as ws:
        ws.send_text("{not json")
        message = ws.receive_json()
        assert message["type"] == "error"
        ws.send_json({"type": "teleport"})
        assert ws.receive_json() == {"type": "error", "error": "message type 'teleport' is not supported"}


def test_live_rejects_when_at_capacity(client_factory) -> None:
    client = client_factory(_deps(max_connections=1))

    with client.websocket_connect("/api/live"):
        with client.websocket_connect("/api/live") as second:
            assert second.receive_json() == {"type": "error", "error": WS_ERROR_SERVER_AT_CAPACITY}
            with pytest.raises(WebSocketDisconnect) as exc:
                second.receive_json()
            assert exc.value.code == WS_CLOSE_BUSY_CODE


def test_transport_close_releases_backend() -> None:
    backend = FakeBackend()
    deps = _deps(backend=backend)

    with TestClient(create_app(runtime_deps=deps)) as client:
        with client.websocket_connect("/api/live") as ws:
            ws.send_json({"type": "connect", "config": {"apiKey": "k"}})
            assert ws.receive_json() == {"type": "connected"}

    assert backend.handles[0].close_calls == 1
    assert deps.connections.get_connection_count() == 0
