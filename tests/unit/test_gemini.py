from __future__ import annotations

import base64
from types import SimpleNamespace

import pytest
from fakes import live_config
from google.genai import types

from src.errors import MissingCredentialError
from src.gemini.client import build_genai_client
from src.gemini.speech import GeminiSpeechProvider, extract_audio
from src.gemini.live import build_live_config
from src.gemini.handle import GeminiLiveHandle, message_to_payload


def _response(*parts: object) -> SimpleNamespace:
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=list(parts)))])


def _audio_part(data: object, mime_type: str | None = None) -> SimpleNamespace:
    return SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime_type))


def test_extract_audio_finds_first_inline_part() -> None:
    response = _response(SimpleNamespace(inline_data=None), _audio_part(b"\x01\x02", "audio/pcm"))
    assert extract_audio(response) == (b"\x01\x02", "audio/pcm")


def test_extract_audio_decodes_base64_and_defaults_mime() -> None:
    response = _response(_audio_part(base64.b64encode(b"\x00\x01").decode()))
    audio, mime_type = extract_audio(response)
    assert audio == b"\x00\x01"
    assert mime_type == "audio/L16;codec=pcm;rate=24000"


@pytest.mark.parametrize("response", [SimpleNamespace(candidates=None), _response(_audio_part(b""))])
def test_extract_audio_without_audio_raises(response: object) -> None:
    with pytest.raises(ValueError):
        extract_audio(response)


def test_message_to_payload_uses_camel_case() -> None:
    content = types.LiveServerContent(turn_complete=True)
    assert message_to_payload(SimpleNamespace(server_content=content)) == {"serverContent": {"turnComplete": True}}
    assert message_to_payload(SimpleNamespace(server_content=None)) == {}


def test_build_live_config_carries_voice_and_instruction() -> None:
    config = build_live_config(live_config(voice="Kore"))

    assert config.response_modalities == [types.Modality.AUDIO]
    assert config.system_instruction.parts[0].text == "be nice"
    assert config.speech_config.voice_config.prebuilt_voice_config.voice_name == "Kore"
    assert config.input_audio_transcription is not None
    assert config.output_audio_transcription is not None


def test_build_genai_client_requires_key() -> None:
    with pytest.raises(MissingCredentialError):
        build_genai_client("  ")


class _FakeModels:
    def __init__(self, response: object) -> None:
        self.response = response
        self.kwargs: dict = {}

    async def generate_content(self, **kwargs):
        self.kwargs = kwargs
        return self.response


@pytest.mark.asyncio
async def test_speech_provider_requests_audio_with_voice() -> None:
    models = _FakeModels(_response(_audio_part(b"\x05", "audio/pcm")))
    client = SimpleNamespace(aio=SimpleNamespace(models=models))
    seen: list[tuple] = []

    def factory(api_key: str, timeout_ms: int | None):
        seen.append((api_key, timeout_ms))
        return client

    provider = GeminiSpeechProvider(model="tts-model", timeout_s=2.5, client_factory=factory)
    audio, mime_type = await provider.synthesize("hi", "Orus", "key")

    assert (audio, mime_type) == (b"\x05", "audio/pcm")
    assert seen == [("key", 2500)]
    assert models.kwargs["model"] == "tts-model"
    assert models.kwargs["contents"] == "hi"
    speech = models.kwargs["config"].speech_config
    assert speech.voice_config.prebuilt_voice_config.voice_name == "Orus"


class _FakeLiveSession:
    def __init__(self, turns: list[list[object]]) -> None:
        self.turns = turns
        self.inputs: list[types.Blob] = []

    async def send_realtime_input(self, *, audio: types.Blob) -> None:
        self.inputs.append(audio)

    async def receive(self):
        if not self.turns:
            raise RuntimeError("stream reset")
        for message in self.turns.pop(0):
            yield message


class _FakeStack:
    def __init__(self) -> None:
        self.closed = 0

    async def aclose(self) -> None:
        self.closed += 1


@pytest.mark.asyncio
async def test_live_handle_reads_across_turns_and_closes_once() -> None:
    first = SimpleNamespace(server_content=types.LiveServerContent(turn_complete=True))
    second = SimpleNamespace(server_content=types.LiveServerContent(interrupted=True))
    session = _FakeLiveSession([[first], [second]])
    stack = _FakeStack()
    handle = GeminiLiveHandle(session, stack)

    await handle.send_audio(b"\x01", "audio/pcm;rate=16000")
    assert session.inputs[0].data == b"\x01"
    assert session.inputs[0].mime_type == "audio/pcm;rate=16000"

    payloads = []
    with pytest.raises(RuntimeError):
        async for payload in handle.events():
            payloads.append(payload)
    assert payloads == [
        {"serverContent": {"turnComplete": True}},
        {"serverContent": {"interrupted": True}},
    ]

    await handle.close()
    await handle.close()
    assert stack.closed == 1
