from __future__ import annotations

import pytest

from src.runtime.settings_loader import load_settings
from src.config.models import DEFAULT_GEMINI_MODEL, DEFAULT_GEMINI_LIVE_MODEL
from src.config.prompts import DEFAULT_SYSTEM_INSTRUCTION_TEMPLATE

_ENV_NAMES = (
    "HOST",
    "PORT",
    "CORS_ALLOW_ORIGINS",
    "GEMINI_MODEL",
    "GEMINI_LIVE_MODEL",
    "DEFAULT_VOICE_NAME",
    "SYSTEM_INSTRUCTION_FILE",
    "DEFAULT_TOPIC",
    "TTS_PRIMARY_TIMEOUT_S",
    "LOCAL_TTS_ENABLED",
    "MAX_CONCURRENT_CONNECTIONS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = load_settings()

    assert settings.server.port == 3000
    assert settings.server.cors_allow_origins == ("*",)
    assert settings.models.text_model == DEFAULT_GEMINI_MODEL
    assert settings.models.live_model == DEFAULT_GEMINI_LIVE_MODEL
    assert settings.prompts.system_instruction_template == DEFAULT_SYSTEM_INSTRUCTION_TEMPLATE
    assert settings.prompts.default_topic == "daily life"
    assert settings.synthesis.default_voice == "Puck"
    assert settings.synthesis.primary_timeout_s == 30.0


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.test, https://b.test,")
    monkeypatch.setenv("GEMINI_LIVE_MODEL", "live-x")
    monkeypatch.setenv("DEFAULT_VOICE_NAME", "Kore")
    monkeypatch.setenv("LOCAL_TTS_ENABLED", "no")
    monkeypatch.setenv("MAX_CONCURRENT_CONNECTIONS", "0")

    settings = load_settings()

    assert settings.server.port == 8080
    assert settings.server.cors_allow_origins == ("https://a.test", "https://b.test")
    assert settings.models.live_model == "live-x"
    assert settings.synthesis.default_voice == "Kore"
    assert settings.synthesis.local_enabled is False
    assert settings.limits.max_concurrent_connections == 1


def test_unparseable_numbers_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "eighty")
    monkeypatch.setenv("TTS_PRIMARY_TIMEOUT_S", "soon")

    settings = load_settings()

    assert settings.server.port == 3000
    assert settings.synthesis.primary_timeout_s == 30.0


def test_system_instruction_file(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    path = tmp_path / "prompt.txt"
    path.write_text("Coach $user_name on $topic.\n", encoding="utf-8")
    monkeypatch.setenv("SYSTEM_INSTRUCTION_FILE", str(path))

    assert load_settings().prompts.system_instruction_template == "Coach $user_name on $topic."


@pytest.mark.parametrize("content", [None, "   \n"])
def test_bad_system_instruction_file_is_rejected(
    monkeypatch: pytest.MonkeyPatch, tmp_path, content: str | None
) -> None:
    path = tmp_path / "prompt.txt"
    if content is not None:
        path.write_text(content, encoding="utf-8")
    monkeypatch.setenv("SYSTEM_INSTRUCTION_FILE", str(path))

    with pytest.raises(ValueError):
        load_settings()
