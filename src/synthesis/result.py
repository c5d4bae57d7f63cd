"""Synthesis request/result types (dataclasses only)."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class SynthesisProvider(str, enum.Enum):
    PRIMARY = "primary"
    FALLBACK = "fallback"


@dataclass(frozen=True, slots=True)
class SynthesisRequest:
    text: str
    voice: str | None
    api_key: str | None


@dataclass(frozen=True, slots=True)
class SynthesisResult:
    audio: bytes
    mime_type: str
    provider: SynthesisProvider


__all__ = ["SynthesisProvider", "SynthesisRequest", "SynthesisResult"]
