"""Voice mapping between client-facing voice names and synthesis providers.

Clients pick voices by the Gemini prebuilt names they already know. Each entry
carries the backend-native name and the espeak-ng voice used by the local
fallback tier, so pipeline code never deals with provider-specific naming.
"""

from __future__ import annotations

from types import MappingProxyType
from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class VoiceEntry:
    backend_voice: str
    local_voice: str


DEFAULT_VOICE_KEY = "Puck"

VOICE_TABLE: Mapping[str, VoiceEntry] = MappingProxyType(
    {
        "Puck": VoiceEntry(backend_voice="Puck", local_voice="en-us+m3"),
        "Kore": VoiceEntry(backend_voice="Kore", local_voice="en-us+f3"),
        "Charon": VoiceEntry(backend_voice="Charon", local_voice="en-us+m1"),
        "Fenrir": VoiceEntry(backend_voice="Fenrir", local_voice="en-us+m4"),
        "Aoede": VoiceEntry(backend_voice="Aoede", local_voice="en-us+f2"),
        "Leda": VoiceEntry(backend_voice="Leda", local_voice="en-us+f4"),
        "Orus": VoiceEntry(backend_voice="Orus", local_voice="en-us+m2"),
        "Zephyr": VoiceEntry(backend_voice="Zephyr", local_voice="en-us+f1"),
    }
)

_FOLDED: Mapping[str, VoiceEntry] = MappingProxyType({k.casefold(): v for k, v in VOICE_TABLE.items()})


def resolve_voice(voice: str | None) -> VoiceEntry:
    """Return the mapping for ``voice``; unknown or empty names get the default entry."""
    if not voice:
        return VOICE_TABLE[DEFAULT_VOICE_KEY]
    entry = VOICE_TABLE.get(voice)
    if entry is not None:
        return entry
    return _FOLDED.get(voice.strip().casefold(), VOICE_TABLE[DEFAULT_VOICE_KEY])


__all__ = ["DEFAULT_VOICE_KEY", "VOICE_TABLE", "VoiceEntry", "resolve_voice"]
