"""Gemini implementations of the relay, synthesis and text-generation contracts."""

from .text import GeminiTextGenerator
from .generator import TextGenerator
from .speech import GeminiSpeechProvider
from .live import GeminiLiveBackend

__all__ = ["GeminiLiveBackend", "GeminiSpeechProvider", "GeminiTextGenerator", "TextGenerator"]
