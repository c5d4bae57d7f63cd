from .voices import VoiceEntry, resolve_voice
from .resolver import SynthesisResolver
from .provider import SpeechProvider
from .capability import LocalSynthesizer
from .local import EspeakSynthesizer, detect_local_synthesizer
from .result import SynthesisResult, SynthesisRequest, SynthesisProvider

__all__ = [
    "EspeakSynthesizer",
    "LocalSynthesizer",
    "SpeechProvider",
    "SynthesisProvider",
    "SynthesisRequest",
    "SynthesisResolver",
    "SynthesisResult",
    "VoiceEntry",
    "detect_local_synthesizer",
    "resolve_voice",
]
