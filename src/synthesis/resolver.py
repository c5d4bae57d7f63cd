"""Two-tier speech synthesis: Gemini first, local synthesis as the fallback."""

from __future__ import annotations

import asyncio
import logging
from src.errors import SynthesisError, InvalidRequestError, MissingCredentialError

from .voices import resolve_voice
from .provider import SpeechProvider
from .capability import LocalSynthesizer
from .result import SynthesisResult, SynthesisRequest, SynthesisProvider

logger = logging.getLogger(__name__)


def _describe(exc: BaseException) -> str:
    if isinstance(exc, TimeoutError):
        return "timed out"
    return str(exc) or type(exc).__name__


class SynthesisResolver:
    """Resolve a synthesis request through the primary provider and, if needed, the local tier.

    Each tier gets exactly one attempt. Fallback availability is fixed at
    construction; pass ``local=None`` on hosts without a local synthesizer.
    """

    def __init__(
        self,
        *,
        primary: SpeechProvider,
        local: LocalSynthesizer | None,
        primary_timeout_s: float,
    ) -> None:
        self._primary = primary
        self._local = local
        self._primary_timeout_s = float(primary_timeout_s)

    @property
    def fallback_available(self) -> bool:
        return self._local is not None

    async def synthesize(self, text: str, voice: str | None, api_key: str | None) -> SynthesisResult:
        return await self.resolve(SynthesisRequest(text=text, voice=voice, api_key=api_key))

    async def resolve(self, request: SynthesisRequest) -> SynthesisResult:
        if not request.text or not request.text.strip():
            raise InvalidRequestError("Missing text in request body")
        if not request.api_key or not request.api_key.strip():
            raise MissingCredentialError("Missing API key")

        entry = resolve_voice(request.voice)

        try:
            audio, mime_type = await self._call_primary(request.text, entry.backend_voice, request.api_key.strip())
        except Exception as exc:
            primary_exc = exc
            primary_error = _describe(exc)
            logger.warning("primary synthesis failed voice=%s: %s", entry.backend_voice, primary_error)
        else:
            return SynthesisResult(audio=audio, mime_type=mime_type, provider=SynthesisProvider.PRIMARY)

        if self._local is None:
            raise SynthesisError(f"primary synthesis failed: {primary_error}") from primary_exc

        try:
            audio = await self._local.synthesize(request.text, entry.local_voice)
        except Exception as exc:
            local_error = _describe(exc)
            logger.warning("local synthesis failed voice=%s: %s", entry.local_voice, local_error)
            raise SynthesisError(
                f"primary synthesis failed: {primary_error}; local synthesis failed: {local_error}"
            ) from exc
        if not audio:
            raise SynthesisError(
                f"primary synthesis failed: {primary_error}; local synthesis produced no audio"
            ) from primary_exc

        logger.info("synthesis served by local fallback voice=%s bytes=%s", entry.local_voice, len(audio))
        return SynthesisResult(audio=audio, mime_type=self._local.mime_type, provider=SynthesisProvider.FALLBACK)

    async def _call_primary(self, text: str, voice: str, api_key: str) -> tuple[bytes, str]:
        call = self._primary.synthesize(text, voice, api_key)
        if self._primary_timeout_s > 0:
            audio, mime_type = await asyncio.wait_for(call, timeout=self._primary_timeout_s)
        else:
            audio, mime_type = await call
        if not audio:
            raise ValueError("no audio payload returned by primary provider")
        return audio, mime_type


__all__ = ["SynthesisResolver"]
