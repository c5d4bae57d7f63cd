"""Local (on-host) speech synthesis used as the fallback tier."""

from __future__ import annotations

import shutil
import asyncio
import logging
from src.config.synthesis import LOCAL_AUDIO_MIME_TYPE, LOCAL_TTS_BINARY_CANDIDATES

logger = logging.getLogger(__name__)


class EspeakSynthesizer:
    """Runs espeak-ng (or espeak) and captures the WAV it writes to stdout."""

    mime_type = LOCAL_AUDIO_MIME_TYPE

    def __init__(self, binary: str) -> None:
        self._binary = binary

    @property
    def binary(self) -> str:
        return self._binary

    async def synthesize(self, text: str, voice: str) -> bytes:
        # "--" ends option parsing so text starting with "-" is spoken, not parsed.
        process = await asyncio.create_subprocess_exec(
            self._binary,
            "-v",
            voice,
            "--stdout",
            "--",
            text,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await process.communicate()
        except asyncio.CancelledError:
            if process.returncode is None:
                process.kill()
            raise

        if process.returncode != 0:
            err = (stderr.decode(errors="ignore") if stderr else "").strip()
            raise RuntimeError(f"{self._binary} exited with code {process.returncode}: {err or 'no output'}")
        if not stdout:
            raise RuntimeError(f"{self._binary} produced no audio")
        logger.debug("local synthesis done voice=%s bytes=%s", voice, len(stdout))
        return stdout


def detect_local_synthesizer(*, enabled: bool, binary: str = "") -> EspeakSynthesizer | None:
    """Decide once whether this host can run the fallback tier."""
    if not enabled:
        logger.info("local synthesis: disabled by configuration")
        return None

    candidates = (binary,) if binary else LOCAL_TTS_BINARY_CANDIDATES
    for candidate in candidates:
        path = shutil.which(candidate)
        if path:
            logger.info("local synthesis: available via %s", path)
            return EspeakSynthesizer(path)

    logger.info("local synthesis: unavailable (none of %s on PATH)", ", ".join(candidates))
    return None


__all__ = ["EspeakSynthesizer", "detect_local_synthesizer"]
