"""POST /api/generate-tts: HTTP front of the synthesis resolver."""

from __future__ import annotations

import base64
import logging

from fastapi import Request
from fastapi.responses import ORJSONResponse

from src.state import RuntimeDeps
from src.errors import RelayError, SynthesisError, InvalidRequestError, MissingCredentialError

from .payload import optional_str, read_json_object

logger = logging.getLogger(__name__)


async def handle_generate_tts(request: Request, runtime_deps: RuntimeDeps) -> ORJSONResponse:
    try:
        payload = await read_json_object(request)
    except RelayError as exc:
        return ORJSONResponse({"error": exc.message}, status_code=400)

    text = optional_str(payload, "text") or ""
    voice = optional_str(payload, "voice", "voiceName") or runtime_deps.settings.synthesis.default_voice
    api_key = optional_str(payload, "apiKey")

    try:
        result = await runtime_deps.synthesis.synthesize(text, voice, api_key)
    except (InvalidRequestError, MissingCredentialError) as exc:
        return ORJSONResponse({"error": exc.message}, status_code=400)
    except SynthesisError as exc:
        logger.error("Error in /api/generate-tts voice=%s: %s", voice, exc.message)
        return ORJSONResponse({"error": "Failed to generate TTS", "details": exc.message}, status_code=500)

    logger.info("tts served voice=%s provider=%s bytes=%s", voice, result.provider.value, len(result.audio))
    return ORJSONResponse(
        {
            "audioBase64": base64.b64encode(result.audio).decode("ascii"),
            "audioMimeType": result.mime_type,
        }
    )


__all__ = ["handle_generate_tts"]
