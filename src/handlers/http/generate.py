"""POST /api/generate: one-shot text generation passthrough."""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import ORJSONResponse

from src.state import RuntimeDeps
from src.errors import RelayError, InvalidRequestError, MissingCredentialError

from .payload import optional_str, read_json_object

logger = logging.getLogger(__name__)


async def handle_generate(request: Request, runtime_deps: RuntimeDeps) -> ORJSONResponse:
    try:
        payload = await read_json_object(request)
        prompt = optional_str(payload, "prompt")
        if prompt is None:
            raise InvalidRequestError("Missing prompt in request body")
        api_key = optional_str(payload, "apiKey")
        if api_key is None:
            raise MissingCredentialError("Missing API key")
    except RelayError as exc:
        return ORJSONResponse({"error": exc.message}, status_code=400)

    model = optional_str(payload, "model") or runtime_deps.settings.models.text_model
    try:
        text = await runtime_deps.text_generator.generate(prompt, model, api_key)
    except Exception as exc:
        logger.exception("Error in /api/generate model=%s", model)
        return ORJSONResponse({"error": "Failed to generate content", "details": str(exc)}, status_code=500)
    return ORJSONResponse({"text": text})


__all__ = ["handle_generate"]
