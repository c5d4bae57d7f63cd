"""JSON body helpers for the HTTP endpoints."""

from __future__ import annotations

from typing import Any

import orjson
from fastapi import Request

from src.errors import InvalidRequestError


async def read_json_object(request: Request) -> dict[str, Any]:
    body = await request.body()
    if not body:
        return {}
    try:
        payload = orjson.loads(body)
    except orjson.JSONDecodeError as exc:
        raise InvalidRequestError(f"invalid JSON body: {exc}") from exc
    if not isinstance(payload, dict):
        raise InvalidRequestError("request body must be a JSON object")
    return payload


def optional_str(payload: dict[str, Any], *keys: str) -> str | None:
    """Return the first non-blank string value among ``keys``."""
    for key in keys:
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


__all__ = ["optional_str", "read_json_object"]
