"""Shared error types for the live relay server."""

from __future__ import annotations

from typing import ClassVar
from dataclasses import dataclass


@dataclass(eq=False)
class RelayError(Exception):
    """Base class for errors scoped to one session or one request."""

    code: ClassVar[str] = "relay_error"

    message: str = ""

    def __post_init__(self) -> None:
        self.message = self.message or self.code
        super().__init__(self.message)


@dataclass(eq=False)
class MissingCredentialError(RelayError):
    """Raised when a caller-supplied API key is absent or blank."""

    code: ClassVar[str] = "missing_credential"


@dataclass(eq=False)
class InvalidRequestError(RelayError):
    """Raised for caller input errors such as empty text or prompt."""

    code: ClassVar[str] = "invalid_request"


@dataclass(eq=False)
class BackendConnectError(RelayError):
    code: ClassVar[str] = "backend_connect_failed"


@dataclass(eq=False)
class BackendStreamError(RelayError):
    code: ClassVar[str] = "backend_stream_error"


@dataclass(eq=False)
class SynthesisError(RelayError):
    """Raised when every available synthesis tier failed."""

    code: ClassVar[str] = "synthesis_failed"


@dataclass(eq=False)
class DecodeError(RelayError, ValueError):
    """Raised for inbound frames that are not a valid client envelope."""

    code: ClassVar[str] = "decode_error"


@dataclass(frozen=True, slots=True)
class RateLimitError(Exception):
    """Raised when a sliding-window rate limiter is saturated."""

    retry_in: float
    limit: int
    window_seconds: float


__all__ = [
    "BackendConnectError",
    "BackendStreamError",
    "DecodeError",
    "InvalidRequestError",
    "MissingCredentialError",
    "RateLimitError",
    "RelayError",
    "SynthesisError",
]
