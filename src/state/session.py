"""Lifecycle states of a realtime relay session."""

from __future__ import annotations

import enum


class SessionState(str, enum.Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    ACTIVE = "active"
    CLOSING = "closing"
    CLOSED = "closed"
    ERRORED = "errored"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.CLOSED, SessionState.ERRORED)

    @property
    def is_live(self) -> bool:
        """True while a backend handle may exist or be on its way."""
        return self in (SessionState.CONNECTING, SessionState.ACTIVE)


__all__ = ["SessionState"]
