from .relay import RelayPump
from .session import Session
from .handle import LiveHandle
from .backend import LiveBackend, LiveSessionConfig
from .envelope import decode_envelope, encode_envelope

__all__ = [
    "LiveBackend",
    "LiveHandle",
    "LiveSessionConfig",
    "RelayPump",
    "Session",
    "decode_envelope",
    "encode_envelope",
]
