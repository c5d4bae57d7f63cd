from .runtime import RuntimeDeps
from .settings import AppSettings
from .session import SessionState

__all__ = ["AppSettings", "RuntimeDeps", "SessionState"]
