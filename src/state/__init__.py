from .runtime import RuntimeDeps
from .settings import AppSettings
from .session import SessionState, SessionStats

__all__ = ["AppSettings", "RuntimeDeps", "SessionState", "SessionStats"]
