"""Training sessions: start, completion and history."""

from .payload import SESSION_MODES, SESSION_STATUSES
from .service import SessionService

__all__ = ["SESSION_MODES", "SESSION_STATUSES", "SessionService"]
