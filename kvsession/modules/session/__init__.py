"""
Session Module - Black Box Interface

Purpose: Manage cookie-based session lifecycle
Interface: create(), get(), update(), delete()
Hidden: Session ID generation, cache key layout, TTL handling

Works with any Cache backend (Redis, in-memory).
"""

from .errors import SessionError, SessionLoadError, SessionMisuseError, SessionStoreError
from .session import SESSION_KEY_PREFIX, SessionCookie, SessionManager

__all__ = [
    "SessionManager",
    "SessionCookie",
    "SESSION_KEY_PREFIX",
    "SessionError",
    "SessionMisuseError",
    "SessionLoadError",
    "SessionStoreError",
]
