"""Session error taxonomy."""

from typing import Optional


class SessionError(Exception):
    """Base exception for session operations."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        self.cause = cause
        super().__init__(message)


class SessionMisuseError(SessionError):
    """Raised when an operation needs a session cookie that the request lacks."""


class SessionLoadError(SessionError):
    """Raised when a cookie is present but its payload cannot be loaded."""


class SessionStoreError(SessionError):
    """Raised when an updated payload cannot be written back."""
