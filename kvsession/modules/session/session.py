import logging
import secrets
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol

from fastapi import Response

from ...config.provider import SessionConfig
from ..cache import Cache, CacheError
from .errors import SessionLoadError, SessionMisuseError, SessionStoreError

logger = logging.getLogger(__name__)

SESSION_KEY_PREFIX = "session:"

# 256 bits of randomness, URL-safe
SESSION_ID_BYTES = 32


class CookieRequest(Protocol):
    """Anything carrying request cookies (Starlette/FastAPI Request)."""

    @property
    def cookies(self) -> Mapping[str, str]:
        ...


@dataclass(frozen=True)
class SessionCookie:
    """Attributes of the session cookie to send to, or clear from, a client."""
    name: str
    value: str
    secure: bool
    path: str
    max_age: int
    http_only: bool = True

    def apply(self, response: Response) -> None:
        """
        Write this cookie onto a Starlette response.

        Args:
            response: Outgoing FastAPI/Starlette response
        """
        response.set_cookie(
            key=self.name,
            value=self.value,
            max_age=self.max_age,
            path=self.path,
            secure=self.secure,
            httponly=self.http_only,
        )


class SessionManager:
    def __init__(self, cache: Cache, config: Optional[SessionConfig] = None):
        """
        Initialize session manager.

        Args:
            cache: Cache holding session payloads
            config: Cookie name, secure flag, TTL and path (defaults: "session",
                secure, 168 hours, "/")
        """
        self.cache = cache
        self.config = config or SessionConfig()

    @property
    def max_age(self) -> int:
        return int(self.config.ttl.total_seconds())

    @staticmethod
    def cache_key(session_id: str) -> str:
        return SESSION_KEY_PREFIX + session_id

    def _cookie(self, value: str, max_age: int) -> SessionCookie:
        return SessionCookie(
            name=self.config.name,
            value=value,
            secure=self.config.secure,
            path=self.config.path,
            max_age=max_age,
        )

    def session_id(self, request: CookieRequest) -> Optional[str]:
        """Session ID carried by the request, or None if there is no cookie."""
        return request.cookies.get(self.config.name) or None

    async def create(self, payload: Any, *, timeout: Optional[float] = None) -> SessionCookie:
        """
        Start a new session.

        Args:
            payload: Session data (any JSON-serializable value)
            timeout: Seconds allowed for the cache write

        Returns:
            Cookie referencing the new session

        Logic:
        1. Generate a random session ID
        2. Store payload under "session:<id>" with the configured TTL
        3. Mint an HTTP-only cookie with max-age equal to the TTL

        Cache errors propagate unchanged.
        """
        session_id = secrets.token_urlsafe(SESSION_ID_BYTES)
        await self.cache.set(self.cache_key(session_id), payload, self.config.ttl, timeout=timeout)
        logger.debug("Created session (cookie=%s, ttl=%ss)", self.config.name, self.max_age)
        return self._cookie(session_id, self.max_age)

    async def get(
        self,
        request: CookieRequest,
        model: Any = None,
        *,
        default: Any = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Load the session payload for a request.

        Reads never extend the session TTL.

        Args:
            request: Incoming request
            model: Shape to decode the payload into (None = plain JSON values)
            default: Returned when the request carries no session cookie; pass
                a sentinel to tell "no session" apart from a stored None payload

        Returns:
            Payload, or default when the request carries no session cookie

        Raises:
            SessionLoadError: Cookie present but the payload is missing,
                expired, undecodable or the cache failed
        """
        session_id = self.session_id(request)
        if session_id is None:
            return default

        try:
            return await self.cache.get(self.cache_key(session_id), model, timeout=timeout)
        except CacheError as e:
            raise SessionLoadError(f"failed to load session from backend: {e}", cause=e) from e

    async def update(self, request: CookieRequest, payload: Any, *, timeout: Optional[float] = None) -> None:
        """
        Replace the session payload and reset its TTL to the full duration.

        Raises:
            SessionMisuseError: The request has no session cookie
            SessionStoreError: The cache write failed
        """
        session_id = self.session_id(request)
        if session_id is None:
            raise SessionMisuseError("no session found to update")

        try:
            await self.cache.set(
                self.cache_key(session_id), payload, self.config.ttl, timeout=timeout
            )
        except CacheError as e:
            raise SessionStoreError(f"failed to update session in backend: {e}", cause=e) from e

    def delete(self) -> SessionCookie:
        """Cookie telling the client to discard its session immediately. Never touches the cache."""
        return self._cookie("", -1)
