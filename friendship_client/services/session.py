"""Credential providers consumed by the relationship core."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Iterable, Protocol, runtime_checkable

from ..clients.errors import UnauthorizedError
from ..config import Settings, get_settings

if TYPE_CHECKING:
    from ..clients.friends_api import FriendsApiClient

logger = logging.getLogger(__name__)

# Either a fixed bearer token or a callable returning the current one
TokenSource = str | Callable[[], str]


class SessionError(UnauthorizedError):
    """Raised when no credential is available."""

    reason = "session"


@runtime_checkable
class SessionProvider(Protocol):
    @property
    def token(self) -> str: ...

    def login(self, token: str, user_id: str | None = None) -> None: ...

    def logout(self) -> None: ...


def resolve_token(source: TokenSource) -> str:
    """Return the bearer token held by ``source``, reading callables lazily."""
    return source() if callable(source) else source


class StaticSession:
    """In-memory session holding a bearer token between login and logout."""

    def __init__(self, token: str | None = None, user_id: str | None = None) -> None:
        self._token: str | None = None
        self._user_id: str | None = None
        if token is not None:
            self.login(token, user_id)

    @property
    def token(self) -> str:
        if self._token is None:
            raise SessionError("Not signed in")
        return self._token

    @property
    def user_id(self) -> str | None:
        return self._user_id

    @property
    def active(self) -> bool:
        return self._token is not None

    def login(self, token: str, user_id: str | None = None) -> None:
        if not token or not token.strip():
            raise SessionError("A bearer token is required")
        self._token = token.strip()
        self._user_id = user_id
        logger.info("Session logged in | user_id=%s", user_id or "-")

    def logout(self) -> None:
        logger.info("Session logged out | user_id=%s", self._user_id or "-")
        self._token = None
        self._user_id = None


def session_from_settings(settings: Settings | None = None) -> StaticSession:
    settings = settings or get_settings()
    token = (settings.api_token or "").strip()
    if not token:
        raise SessionError("FRIENDS_API_TOKEN is not configured")
    return StaticSession(token)


async def sign_in(client: FriendsApiClient, session: SessionProvider, username: str, password: str) -> str:
    """Exchange credentials for a token and store it in ``session``.

    Returns the signed-in user id. Service failures propagate unchanged.
    """
    result = await client.login(username, password)
    session.login(result.token, result.user_id)
    return result.user_id


async def sign_up(
    client: FriendsApiClient,
    session: SessionProvider,
    username: str,
    password: str,
    interests: str | Iterable[str] = "",
) -> str:
    """Create an account and sign straight into it."""
    result = await client.register(username, password, interests)
    session.login(result.token, result.user_id)
    return result.user_id


__all__ = [
    "SessionError",
    "SessionProvider",
    "StaticSession",
    "TokenSource",
    "resolve_token",
    "session_from_settings",
    "sign_in",
    "sign_up",
]
