from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from ..config import Settings, get_settings
from ..constants import (
    ACCEPT_REQUEST_PATH,
    FRIENDS_PATH,
    LOGIN_PATH,
    PENDING_PATH,
    RECOMMENDATIONS_PATH,
    REGISTER_PATH,
    SEARCH_PATH,
    TOGGLE_REQUEST_PATH,
    UNFRIEND_PATH,
)
from ..schemas import AuthResult, PendingRequest, Recommendation, SearchResult, ToggleResult, User
from .errors import MalformedResponse, NetworkError, ServerError, UnauthorizedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_USERS = TypeAdapter(list[User])
_RECOMMENDATIONS = TypeAdapter(list[Recommendation])
_PENDING = TypeAdapter(list[PendingRequest])


def _auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "detail", "error"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return response.reason_phrase or f"HTTP {response.status_code}"


def _validate(what: str, parse: Callable[[Any], T], payload: Any) -> T:
    try:
        return parse(payload)
    except (ValidationError, ValueError, TypeError) as exc:
        logger.exception("Friends API returned an unexpected %s payload", what)
        raise MalformedResponse(f"Invalid {what} response") from exc


def split_interests(interests: str | Iterable[str]) -> list[str]:
    """Accept "chess, go" style input as well as an iterable of interests."""
    if isinstance(interests, str):
        interests = interests.split(",")
    return [item.strip() for item in interests if item and item.strip()]


def _parse_search(payload: Any) -> list[SearchResult]:
    # Older deployments answer with a bare list, newer ones wrap it
    if isinstance(payload, dict):
        payload = payload.get("results")
    if not isinstance(payload, list):
        raise ValueError("Search response must be a list")
    return [SearchResult.from_wire(item) for item in payload]


class FriendsApiClient:
    """Async client for the remote friends service.

    Every call takes the bearer token explicitly; the client keeps no session
    state besides its pooled HTTP connection. Failures surface as
    :class:`~friendship_client.clients.errors.FriendsApiError` subclasses.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(base_url=self._base_url, timeout=timeout, transport=transport)

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "FriendsApiClient":
        settings = settings or get_settings()
        return cls(settings.api_base_url, timeout=settings.request_timeout, transport=transport)

    async def __aenter__(self) -> "FriendsApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        token: str | None,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        expect_body: bool = True,
    ) -> Any:
        headers = _auth_headers(token) if token else None
        try:
            response = await self._client.request(method, path, headers=headers, params=params, json=json)
        except httpx.TimeoutException as exc:
            logger.warning("Friends API timeout | method=%s path=%s", method, path)
            raise NetworkError("Request to friends service timed out") from exc
        except httpx.HTTPError as exc:
            logger.warning("Friends API transport error | method=%s path=%s error=%s", method, path, type(exc).__name__)
            raise NetworkError("Friends service is unreachable") from exc

        if response.status_code == 401:
            raise UnauthorizedError(_error_message(response))
        if response.is_error:
            message = _error_message(response)
            logger.warning("Friends API error | method=%s path=%s status=%s", method, path, response.status_code)
            raise ServerError(response.status_code, message)

        # Acknowledgement-only endpoints may answer with plain text
        if not expect_body or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponse("Response body is not valid JSON") from exc

    async def login(self, username: str, password: str) -> AuthResult:
        payload = await self._request("POST", LOGIN_PATH, None, json={"username": username, "password": password})
        return _validate("login", AuthResult.model_validate, payload)

    async def register(self, username: str, password: str, interests: str | Iterable[str] = ()) -> AuthResult:
        body = {"username": username, "password": password, "interests": split_interests(interests)}
        payload = await self._request("POST", REGISTER_PATH, None, json=body)
        return _validate("registration", AuthResult.model_validate, payload)

    async def list_friends(self, token: str) -> list[User]:
        payload = await self._request("GET", FRIENDS_PATH, token)
        return _validate("friends", _USERS.validate_python, payload)

    async def list_recommendations(self, token: str) -> list[Recommendation]:
        payload = await self._request("GET", RECOMMENDATIONS_PATH, token)
        return _validate("recommendations", _RECOMMENDATIONS.validate_python, payload)

    async def list_pending_requests(self, token: str) -> list[PendingRequest]:
        payload = await self._request("GET", PENDING_PATH, token)
        return _validate("pending requests", _PENDING.validate_python, payload)

    async def search_users(self, token: str, term: str) -> list[SearchResult]:
        payload = await self._request("GET", SEARCH_PATH, token, params={"username": term})
        return _validate("search", _parse_search, payload)

    async def toggle_friend_request(self, token: str, user_id: str) -> ToggleResult:
        payload = await self._request("POST", TOGGLE_REQUEST_PATH.format(user_id=user_id), token)
        return _validate("friend request", ToggleResult.model_validate, payload)

    async def accept_friend_request(self, token: str, user_id: str) -> None:
        await self._request("POST", ACCEPT_REQUEST_PATH.format(user_id=user_id), token, expect_body=False)

    async def unfriend(self, token: str, user_id: str) -> None:
        await self._request("POST", UNFRIEND_PATH.format(user_id=user_id), token, expect_body=False)


__all__ = ["FriendsApiClient", "split_interests"]
