"""Failures raised by the remote friends service client."""
from __future__ import annotations


class FriendsApiError(RuntimeError):
    """Base class for remote friends service failures."""

    reason: str = "unknown"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.reason)


class NetworkError(FriendsApiError):
    """Raised when the service cannot be reached or times out."""

    reason = "network"


class ServerError(FriendsApiError):
    """Raised when the service answers with a non-2xx status."""

    reason = "server"

    def __init__(self, status_code: int, message: str | None = None) -> None:
        super().__init__(message or f"Request failed with status {status_code}")
        self.status_code = status_code


class UnauthorizedError(ServerError):
    """Raised when the bearer credential is rejected."""

    reason = "unauthorized"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(401, message or "Unauthorized")


class MalformedResponse(FriendsApiError):
    """Raised when a response body does not have the expected shape."""

    reason = "malformed"


__all__ = [
    "FriendsApiError",
    "NetworkError",
    "ServerError",
    "UnauthorizedError",
    "MalformedResponse",
]
