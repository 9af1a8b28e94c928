"""Shared fixtures: an in-memory stand-in for the remote friends service."""
from __future__ import annotations

import asyncio
from typing import Iterator

import pytest

from friendship_client.clients.errors import FriendsApiError
from friendship_client.schemas import (
    Notification,
    PendingRequest,
    Recommendation,
    RelationshipState,
    SearchResult,
    ToggleResult,
    User,
)
from friendship_client.services import NotificationSink, RelationshipStore

TOKEN = "token-123"


def make_user(user_id: str, username: str | None = None, interests: tuple[str, ...] = ()) -> User:
    return User(id=user_id, username=username or f"user-{user_id}", interests=frozenset(interests))


def make_result(user: User, state: RelationshipState = RelationshipState.NONE) -> SearchResult:
    return SearchResult(user=user, state=state)


class StubFriendsApi:
    """Behaves like the remote service, with per-operation failure injection."""

    def __init__(self) -> None:
        self.friends: list[User] = []
        self.recommendations: list[Recommendation] = []
        self.pending: list[PendingRequest] = []
        self.outgoing: set[str] = set()
        self.search_responses: dict[str, list[SearchResult]] = {}
        self.search_gates: dict[str, asyncio.Event] = {}
        self.failures: dict[str, FriendsApiError] = {}
        self.calls: list[tuple[str, ...]] = []
        self.tokens: set[str] = set()
        self.search_times: list[float] = []

    def _record(self, operation: str, token: str, *args: str) -> None:
        self.calls.append((operation, *args))
        self.tokens.add(token)
        failure = self.failures.get(operation)
        if failure is not None:
            raise failure

    def calls_to(self, operation: str) -> list[tuple[str, ...]]:
        return [call for call in self.calls if call[0] == operation]

    async def list_friends(self, token: str) -> list[User]:
        self._record("list_friends", token)
        return list(self.friends)

    async def list_recommendations(self, token: str) -> list[Recommendation]:
        self._record("list_recommendations", token)
        return [rec for rec in self.recommendations if rec.user.id not in self.outgoing]

    async def list_pending_requests(self, token: str) -> list[PendingRequest]:
        self._record("list_pending_requests", token)
        return list(self.pending)

    async def search_users(self, token: str, term: str) -> list[SearchResult]:
        self.calls.append(("search_users", term))
        self.tokens.add(token)
        self.search_times.append(asyncio.get_running_loop().time())
        gate = self.search_gates.get(term)
        if gate is not None:
            await gate.wait()
        failure = self.failures.get("search_users")
        if failure is not None:
            raise failure
        return list(self.search_responses.get(term, []))

    async def toggle_friend_request(self, token: str, user_id: str) -> ToggleResult:
        self._record("toggle_friend_request", token, user_id)
        if user_id in self.outgoing:
            self.outgoing.discard(user_id)
            return ToggleResult(status="cancelled", message="Friend request cancelled")
        self.outgoing.add(user_id)
        return ToggleResult(status="requested", message="Friend request sent")

    async def accept_friend_request(self, token: str, user_id: str) -> None:
        self._record("accept_friend_request", token, user_id)
        request = next(entry for entry in self.pending if entry.requester.id == user_id)
        self.pending.remove(request)
        self.friends.append(request.requester)

    async def unfriend(self, token: str, user_id: str) -> None:
        self._record("unfriend", token, user_id)
        self.friends = [friend for friend in self.friends if friend.id != user_id]


@pytest.fixture
def api() -> StubFriendsApi:
    return StubFriendsApi()


@pytest.fixture
def sink() -> NotificationSink:
    return NotificationSink()


@pytest.fixture
def emitted(sink: NotificationSink) -> Iterator[list[Notification]]:
    received: list[Notification] = []
    unsubscribe = sink.subscribe(received.append)
    yield received
    unsubscribe()


@pytest.fixture
def store(api: StubFriendsApi, sink: NotificationSink) -> RelationshipStore:
    return RelationshipStore(api, TOKEN, sink)  # type: ignore[arg-type]


def assert_exclusive(store: RelationshipStore) -> None:
    """No user is both a friend and carrying a request state."""

    friend_ids = {friend.id for friend in store.friends}
    pending_ids = {request.requester.id for request in store.pending_requests}
    outgoing_ids = {
        result.user.id for result in store.search_results if result.state == RelationshipState.REQUESTED_OUTGOING
    }
    assert not friend_ids & pending_ids
    assert not friend_ids & outgoing_ids
    assert not pending_ids & outgoing_ids
