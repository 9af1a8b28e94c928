"""Relationship state for the signed-in viewer.

The store owns the viewer's friends, incoming requests, recommendations and the
currently displayed search results. Mutations are only applied after the
remote service confirms them. Cross-cutting collections are then reconciled by
re-fetching them; only the displayed search results are patched locally.

Remote failures never escape the store: they are logged and reported through
the notification sink, and the affected collection keeps its previous value.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Iterable, MutableSequence

from ..clients.errors import FriendsApiError, UnauthorizedError
from ..clients.friends_api import FriendsApiClient
from ..constants import (
    LOAD_FAILURE_MESSAGES,
    MSG_ACCEPT_FAILED,
    MSG_ACCEPTED,
    MSG_ALREADY_FRIENDS,
    MSG_INCOMING_PENDING,
    MSG_NO_PENDING_REQUEST,
    MSG_NOT_A_FRIEND,
    MSG_REQUEST_CANCELLED,
    MSG_REQUEST_SENT,
    MSG_TOGGLE_FAILED,
    MSG_UNAUTHORIZED,
    MSG_UNFRIEND_FAILED,
    MSG_UNFRIENDED,
)
from ..schemas import PendingRequest, Recommendation, RelationshipState, SearchResult, User
from .notification_sink import NotificationSink
from .session import TokenSource, resolve_token

logger = logging.getLogger(__name__)


def patch_relationship_state(
    collection: MutableSequence[SearchResult],
    user_id: str,
    new_state: RelationshipState,
) -> int:
    """Replace, in place, every result for ``user_id`` with one carrying ``new_state``.

    Other entries keep their identity. Returns how many entries changed.
    """

    patched = 0
    for index, result in enumerate(collection):
        if result.user.id == user_id and result.state != new_state:
            collection[index] = result.with_state(new_state)
            patched += 1
    return patched


class RelationshipStore:
    def __init__(
        self,
        client: FriendsApiClient,
        token: TokenSource,
        sink: NotificationSink | None = None,
        *,
        on_unauthorized: Callable[[], None] | None = None,
    ) -> None:
        self._client = client
        self._token = token
        self.sink = sink or NotificationSink()
        self._on_unauthorized = on_unauthorized

        self.friends: list[User] = []
        self.recommendations: list[Recommendation] = []
        self.pending_requests: list[PendingRequest] = []
        self.search_results: list[SearchResult] = []
        # Collections fetched at least once; only those can overrule a search
        self._loaded: set[str] = set()

    @property
    def token(self) -> str:
        return resolve_token(self._token)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def is_friend(self, user_id: str) -> bool:
        return any(friend.id == user_id for friend in self.friends)

    def find_pending(self, user_id: str) -> PendingRequest | None:
        for request in self.pending_requests:
            if request.matches(user_id):
                return request
        return None

    def state_of(self, user_id: str) -> RelationshipState:
        if self.is_friend(user_id):
            return RelationshipState.FRIEND
        if self.find_pending(user_id) is not None:
            return RelationshipState.REQUESTED_INCOMING
        for result in self.search_results:
            if result.user.id == user_id:
                return result.state
        return RelationshipState.NONE

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load_all(self) -> None:
        """Fetch friends, recommendations and pending requests independently."""

        await asyncio.gather(
            self.refresh_friends(),
            self.refresh_recommendations(),
            self.refresh_pending_requests(),
        )

    async def refresh_friends(self) -> bool:
        try:
            friends = await self._client.list_friends(self.token)
        except FriendsApiError as exc:
            self.report_failure(exc, LOAD_FAILURE_MESSAGES["friends"], action="fetch friends")
            return False
        self.friends = friends
        self._loaded.add("friends")
        self._reconcile_search_results()
        return True

    async def refresh_recommendations(self) -> bool:
        try:
            recommendations = await self._client.list_recommendations(self.token)
        except FriendsApiError as exc:
            self.report_failure(exc, LOAD_FAILURE_MESSAGES["recommendations"], action="fetch recommendations")
            return False
        self.recommendations = recommendations
        self._loaded.add("recommendations")
        return True

    async def refresh_pending_requests(self) -> bool:
        try:
            pending = await self._client.list_pending_requests(self.token)
        except FriendsApiError as exc:
            self.report_failure(exc, LOAD_FAILURE_MESSAGES["pending_requests"], action="fetch pending requests")
            return False
        self.pending_requests = pending
        self._loaded.add("pending_requests")
        self._reconcile_search_results()
        return True

    # ------------------------------------------------------------------
    # Search results
    # ------------------------------------------------------------------

    def set_search_results(self, results: Iterable[SearchResult]) -> None:
        self.search_results = [self._annotate(result) for result in results]

    def clear_search_results(self) -> None:
        self.search_results = []

    def _annotate(self, result: SearchResult) -> SearchResult:
        user_id = result.user.id
        state = result.state
        if "friends" in self._loaded:
            if self.is_friend(user_id):
                state = RelationshipState.FRIEND
            elif state == RelationshipState.FRIEND:
                state = RelationshipState.NONE
        if state != RelationshipState.FRIEND and "pending_requests" in self._loaded:
            if self.find_pending(user_id) is not None:
                state = RelationshipState.REQUESTED_INCOMING
            elif state == RelationshipState.REQUESTED_INCOMING:
                state = RelationshipState.NONE
        if state == result.state:
            return result
        return result.with_state(state)

    def _reconcile_search_results(self) -> None:
        for index, result in enumerate(self.search_results):
            annotated = self._annotate(result)
            if annotated is not result:
                self.search_results[index] = annotated

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def request_or_cancel(self, user_id: str) -> RelationshipState | None:
        """Send a friend request to ``user_id``, or cancel the one already sent.

        Returns the confirmed state, or ``None`` when nothing changed.
        """

        if self.is_friend(user_id):
            self.sink.error(MSG_ALREADY_FRIENDS)
            return None
        if self.find_pending(user_id) is not None:
            self.sink.error(MSG_INCOMING_PENDING)
            return None

        try:
            result = await self._client.toggle_friend_request(self.token, user_id)
        except FriendsApiError as exc:
            self.report_failure(exc, MSG_TOGGLE_FAILED, action="toggle friend request", user_id=user_id)
            return None

        state = result.state
        patch_relationship_state(self.search_results, user_id, state)
        logger.debug("Friend request toggled | user_id=%s state=%s", user_id, state)
        if result.requested:
            self.sink.success(result.message or MSG_REQUEST_SENT)
        else:
            self.sink.info(result.message or MSG_REQUEST_CANCELLED)

        # A requested user should drop out of the recommendations
        await self.refresh_recommendations()
        return state

    async def accept(self, user_id: str) -> bool:
        request = self.find_pending(user_id)
        if request is None:
            self.sink.error(MSG_NO_PENDING_REQUEST)
            return False

        requester_id = request.requester.id
        try:
            await self._client.accept_friend_request(self.token, requester_id)
        except FriendsApiError as exc:
            self.report_failure(exc, MSG_ACCEPT_FAILED, action="accept friend request", user_id=requester_id)
            return False

        self.pending_requests = [entry for entry in self.pending_requests if entry is not request]
        patch_relationship_state(self.search_results, requester_id, RelationshipState.FRIEND)
        logger.debug("Friend request accepted | user_id=%s", requester_id)
        self.sink.success(MSG_ACCEPTED)
        await asyncio.gather(self.refresh_friends(), self.refresh_recommendations())
        return True

    async def unfriend(self, user_id: str) -> bool:
        if not self.is_friend(user_id):
            self.sink.error(MSG_NOT_A_FRIEND)
            return False

        try:
            await self._client.unfriend(self.token, user_id)
        except FriendsApiError as exc:
            self.report_failure(exc, MSG_UNFRIEND_FAILED, action="unfriend", user_id=user_id)
            return False

        patch_relationship_state(self.search_results, user_id, RelationshipState.NONE)
        logger.debug("Friend removed | user_id=%s", user_id)
        self.sink.success(MSG_UNFRIENDED)
        # The friends list itself is only updated from the refreshed copy
        await asyncio.gather(self.refresh_friends(), self.refresh_recommendations())
        return True

    # ------------------------------------------------------------------
    # Failures
    # ------------------------------------------------------------------

    def report_failure(self, exc: FriendsApiError, message: str, *, action: str, user_id: str | None = None) -> None:
        """Log ``exc`` and notify; a rejected credential replaces ``message``."""
        logger.warning(
            "Failed to %s | user_id=%s reason=%s error=%s",
            action,
            user_id or "-",
            exc.reason,
            exc,
        )
        if isinstance(exc, UnauthorizedError):
            self.sink.error(MSG_UNAUTHORIZED)
            if self._on_unauthorized is not None:
                self._on_unauthorized()
            return
        self.sink.error(message)


__all__ = ["RelationshipStore", "patch_relationship_state"]
