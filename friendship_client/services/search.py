"""Debounced user search that only ever displays the latest query's results."""
from __future__ import annotations

import asyncio
import logging
from enum import StrEnum

from ..clients.errors import FriendsApiError
from ..clients.friends_api import FriendsApiClient
from ..constants import MSG_SEARCH_FAILED, SEARCH_DEBOUNCE_MS
from ..schemas import SearchResult
from .relationships import RelationshipStore
from .session import TokenSource, resolve_token

logger = logging.getLogger(__name__)


class SearchPhase(StrEnum):
    IDLE = "idle"
    PENDING = "pending"
    IN_FLIGHT = "in_flight"
    SETTLED = "settled"


class SearchCoordinator:
    """Turns keystrokes into at most one search per quiet period.

    Each new term cancels the armed debounce timer. Requests already sent are
    left to finish, but their response is dropped unless it belongs to the
    most recently issued request and still matches the current term.
    Results are written into the relationship store, which annotates them.
    """

    def __init__(
        self,
        client: FriendsApiClient,
        store: RelationshipStore,
        *,
        token: TokenSource | None = None,
        debounce: float = SEARCH_DEBOUNCE_MS / 1000.0,
        clear_on_error: bool = False,
    ) -> None:
        self._client = client
        self._store = store
        self._token = token
        self._debounce = max(0.0, debounce)
        self._clear_on_error = clear_on_error

        self._term = ""
        self._phase = SearchPhase.IDLE
        self._timer: asyncio.TimerHandle | None = None
        self._issued = 0
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def term(self) -> str:
        return self._term

    @property
    def phase(self) -> SearchPhase:
        return self._phase

    @property
    def results(self) -> list[SearchResult]:
        return self._store.search_results

    def set_term(self, term: str) -> None:
        """Record new input; must be called from the event loop thread."""

        self._term = term
        self._cancel_timer()
        if not term.strip():
            # Clearing is immediate and outdates whatever is still in flight
            self._issued += 1
            self._phase = SearchPhase.IDLE
            self._store.clear_search_results()
            return

        self._phase = SearchPhase.PENDING
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._debounce, self._issue, term)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _issue(self, term: str) -> None:
        self._timer = None
        self._issued += 1
        sequence = self._issued
        self._phase = SearchPhase.IN_FLIGHT
        logger.debug("Search issued | term=%s sequence=%s", term, sequence)
        task = asyncio.get_running_loop().create_task(self._run(term, sequence))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _is_current(self, term: str, sequence: int) -> bool:
        return sequence == self._issued and term == self._term

    def _current_token(self) -> str:
        if self._token is None:
            return self._store.token
        return resolve_token(self._token)

    async def _run(self, term: str, sequence: int) -> None:
        try:
            results = await self._client.search_users(self._current_token(), term)
        except FriendsApiError as exc:
            if not self._is_current(term, sequence):
                logger.debug("Dropping failure of superseded search | term=%s", term)
                return
            self._store.report_failure(exc, MSG_SEARCH_FAILED, action="search")
            if self._clear_on_error:
                self._store.clear_search_results()
            self._settle()
            return

        if not self._is_current(term, sequence):
            logger.debug("Dropping stale search results | term=%s sequence=%s", term, sequence)
            return
        self._store.set_search_results(results)
        self._settle()

    def _settle(self) -> None:
        # Retyping back to the same term re-arms the timer; that one decides
        if self._timer is None:
            self._phase = SearchPhase.SETTLED

    async def drain(self) -> None:
        """Wait for every request already sent to finish."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def aclose(self) -> None:
        self._cancel_timer()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._phase = SearchPhase.IDLE


__all__ = ["SearchCoordinator", "SearchPhase"]
