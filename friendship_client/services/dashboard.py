"""Friends screen wiring: one store, one search coordinator, one sink."""
from __future__ import annotations

import logging

import httpx

from ..clients.friends_api import FriendsApiClient
from ..config import Settings, get_settings
from ..schemas import Notification, RelationshipState
from .notification_sink import NotificationSink
from .relationships import RelationshipStore
from .search import SearchCoordinator
from .session import SessionProvider

logger = logging.getLogger(__name__)


class FriendsDashboard:
    """Everything a friends screen needs, bound to a single session.

    The bearer token is read from the session on every request, so a logout
    or a fresh login takes effect immediately. Once logged out, actions make
    no remote call and report the expired session instead.
    """

    def __init__(
        self,
        client: FriendsApiClient,
        session: SessionProvider,
        *,
        sink: NotificationSink | None = None,
        debounce: float | None = None,
        clear_on_error: bool = False,
        logout_on_unauthorized: bool = False,
        owns_client: bool = False,
    ) -> None:
        self._client = client
        self._session = session
        self._owns_client = owns_client
        self._logout_on_unauthorized = logout_on_unauthorized

        self.sink = sink or NotificationSink()
        self.store = RelationshipStore(
            client, self._session_token, self.sink, on_unauthorized=self._handle_unauthorized
        )
        search_options: dict[str, float] = {}
        if debounce is not None:
            search_options["debounce"] = debounce
        self.search_coordinator = SearchCoordinator(
            client,
            self.store,
            clear_on_error=clear_on_error,
            **search_options,
        )

    @classmethod
    def from_settings(
        cls,
        session: SessionProvider,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "FriendsDashboard":
        settings = settings or get_settings()
        client = FriendsApiClient.from_settings(settings, transport=transport)
        return cls(
            client,
            session,
            debounce=settings.search_debounce_seconds,
            clear_on_error=settings.search_clear_on_error,
            logout_on_unauthorized=settings.logout_on_unauthorized,
            owns_client=True,
        )

    async def __aenter__(self) -> "FriendsDashboard":
        await self.open()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    @property
    def notification(self) -> Notification | None:
        return self.sink.current

    async def open(self) -> None:
        await self.store.load_all()

    def search(self, term: str) -> None:
        self.search_coordinator.set_term(term)

    async def request_or_cancel(self, user_id: str) -> RelationshipState | None:
        return await self.store.request_or_cancel(user_id)

    async def accept(self, user_id: str) -> bool:
        return await self.store.accept(user_id)

    async def unfriend(self, user_id: str) -> bool:
        return await self.store.unfriend(user_id)

    def _session_token(self) -> str:
        return self._session.token

    def _handle_unauthorized(self) -> None:
        if not self._logout_on_unauthorized:
            return
        logger.info("Credential rejected by friends service, logging out")
        self._session.logout()

    async def aclose(self) -> None:
        await self.search_coordinator.aclose()
        if self._owns_client:
            await self._client.aclose()


__all__ = ["FriendsDashboard"]
