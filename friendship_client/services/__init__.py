"""Convenience exports for service layer."""
from .dashboard import FriendsDashboard
from .notification_sink import NotificationListener, NotificationSink
from .relationships import RelationshipStore, patch_relationship_state
from .search import SearchCoordinator, SearchPhase
from .session import (
    SessionError,
    SessionProvider,
    StaticSession,
    TokenSource,
    resolve_token,
    session_from_settings,
    sign_in,
    sign_up,
)

__all__ = [
    "FriendsDashboard",
    "NotificationListener",
    "NotificationSink",
    "RelationshipStore",
    "patch_relationship_state",
    "SearchCoordinator",
    "SearchPhase",
    "SessionError",
    "SessionProvider",
    "StaticSession",
    "TokenSource",
    "resolve_token",
    "session_from_settings",
    "sign_in",
    "sign_up",
]
