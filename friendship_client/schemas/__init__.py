"""Convenience exports for schema layer."""
from .auth import AuthResult
from .friends import (
    PendingRequest,
    Recommendation,
    RelationshipState,
    SearchResult,
    ToggleResult,
    ToggleStatus,
    User,
)
from .notifications import Notification, NotificationKind

__all__ = [
    "AuthResult",
    "Notification",
    "NotificationKind",
    "PendingRequest",
    "Recommendation",
    "RelationshipState",
    "SearchResult",
    "ToggleResult",
    "ToggleStatus",
    "User",
]
