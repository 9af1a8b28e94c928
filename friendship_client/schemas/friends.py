"""Schemas for users, friend requests, search results and recommendations."""
from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


class RelationshipState(StrEnum):
    NONE = "none"
    REQUESTED_OUTGOING = "requested_outgoing"
    REQUESTED_INCOMING = "requested_incoming"
    FRIEND = "friend"

    @classmethod
    def from_wire(cls, value: Any) -> "RelationshipState":
        """Map the status strings used by the remote service onto a state."""
        if isinstance(value, cls):
            return value
        token = str(value or "").strip().lower()
        try:
            return _WIRE_STATES[token]
        except KeyError:
            raise ValueError(f"Unknown relationship status: {value!r}") from None


_WIRE_STATES = {
    "": RelationshipState.NONE,
    "none": RelationshipState.NONE,
    "available": RelationshipState.NONE,
    "requested": RelationshipState.REQUESTED_OUTGOING,
    "requested_outgoing": RelationshipState.REQUESTED_OUTGOING,
    "outgoing": RelationshipState.REQUESTED_OUTGOING,
    "sent": RelationshipState.REQUESTED_OUTGOING,
    "requested_incoming": RelationshipState.REQUESTED_INCOMING,
    "incoming": RelationshipState.REQUESTED_INCOMING,
    "pending": RelationshipState.REQUESTED_INCOMING,
    "received": RelationshipState.REQUESTED_INCOMING,
    "friend": RelationshipState.FRIEND,
    "friends": RelationshipState.FRIEND,
}


class User(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., validation_alias=AliasChoices("_id", "id"))
    username: str
    interests: frozenset[str] = frozenset()

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        # Numeric and ObjectId-like identifiers are compared as strings
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class SearchResult(BaseModel):
    """A user as seen by a search, with the viewer's relationship at query time."""

    model_config = ConfigDict(frozen=True)

    user: User
    state: RelationshipState = RelationshipState.NONE

    @classmethod
    def from_wire(cls, payload: dict[str, Any]) -> "SearchResult":
        if not isinstance(payload, dict):
            raise ValueError("Search result must be an object")
        status = payload.get("requestStatus", payload.get("status"))
        return cls(user=User.model_validate(payload), state=RelationshipState.from_wire(status))

    def with_state(self, state: RelationshipState) -> "SearchResult":
        return self.model_copy(update={"state": state})


class PendingRequest(BaseModel):
    """An incoming friend request awaiting the viewer's answer."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., validation_alias=AliasChoices("_id", "id"))
    requester: User

    @model_validator(mode="before")
    @classmethod
    def _unwrap_requester(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        for key in ("requester", "sender", "from"):
            nested = data.get(key)
            if isinstance(nested, User):
                return {"id": data.get("_id", data.get("id", nested.id)), "requester": nested}
            if isinstance(nested, dict):
                request_id = data.get("_id", data.get("id", nested.get("_id", nested.get("id"))))
                return {"id": request_id, "requester": nested}
        # The service may list the requesting users themselves
        return {"id": data.get("_id", data.get("id")), "requester": data}

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def matches(self, user_id: str) -> bool:
        return user_id in (self.id, self.requester.id)


class Recommendation(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    user: User
    mutual_friend_count: int = Field(
        default=0, ge=0, validation_alias=AliasChoices("mutualFriends", "mutual_friend_count")
    )
    mutual_interest_count: int = Field(
        default=0, ge=0, validation_alias=AliasChoices("mutualInterests", "mutual_interest_count")
    )


class ToggleStatus(StrEnum):
    REQUESTED = "requested"
    CANCELLED = "cancelled"


class ToggleResult(BaseModel):
    status: ToggleStatus
    message: str = ""

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> Any:
        token = str(value or "").strip().lower()
        if token in {"canceled", "none"}:
            return ToggleStatus.CANCELLED
        return token

    @property
    def requested(self) -> bool:
        return self.status == ToggleStatus.REQUESTED

    @property
    def state(self) -> RelationshipState:
        return RelationshipState.REQUESTED_OUTGOING if self.requested else RelationshipState.NONE


__all__ = [
    "RelationshipState",
    "User",
    "SearchResult",
    "PendingRequest",
    "Recommendation",
    "ToggleStatus",
    "ToggleResult",
]
