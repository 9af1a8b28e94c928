"""Schemas for user-facing action outcomes."""
from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class NotificationKind(StrEnum):
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


class Notification(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    kind: NotificationKind


__all__ = ["NotificationKind", "Notification"]
