"""Pydantic schemas for authentication endpoints."""
from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class AuthResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    token: str = Field(..., min_length=1, validation_alias=AliasChoices("token", "access_token"))
    user_id: str = Field(..., validation_alias=AliasChoices("userId", "user_id", "_id"))

    @field_validator("user_id", mode="before")
    @classmethod
    def _coerce_user_id(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


__all__ = ["AuthResult"]
