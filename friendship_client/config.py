"""
Runtime configuration helpers for the friendship client.

Loads the remote service location, credentials and search tuning from the
environment, falling back to a .env file located in the project root.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_API_BASE_URL, SEARCH_DEBOUNCE_MS

# Resolve the project root
BASE_DIR = Path(__file__).resolve().parents[1]

# Absolute path to .env
ENV_PATH = BASE_DIR / ".env"

# Load .env defaults without overriding variables already set in the environment
load_dotenv(dotenv_path=ENV_PATH, override=False)


class Settings(BaseSettings):
    api_base_url: str = Field(default=DEFAULT_API_BASE_URL, alias="FRIENDS_API_URL")
    api_token: str | None = Field(default=None, alias="FRIENDS_API_TOKEN")
    request_timeout: float = Field(default=10.0, gt=0, alias="FRIENDS_API_TIMEOUT")

    # Search coordination
    search_debounce_ms: int = Field(default=SEARCH_DEBOUNCE_MS, ge=0, alias="SEARCH_DEBOUNCE_MS")
    search_clear_on_error: bool = Field(default=False, alias="SEARCH_CLEAR_ON_ERROR")

    logout_on_unauthorized: bool = Field(default=False, alias="LOGOUT_ON_UNAUTHORIZED")

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def search_debounce_seconds(self) -> float:
        return self.search_debounce_ms / 1000.0


@lru_cache()
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
