"""Application settings loaded from environment variables and ``.env`` files."""

from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic import Field, PositiveFloat, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    """Primary application settings for the Cheffy pipeline, CLI and API."""

    user_agent: str = Field(default=DEFAULT_USER_AGENT, alias="CHEFFY_USER_AGENT")
    accept_language: str = Field(default="en-US,en;q=0.9", alias="CHEFFY_ACCEPT_LANGUAGE")
    http_timeout_seconds: PositiveFloat = Field(default=15.0, alias="CHEFFY_HTTP_TIMEOUT_SECONDS")

    default_languages: List[str] = Field(default_factory=lambda: ["en"], alias="CHEFFY_DEFAULT_LANGUAGES")
    fallback_languages: List[str] = Field(
        default_factory=lambda: ["en", "es", "ko"], alias="CHEFFY_FALLBACK_LANGUAGES"
    )
    max_language_attempts: PositiveInt = Field(default=6, alias="CHEFFY_MAX_LANGUAGE_ATTEMPTS")

    api_title: str = Field(default="Cheffy Recipe Steps API", alias="CHEFFY_API_TITLE")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached instance of the application settings."""

    return Settings()


__all__ = ["DEFAULT_USER_AGENT", "Settings", "get_settings"]
