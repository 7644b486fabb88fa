from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TrackerSettings(BaseSettings):
    """Environment-driven client configuration.

    Instances are frozen: the top-level client owns one and hands it to its
    collaborators, nobody mutates it afterwards.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    BASE_URL: str = "http://localhost:8089"
    API_KEY: str = Field(
        default="",
        validation_alias=AliasChoices("API_KEY", "API_TOKEN", "TRACKER_API_TOKEN"),
    )
    TIMEOUT_SECONDS: float = 15.0
    # Naive timestamps coming back from the server are read in this zone.
    TZ: str = "UTC"
    LOG_LEVEL: str = "INFO"

    @field_validator("BASE_URL", mode="after")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        cleaned = value.strip().rstrip("/")
        if not cleaned:
            raise ValueError("BASE_URL cannot be blank")
        return cleaned

    @field_validator("API_KEY", mode="after")
    @classmethod
    def strip_api_key(cls, value: str) -> str:
        return value.strip()


@lru_cache(maxsize=1)
def get_settings() -> TrackerSettings:
    return TrackerSettings()
