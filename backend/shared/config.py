"""
Central configuration for Live Stream Finder.
Uses pydantic-settings for env-based config with validation.
"""
from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    DEV = "dev"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Root settings. Every field has a default so the CLI runs with no env."""

    model_config = SettingsConfigDict(
        env_prefix="LSF_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── General ──────────────────────────────────────────────
    environment: Environment = Environment.DEV
    debug: bool = False
    log_level: str = "WARNING"

    # ── Schedule provider (MLB Stats API) ────────────────────
    schedule_base_url: str = "http://statsapi.mlb.com/api/v1"
    schedule_sport_id: int = 1
    schedule_hydrate: str = "team,linescore"
    excluded_game_codes: list[str] = Field(
        default=["F", "P"],
        description="status.abstractGameCode values dropped from the game list (Final, Preview).",
    )

    # ── Streams provider ─────────────────────────────────────
    streams_base_url: str = "https://streamed.su/api"
    matches_category: str = "baseball"
    stream_fanout: bool = Field(
        default=False,
        description="Fetch every source's stream list concurrently; output order is unchanged.",
    )
    isolate_source_failures: bool = Field(
        default=False,
        description="Skip a source whose stream fetch fails instead of aborting.",
    )

    # ── HTTP ─────────────────────────────────────────────────
    request_timeout_s: float = 10.0
    connect_timeout_s: float = 5.0
    user_agent: str = "live-stream-finder/0.1"

    @field_validator("schedule_base_url", "streams_base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, value: str) -> str:
        return value.upper()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton access to validated settings."""
    return Settings()
