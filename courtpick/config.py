"""Settings of the picking engine via pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables prefixed with ``COURTPICK_`` (or a ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_prefix="COURTPICK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Smart picker scoring weights
    game_variance_weight: float = Field(default=10.0, ge=0)
    partner_repeat_weight: float = Field(default=50.0, ge=0)
    exact_rematch_penalty: float = Field(default=100.0, ge=0)

    # Smart picker candidate generation
    max_candidates: int = Field(default=50, ge=1)
    ordered_candidates: int = Field(default=10, ge=0)

    # Storage (JSON document), None keeps everything in memory
    data_file: str | None = None

    # How many games `Registry.recent_games()` returns by default
    recent_games_limit: int = Field(default=10, ge=1)


@lru_cache
def get_settings() -> Settings:
    return Settings()
