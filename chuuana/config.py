"""Application configuration using Pydantic settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CHUUANA_",
        extra="ignore",
    )

    # App
    debug: bool = False
    log_level: str = "INFO"

    # Strong-field veto: "popularity" counts 1st/2nd favourites,
    # "odds" counts runners at or below strong_odds
    strong_field_policy: Literal["popularity", "odds"] = "popularity"
    strong_odds: float = 3.5

    # Recommended picks shown before "show more"
    recommended_preview: int = 3


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Export for convenience
settings = get_settings()
