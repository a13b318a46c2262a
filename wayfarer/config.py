"""Application configuration using pydantic-settings."""

import logging
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="WAYFARER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Travel
    # ==========================================================================
    # Deduct the route cost from the player's gold when travel begins
    charge_travel_cost: bool = True

    # ==========================================================================
    # Player & Quests
    # ==========================================================================
    relation_min: int = -100
    relation_max: int = 100

    starting_gold: int = 50
    starting_reputation: int = 0
    starting_influence: int = 10
    starting_health: int = 100

    default_travel_quest_reputation: int = 10
    apply_quest_rewards: bool = True

    # ==========================================================================
    # Debug
    # ==========================================================================
    debug: bool = False
    log_level: LogLevel = "INFO"
    console_observer: bool = False  # Render session events with rich


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for host applications that don't do it themselves.

    Args:
        level: Log level name. Defaults to DEBUG when debug is enabled,
            otherwise the configured log_level.
    """
    current = get_settings()
    if level is None:
        level = "DEBUG" if current.debug else current.log_level
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Convenience alias
settings = get_settings()
