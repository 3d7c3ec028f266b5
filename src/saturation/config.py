"""Engine configuration.

Loads from environment variables and .env file, prefix SATURATION_
(e.g. SATURATION_MAX_ROUNDS=50).
"""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SaturationSettings(BaseSettings):
    """Limits and switches for the saturation engine."""

    # ----- Ceilings -----
    max_rounds: int | None = Field(
        default=1000,
        description="Rounds allowed per query or saturate() call. None disables.",
    )
    max_facts: int | None = Field(
        default=100_000,
        description="Fact-set size at which saturation stops. None disables.",
    )

    # ----- Semantics -----
    bottom_predicate: str | None = Field(
        default="bottom",
        description="Contradiction predicate (any arity). None disables.",
    )
    exhaustive_matching: bool = Field(
        default=False,
        description="Try ordered fact tuples with repeats instead of combinations.",
    )

    # ----- Logging -----
    log_level: str = Field(default="WARNING", description="Level for the saturation logger.")

    model_config = SettingsConfigDict(
        env_prefix="SATURATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("max_rounds", "max_facts")
    @classmethod
    def _positive(cls, v: int | None) -> int | None:
        if v is not None and v < 1:
            raise ValueError("ceiling must be positive or None")
        return v

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {v!r}")
        return level


@lru_cache
def get_settings() -> SaturationSettings:
    """Get cached settings singleton."""
    return SaturationSettings()


def configure_logging(settings: SaturationSettings | None = None) -> logging.Logger:
    """Apply the configured level to the package logger."""
    settings = settings or get_settings()
    logger = logging.getLogger("saturation")
    logger.setLevel(settings.log_level)
    return logger
