"""
Engine settings.

Tunable constants of the level curve and the training loop, loaded from
environment variables (``IDLESKILLS_*``) with optional ``.env`` support.
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Runtime tunables for the training engine."""

    model_config = SettingsConfigDict(
        env_prefix="IDLESKILLS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ─── Level curve ────────────────────────────────────────────────
    base_xp: int = Field(
        default=10,
        gt=0,
        description="XP required to go from level 1 to level 2",
    )
    scaling_factor: float = Field(
        default=1.1,
        ge=1.0,
        description="Exponential growth of the XP requirement per level",
    )

    # ─── Training loop ──────────────────────────────────────────────
    tick_interval_ms: int = Field(
        default=100,
        gt=0,
        description="Progress sampling interval of the training loop",
    )
    time_scale: float = Field(
        default=1.0,
        gt=0.0,
        description="Wall-clock speed-up applied to action durations (development only)",
    )

    # ─── Logging ────────────────────────────────────────────────────
    log_level: str = Field(default="INFO", description="Log level for CLI sinks")


@lru_cache
def get_settings() -> EngineSettings:
    """Get cached settings instance."""
    return EngineSettings()
