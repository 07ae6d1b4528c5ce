"""
Centralized settings configuration using Pydantic BaseSettings.

All environment variables are defined here with types, defaults, and validation.
Use get_settings() to share one instance across the process.

Usage:
    from session_engine.settings import get_settings, Settings

    settings = get_settings()
    print(settings.warmup_increment)

    # Domain warmup configuration
    calculator = WarmupCalculator(settings.warmup_config())
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from domain.models import WarmupConfig
from domain.models.session_exercise import MAX_NOTES_LENGTH


class Settings(BaseSettings):
    """Session engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Core Environment
    # -------------------------------------------------------------------------
    environment: str = Field(
        default="development",
        description="Runtime environment: development, staging, production, test",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level (DEBUG, INFO, WARNING, ERROR)",
    )

    # -------------------------------------------------------------------------
    # Warmup Calculator
    # -------------------------------------------------------------------------
    warmup_min_working_weight: float = Field(
        default=10.0,
        ge=0,
        description="Working weights below this get no warmup sets",
    )
    warmup_increment: float = Field(
        default=2.5,
        gt=0,
        description="Warmup weights are rounded to a multiple of this",
    )
    warmup_minimum_plate_weight: float = Field(
        default=5.0,
        ge=0,
        description="Rounded warmup weights below this are dropped",
    )
    warmup_rep_cap: int = Field(default=12, ge=1, description="Maximum warmup reps")
    warmup_rep_floor: int = Field(default=1, ge=1, description="Minimum warmup reps")
    default_warmup_strategy: str = Field(
        default="standard",
        description="Strategy used when a caller does not name one",
    )

    # -------------------------------------------------------------------------
    # Health Export
    # -------------------------------------------------------------------------
    health_export_enabled: bool = Field(
        default=True,
        description="Export sessions to the health store",
    )
    health_export_body_weight_kg: float = Field(
        default=80.0,
        gt=0,
        description="Body weight used for the calorie estimate",
    )
    health_export_met: float = Field(
        default=6.0,
        gt=0,
        description="MET value used for the calorie estimate",
    )
    health_activity_type: str = Field(
        default="traditional_strength_training",
        description="Activity type reported to the health store",
    )

    # -------------------------------------------------------------------------
    # Session Defaults
    # -------------------------------------------------------------------------
    default_rest_time_seconds: float = Field(
        default=90.0,
        ge=0,
        description="Rest time for exercises added without catalog history",
    )
    default_set_count: int = Field(
        default=3,
        ge=1,
        description="Number of sets for an exercise added mid-session",
    )
    default_reps: int = Field(
        default=8,
        ge=1,
        description="Reps for sets added without history",
    )
    max_notes_length: int = Field(
        default=MAX_NOTES_LENGTH,
        ge=1,
        le=MAX_NOTES_LENGTH,
        description="Maximum length of exercise notes",
    )

    # -------------------------------------------------------------------------
    # Supabase Database
    # -------------------------------------------------------------------------
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL",
    )
    supabase_service_role_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key (full access)",
    )
    supabase_anon_key: Optional[str] = Field(
        default=None,
        description="Supabase anonymous key (limited access)",
    )
    sessions_table: str = Field(
        default="workout_sessions",
        description="Table holding one JSON document per session",
    )

    @property
    def supabase_key(self) -> Optional[str]:
        """Get the best available Supabase key (service role preferred)."""
        return self.supabase_service_role_key or self.supabase_anon_key

    # -------------------------------------------------------------------------
    # Repository Retry
    # -------------------------------------------------------------------------
    repository_max_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts per repository call before giving up",
    )
    repository_min_wait_seconds: float = Field(default=0.5, gt=0)
    repository_max_wait_seconds: float = Field(default=5.0, gt=0)

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is a valid value."""
        valid_environments = {"development", "staging", "production", "test"}
        if v.lower() not in valid_environments:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {valid_environments}"
            )
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level '{v}'. Must be one of: {valid_levels}")
        return v.upper()

    @model_validator(mode="after")
    def validate_ranges(self) -> "Settings":
        """Cross-field checks."""
        if self.warmup_rep_floor > self.warmup_rep_cap:
            raise ValueError(
                f"warmup_rep_floor ({self.warmup_rep_floor}) cannot exceed "
                f"warmup_rep_cap ({self.warmup_rep_cap})"
            )
        if self.repository_min_wait_seconds > self.repository_max_wait_seconds:
            raise ValueError(
                f"repository_min_wait_seconds ({self.repository_min_wait_seconds}) "
                f"cannot exceed repository_max_wait_seconds "
                f"({self.repository_max_wait_seconds})"
            )
        return self

    def warmup_config(self) -> WarmupConfig:
        """Build the domain warmup configuration from these settings."""
        return WarmupConfig(
            min_working_weight=self.warmup_min_working_weight,
            increment=self.warmup_increment,
            minimum_plate_weight=self.warmup_minimum_plate_weight,
            rep_cap=self.warmup_rep_cap,
            rep_floor=self.warmup_rep_floor,
        )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    For testing, you can clear the cache with get_settings.cache_clear().

    Returns:
        Settings: Session engine settings instance
    """
    return Settings()
