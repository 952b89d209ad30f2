"""Configuration management for questline."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")
    environment: str = Field(default="development", description="Deployment environment reported to Logfire")

    # Habit Streak Clock
    enable_habit_clock: bool = Field(default=True, description="Enable/disable the recurring habit normalization job")
    habit_sync_interval_seconds: int = Field(
        default=60, description="Seconds between habit normalization passes (must run at least once a day)"
    )
    job_max_retries: int = Field(default=3, description="Retry attempts for a failing scheduled job")

    # Transient UI feedback
    xp_popup_ttl_seconds: float = Field(default=1.5, description="Lifetime of an ephemeral XP popup entry")


# Game rule constants
class Constants:
    """Game-rule constants shared by the progression engine."""

    # XP Calculator
    BASE_XP: int = 10
    STREAK_STEP_PERCENT: int = 10  # +10% per consecutive day
    STREAK_MAX_PERCENT: int = 200  # Multiplier ceiling (2.0x)

    # Completion bonuses
    SECTION_BONUS_XP: int = 20
    QUEST_BONUS_SMALL: int = 80  # 1-2 categories
    QUEST_BONUS_MEDIUM: int = 120  # 3-5 categories
    QUEST_BONUS_LARGE: int = 180  # 6+ categories
    QUEST_BONUS_MEDIUM_MIN_CATEGORIES: int = 3
    QUEST_BONUS_LARGE_MIN_CATEGORIES: int = 6

    # Leveling
    MAX_LEVEL: int = 1000

    # History
    MAX_ACTIVE_HISTORY_DAYS: int = 365

    # Text inputs
    MAX_TEXT_LENGTH: int = 500


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
