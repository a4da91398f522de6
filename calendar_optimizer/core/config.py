# calendar_optimizer/core/config.py
import os
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Infrastructure
    environment: Literal["development", "test", "staging", "production"] = "development"
    database_url: str = Field(
        default="sqlite:///./calendar_optimizer.db",
        description="SQLAlchemy URL for the booking and suggestion store",
    )
    redis_url: str = Field(
        default="redis://localhost:6379",
        description="Broker for the suggestion expiry worker",
    )

    # Gap detection
    min_gap_minutes: int = Field(default=30, ge=1, description="Smallest gap worth reporting")
    max_consolidation_gap_minutes: int = Field(
        default=90,
        ge=1,
        description="Gaps above this are treated as already acceptable free time",
    )
    day_end_time: str = Field(
        default="21:00",
        description="End-of-day boundary used when the moved booking is the last of the day",
    )

    # Scoring
    min_benefit_score: int = Field(default=30, ge=0, le=100)
    preference_history_limit: int = Field(default=20, ge=1)
    default_client_name: str = "Client"

    # Suggestion lifecycle
    suggestion_expiration_days: int = Field(default=7, ge=1)
    max_suggestions_per_run: int = Field(default=5, ge=1)

    # Monitoring
    slow_operation_threshold_seconds: float = 1.0

    model_config = SettingsConfigDict(
        env_prefix="CALENDAR_OPTIMIZER_",
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("day_end_time")
    @classmethod
    def _validate_day_end_time(cls, value: str) -> str:
        parts = value.split(":")
        if len(parts) not in (2, 3) or not all(part.isdigit() for part in parts):
            raise ValueError("day_end_time must be HH:MM or HH:MM:SS")
        hours, minutes = int(parts[0]), int(parts[1])
        if not (0 <= hours <= 24 and 0 <= minutes < 60) or (hours == 24 and minutes > 0):
            raise ValueError(f"day_end_time out of range: {value}")
        return value


settings = Settings()
