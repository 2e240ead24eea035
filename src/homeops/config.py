"""Runtime settings for the warranty engine.

Values come from keyword overrides, then ``HOMEOPS_*`` environment
variables, then the defaults below. The CLI loads a ``.env`` file before
reading the environment.
"""

import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

ENV_PREFIX = "HOMEOPS_"


class Settings(BaseModel):
    """Thresholds shared by the warranty clock, aggregator and alerts."""

    model_config = ConfigDict(frozen=True)

    expiring_soon_days: int = Field(
        default=30, ge=0, description="Days left at or below which a warranty expires soon"
    )
    attention_days: int = Field(
        default=90, ge=0, description="Days left at or below which progress is emphasized"
    )
    final_notice_days: int = Field(
        default=7, ge=0, description="Days left at or below which the last notice applies"
    )
    recent_days: int = Field(
        default=30, ge=0, description="Window for the recently purchased collection"
    )
    high_value_threshold: float = Field(
        default=500, ge=0, description="Minimum price for the high value collection"
    )
    trend_months: int = Field(
        default=6, ge=1, description="Trailing months in the purchase histogram"
    )
    top_value_limit: int = Field(
        default=5, ge=0, description="Number of items in the most valuable list"
    )
    short_warranty_months: int = Field(
        default=12, ge=1, description="Average duration below which a tip is shown"
    )
    alert_days_before: tuple[int, ...] = Field(
        default=(30, 7), description="Reminder offsets before warranty expiration"
    )
    log_level: str = Field(default="WARNING")

    @field_validator("alert_days_before", mode="before")
    @classmethod
    def split_offsets(cls, value: Any) -> Any:
        """Accept ``"30,7"`` as written in an environment variable."""
        if isinstance(value, str):
            return tuple(int(part) for part in value.split(",") if part.strip())
        return value

    @classmethod
    def from_env(cls, **overrides: Any) -> "Settings":
        """Build settings from ``HOMEOPS_*`` variables and overrides.

        Priority: overrides > env vars > defaults.
        """
        values: dict[str, Any] = {}
        for name in cls.model_fields:
            raw = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None and raw.strip():
                values[name] = raw.strip()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)
