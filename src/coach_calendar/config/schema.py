"""Configuration schema for Coach Calendar using nested Pydantic models."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from ..utils.time.formatting import DateStyle
from ..utils.time.timezone import (
    DEFAULT_FALLBACK_TIMEZONE,
    NEUTRAL_TIMEZONE,
    is_valid_timezone,
)


def _require_timezone(v: str) -> str:
    if not is_valid_timezone(v):
        raise ValueError(f"Unknown IANA timezone identifier: {v!r}")
    return v


class TimezoneConfig(BaseModel):
    """Timezone resolution configuration."""

    preference: str | None = Field(
        default=None,
        description="Stored timezone preference (IANA identifier), or null to detect",
    )
    fallback: str = Field(
        default=DEFAULT_FALLBACK_TIMEZONE,
        description="Timezone used when the system timezone cannot be detected",
    )
    neutral: str = Field(
        default=NEUTRAL_TIMEZONE,
        description="Timezone value that means 'no preference stored'",
    )

    @field_validator("preference")
    @classmethod
    def validate_preference(cls, v: str | None) -> str | None:
        """Validate the stored preference when one is set."""
        if v is None or v == "":
            return None
        return _require_timezone(v)

    @field_validator("fallback", "neutral")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate fallback and neutral identifiers."""
        return _require_timezone(v)


class DisplayConfig(BaseModel):
    """Date display configuration."""

    date_style: DateStyle = Field(
        default="long",
        description="Default style for formatted dates (long, short, month-day, weekday, numeric)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Console log level",
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        """Accept log levels in any case."""
        if isinstance(v, str):
            return v.upper()
        return v


class CoachCalendarConfig(BaseModel):
    """Top-level Coach Calendar configuration."""

    timezone: TimezoneConfig = Field(default_factory=TimezoneConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
