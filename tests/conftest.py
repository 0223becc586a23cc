"""
Global test configuration fixtures for Coach Calendar tests.

Provides configuration fixtures and keeps the process-wide timezone
resolver isolated between tests.
"""

from __future__ import annotations

from collections.abc import Generator

import pytest

from src.coach_calendar.config.schema import (
    CoachCalendarConfig,
    DisplayConfig,
    LoggingConfig,
    TimezoneConfig,
)
from src.coach_calendar.utils.time.timezone import (
    DEFAULT_FALLBACK_TIMEZONE,
    NEUTRAL_TIMEZONE,
    TimezoneResolver,
    get_default_resolver,
)


@pytest.fixture(autouse=True)
def reset_timezone_resolver() -> Generator[TimezoneResolver, None, None]:
    """
    Give every test a clean process-wide resolver.

    The memoized detection result is cleared before and after each test, and
    the fallback/neutral identifiers are restored to their defaults.
    """
    resolver = get_default_resolver()
    resolver.reset()
    resolver.fallback = DEFAULT_FALLBACK_TIMEZONE
    resolver.neutral = NEUTRAL_TIMEZONE
    yield resolver
    resolver.reset()
    resolver.fallback = DEFAULT_FALLBACK_TIMEZONE
    resolver.neutral = NEUTRAL_TIMEZONE


@pytest.fixture
def pinned_timezone(reset_timezone_resolver: TimezoneResolver) -> str:
    """Pin the detected system timezone so omitted-tz calls are deterministic."""
    reset_timezone_resolver.inject("America/Denver")
    return "America/Denver"


@pytest.fixture
def base_config() -> CoachCalendarConfig:
    """Configuration with default values."""
    return CoachCalendarConfig()


@pytest.fixture
def custom_config() -> CoachCalendarConfig:
    """Configuration with a stored preference and non-default display/logging."""
    return CoachCalendarConfig(
        timezone=TimezoneConfig(
            preference="Europe/London",
            fallback="America/New_York",
            neutral="UTC",
        ),
        display=DisplayConfig(date_style="numeric"),
        logging=LoggingConfig(level="DEBUG"),
    )
