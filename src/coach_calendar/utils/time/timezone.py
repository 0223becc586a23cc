"""
Timezone resolution utilities for Coach Calendar.

This module decides which IANA timezone a calendar computation runs in:
a stored user preference wins, otherwise the ambient system timezone is
detected (and memoized), otherwise a fixed fallback is used. It also holds
the validated zone lookup shared by the date arithmetic functions.
"""

import logging
import os
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.exceptions import InvalidTimezoneError, TimezoneDetectionError

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_TIMEZONE = "UTC"
NEUTRAL_TIMEZONE = "UTC"

# Offered by the settings timezone selector
COMMON_TIMEZONES: tuple[tuple[str, str], ...] = (
    ("UTC", "UTC (Coordinated Universal Time)"),
    ("America/New_York", "Eastern Time (ET)"),
    ("America/Chicago", "Central Time (CT)"),
    ("America/Denver", "Mountain Time (MT)"),
    ("America/Los_Angeles", "Pacific Time (PT)"),
    ("America/Phoenix", "Arizona Time (MST)"),
    ("America/Anchorage", "Alaska Time (AKST)"),
    ("Pacific/Honolulu", "Hawaii Time (HST)"),
    ("Europe/London", "London (GMT/BST)"),
    ("Europe/Paris", "Paris (CET/CEST)"),
    ("Europe/Berlin", "Berlin (CET/CEST)"),
    ("Europe/Rome", "Rome (CET/CEST)"),
    ("Europe/Madrid", "Madrid (CET/CEST)"),
    ("Asia/Tokyo", "Tokyo (JST)"),
    ("Asia/Shanghai", "Shanghai (CST)"),
    ("Asia/Kolkata", "Mumbai/Delhi (IST)"),
    ("Asia/Dubai", "Dubai (GST)"),
    ("Australia/Sydney", "Sydney (AEST/AEDT)"),
    ("Australia/Melbourne", "Melbourne (AEST/AEDT)"),
    ("Pacific/Auckland", "Auckland (NZST/NZDT)"),
)

_LOCALTIME_PATH = Path("/etc/localtime")


def is_valid_timezone(value: object) -> bool:
    """
    Check whether a value names a timezone known to the timezone database.

    Args:
        value: Candidate timezone identifier

    Returns:
        True if the value is a non-empty string resolvable by zoneinfo

    Examples:
        >>> is_valid_timezone("America/New_York")
        True
        >>> is_valid_timezone("Not/AZone")
        False
        >>> is_valid_timezone(None)
        False
    """
    if not isinstance(value, str) or not value:
        return False
    try:
        _ = ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return False
    return True


def get_zone(tz: object) -> ZoneInfo:
    """
    Look up a timezone, rejecting identifiers the database does not know.

    Raises:
        InvalidTimezoneError: If the identifier is not resolvable
    """
    if not is_valid_timezone(tz):
        raise InvalidTimezoneError(tz)
    return ZoneInfo(tz)  # pyright: ignore[reportArgumentType] # checked above


def now_in_timezone(tz: str) -> datetime:
    """
    Get the current instant as an aware datetime in the given timezone.

    Raises:
        InvalidTimezoneError: If the identifier is not resolvable
    """
    return datetime.now(get_zone(tz))


def get_timezone_offset(tz: str, at: datetime | None = None) -> int:
    """
    Get the UTC offset of a timezone in minutes (east of UTC is positive).

    Args:
        tz: IANA timezone identifier
        at: Instant to evaluate the offset at (defaults to now); naive
            datetimes are read as wall-clock time in ``tz``

    Returns:
        Offset in whole minutes, reflecting DST at that instant

    Examples:
        >>> get_timezone_offset("UTC")
        0
        >>> get_timezone_offset("America/New_York", datetime(2025, 1, 15, 12))
        -300
    """
    zone = get_zone(tz)
    if at is None:
        moment = datetime.now(zone)
    elif at.tzinfo is None:
        moment = at.replace(tzinfo=zone)
    else:
        moment = at.astimezone(zone)

    offset = moment.utcoffset()
    if offset is None:
        return 0
    return int(offset.total_seconds() // 60)


def _from_environment() -> str:
    key = os.environ.get("TZ", "").lstrip(":")
    if is_valid_timezone(key):
        return key
    raise TimezoneDetectionError("TZ environment variable is unset or invalid")


def _from_localtime_link() -> str:
    try:
        target = _LOCALTIME_PATH.resolve(strict=True)
    except OSError as e:
        raise TimezoneDetectionError(f"Cannot resolve {_LOCALTIME_PATH}: {e}") from e

    parts = target.parts
    if "zoneinfo" in parts:
        key = "/".join(parts[len(parts) - parts[::-1].index("zoneinfo"):])
        if is_valid_timezone(key):
            return key
    raise TimezoneDetectionError(f"{target} is not inside a zoneinfo directory")


_DETECTION_STRATEGIES: tuple[Callable[[], str], ...] = (
    _from_environment,
    _from_localtime_link,
)


def detect_system_timezone() -> str:
    """
    Detect the ambient timezone of the running system.

    Tries the ``TZ`` environment variable, then the ``/etc/localtime``
    symlink target (Linux/WSL, macOS).

    Returns:
        IANA timezone identifier

    Raises:
        TimezoneDetectionError: If no strategy yields a valid identifier
    """
    failures: list[str] = []
    for strategy in _DETECTION_STRATEGIES:
        try:
            return strategy()
        except TimezoneDetectionError as e:
            failures.append(str(e))
    raise TimezoneDetectionError(
        "Unable to detect system timezone: " + "; ".join(failures)
    )


class TimezoneResolver:
    """
    Resolves the effective timezone for a user.

    The detected system timezone is memoized after the first successful
    detection. A failed detection is not memoized, so a later call in an
    environment where detection works will retry.
    """

    def __init__(
        self,
        fallback: str = DEFAULT_FALLBACK_TIMEZONE,
        neutral: str = NEUTRAL_TIMEZONE,
        detector: Callable[[], str] = detect_system_timezone,
    ) -> None:
        self.fallback: str = fallback
        self.neutral: str = neutral
        self._detector: Callable[[], str] = detector
        self._detected: str | None = None

    @property
    def detected(self) -> str | None:
        """The memoized detection result, if any."""
        return self._detected

    def detect(self) -> str:
        """
        Return the system timezone, detecting it on first use.

        Never raises: returns the fallback when detection is unavailable.
        """
        if self._detected is not None:
            return self._detected

        try:
            detected = self._detector()
        except Exception as e:  # noqa: BLE001
            logger.warning(
                f"Failed to detect timezone, falling back to {self.fallback}: {e}"
            )
            return self.fallback

        # Single assignment; concurrent detections write the same value
        self._detected = detected
        logger.debug(f"Detected system timezone: {detected}")
        return detected

    def resolve(self, stored_preference: str | None = None) -> str:
        """
        Get the user's effective timezone.

        Args:
            stored_preference: Timezone stored on the user's profile, if any.
                The neutral sentinel counts as "no preference".

        Returns:
            The stored preference unchanged when set, otherwise the detected
            system timezone, otherwise the fallback
        """
        if stored_preference and stored_preference != self.neutral:
            return stored_preference
        return self.detect()

    def inject(self, tz: str) -> None:
        """Pin the detected timezone (used by tests and embedding applications)."""
        self._detected = tz

    def reset(self) -> None:
        """Forget the memoized detection result."""
        self._detected = None


_default_resolver = TimezoneResolver()


def get_default_resolver() -> TimezoneResolver:
    """Get the process-wide resolver."""
    return _default_resolver


def configure_resolver(
    fallback: str = DEFAULT_FALLBACK_TIMEZONE,
    neutral: str = NEUTRAL_TIMEZONE,
) -> TimezoneResolver:
    """
    Update the process-wide resolver's fallback and neutral identifiers.

    The memoized detection result is kept.
    """
    _default_resolver.fallback = fallback
    _default_resolver.neutral = neutral
    return _default_resolver


def effective_timezone(tz: str | None = None) -> str:
    """
    Get the timezone a calculation should run in.

    An omitted timezone is resolved through the process-wide resolver; an
    explicit one is validated.

    Raises:
        InvalidTimezoneError: If the timezone is not resolvable
    """
    resolved = tz if tz is not None else _default_resolver.resolve()
    _ = get_zone(resolved)
    return resolved


def get_user_timezone() -> str:
    """Get the detected system timezone (or the fallback when undetectable)."""
    return _default_resolver.detect()


def resolve_timezone(stored_preference: str | None = None) -> str:
    """
    Get the effective timezone for a stored preference.

    Examples:
        >>> resolve_timezone("Europe/London")
        'Europe/London'
    """
    return _default_resolver.resolve(stored_preference)
