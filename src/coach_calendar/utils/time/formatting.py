"""
Display formatting for calendar dates.

Dates are rendered through ``strftime`` on a timezone-aware datetime
anchored at local noon of the date in the requested timezone, so the
rendered day always matches the calendar date regardless of the zone's
UTC offset or DST state.
"""

from datetime import datetime, time
from typing import Literal

from ..core.exceptions import ValidationError
from .calendar_date import CalendarDate, DateLike
from .timezone import effective_timezone, get_zone

DateStyle = Literal["long", "short", "month-day", "weekday", "numeric"]

DATE_STYLES: tuple[DateStyle, ...] = ("long", "short", "month-day", "weekday", "numeric")


def _localized(value: DateLike, tz: str | None) -> datetime:
    zone = get_zone(effective_timezone(tz))
    day = CalendarDate.coerce(value)
    return datetime.combine(day.to_date(), time(12), tzinfo=zone)


def format_date(value: DateLike, style: DateStyle = "long", tz: str | None = None) -> str:
    """
    Format a date for display.

    Args:
        value: Date in YYYY-MM-DD format
        style: 'long' (Wednesday, September 3, 2025), 'short' (Wed, Sep 3),
            'month-day' (September 3), 'weekday' (Wednesday) or
            'numeric' (9/3/2025)
        tz: IANA timezone identifier (defaults to the user's timezone)

    Returns:
        Formatted date string

    Raises:
        InvalidDateFormatError: If the date is malformed
        InvalidTimezoneError: If the timezone is not resolvable
        ValidationError: If the style is unknown
    """
    dt = _localized(value, tz)

    match style:
        case "long":
            return f"{dt:%A}, {dt:%B} {dt.day}, {dt.year}"
        case "short":
            return f"{dt:%a}, {dt:%b} {dt.day}"
        case "month-day":
            return f"{dt:%B} {dt.day}"
        case "weekday":
            return f"{dt:%A}"
        case "numeric":
            return f"{dt.month}/{dt.day}/{dt.year}"
        case _:
            raise ValidationError(
                f"Unknown date style: {style!r}",
                user_message=f"Date style must be one of: {', '.join(DATE_STYLES)}",
                context=style,
            )


def format_long(value: DateLike, tz: str | None = None) -> str:
    """
    Format a date as "Wednesday, September 3, 2025".

    Examples:
        >>> format_long("2025-09-03", "UTC")
        'Wednesday, September 3, 2025'
    """
    return format_date(value, "long", tz)


def format_short(value: DateLike, tz: str | None = None) -> str:
    """
    Format a date as "9/3/2025".

    Examples:
        >>> format_short("2025-09-03", "UTC")
        '9/3/2025'
    """
    return format_date(value, "numeric", tz)


def format_week_range(week_start_date: DateLike, tz: str | None = None) -> str:
    """
    Format a week as "August 25 - August 31, 2025".

    Both month names are always shown; the year is attached to the end date
    only, also when the week crosses into a new year.

    Examples:
        >>> format_week_range("2025-12-29", "UTC")
        'December 29 - January 4, 2026'
    """
    start = _localized(week_start_date, tz)
    end = _localized(CalendarDate.coerce(week_start_date).add_days(6), tz)
    return f"{start:%B} {start.day} - {end:%B} {end.day}, {end.year}"


def format_month_title(year: int, month: int, tz: str | None = None) -> str:
    """Format a month heading such as "September 2025"."""
    dt = _localized(CalendarDate(year, month, 1), tz)
    return f"{dt:%B} {dt.year}"
