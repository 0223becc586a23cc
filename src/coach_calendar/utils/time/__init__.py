"""
Timezone-aware calendar utilities for Coach Calendar.

This package provides timezone resolution, calendar date arithmetic and
date formatting used across the coaching application.
"""

from .calendar_date import MAX_YEAR, MIN_YEAR, CalendarDate, DateLike
from .calendar_math import (
    CalendarGridCell,
    DateSpan,
    DayBounds,
    Direction,
    WeekRange,
    calendar_grid,
    date_to_utc_timestamp,
    day_bounds,
    is_future_date,
    is_today,
    month_dates,
    month_end,
    month_start,
    navigate_date,
    next_month,
    normalize_date,
    prev_month,
    today,
    utc_timestamp_to_date,
    week_dates,
    week_end,
    week_range,
    week_start,
)
from .formatting import (
    DATE_STYLES,
    DateStyle,
    format_date,
    format_long,
    format_month_title,
    format_short,
    format_week_range,
)
from .navigator import DateNavigator
from .timezone import (
    COMMON_TIMEZONES,
    TimezoneResolver,
    configure_resolver,
    detect_system_timezone,
    effective_timezone,
    get_default_resolver,
    get_timezone_offset,
    get_user_timezone,
    get_zone,
    is_valid_timezone,
    now_in_timezone,
    resolve_timezone,
)

__all__ = [
    "MAX_YEAR",
    "MIN_YEAR",
    "CalendarDate",
    "DateLike",
    "CalendarGridCell",
    "DateSpan",
    "DayBounds",
    "Direction",
    "WeekRange",
    "calendar_grid",
    "date_to_utc_timestamp",
    "day_bounds",
    "is_future_date",
    "is_today",
    "month_dates",
    "month_end",
    "month_start",
    "navigate_date",
    "next_month",
    "normalize_date",
    "prev_month",
    "today",
    "utc_timestamp_to_date",
    "week_dates",
    "week_end",
    "week_range",
    "week_start",
    "DATE_STYLES",
    "DateStyle",
    "format_date",
    "format_long",
    "format_month_title",
    "format_short",
    "format_week_range",
    "DateNavigator",
    "COMMON_TIMEZONES",
    "TimezoneResolver",
    "configure_resolver",
    "detect_system_timezone",
    "effective_timezone",
    "get_default_resolver",
    "get_timezone_offset",
    "get_user_timezone",
    "get_zone",
    "is_valid_timezone",
    "now_in_timezone",
    "resolve_timezone",
]
