"""
Timezone-aware calendar arithmetic for Coach Calendar.

Every function works on calendar dates (``YYYY-MM-DD``) and an IANA
timezone. The timezone only matters where the current instant or a real
instant is involved ("today", day bounds, UTC timestamps); stepping from
one calendar date to the next is plain Gregorian succession and is never
affected by DST.

When ``tz`` is omitted the user's timezone is taken from the process-wide
resolver.
"""

import calendar
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import Literal, NamedTuple

from ..core.exceptions import InvalidDateFormatError, InvalidDirectionError
from .calendar_date import CalendarDate, DateLike, check_year_in_range
from .timezone import effective_timezone, get_zone, now_in_timezone

Direction = Literal["prev", "next"]

GRID_WEEKS = 6
GRID_SIZE = GRID_WEEKS * 7

# Grid columns start on Sunday
_GRID_CALENDAR = calendar.Calendar(firstweekday=calendar.SUNDAY)


class WeekRange(NamedTuple):
    """Monday-to-Sunday week as canonical date strings."""

    start: str
    end: str


class DayBounds(NamedTuple):
    """First and last instant of a calendar day in a timezone."""

    start: datetime
    end: datetime


@dataclass(frozen=True, slots=True)
class CalendarGridCell:
    """One day of a month-view calendar grid."""

    date: str
    is_current_month: bool
    is_today: bool
    day_of_week: int


class DateSpan:
    """
    Consecutive calendar dates, produced lazily.

    Iterating yields canonical date strings; the span can be iterated any
    number of times.

    Examples:
        >>> list(DateSpan(CalendarDate(2025, 9, 1), 3))
        ['2025-09-01', '2025-09-02', '2025-09-03']
    """

    def __init__(self, start: CalendarDate, length: int) -> None:
        self.start: CalendarDate = start
        self.length: int = max(length, 0)

    def __iter__(self) -> Iterator[str]:
        for offset in range(self.length):
            yield str(self.start.add_days(offset))

    def __len__(self) -> int:
        return self.length

    def __contains__(self, item: object) -> bool:
        try:
            candidate = CalendarDate.coerce(item)
        except InvalidDateFormatError:
            return False
        offset = (candidate.to_date() - self.start.to_date()).days
        return 0 <= offset < self.length

    def __repr__(self) -> str:
        return f"DateSpan(start={str(self.start)!r}, length={self.length})"


def _month_start(year: int, month: int) -> CalendarDate:
    if not isinstance(month, int) or not 1 <= month <= 12:
        raise InvalidDateFormatError(f"{year}-{month}", "month must be between 1 and 12")
    check_year_in_range(year, f"{year}-{month}")
    return CalendarDate(year, month, 1)


def _month_end(year: int, month: int) -> CalendarDate:
    # Day 0 of the following month
    following = _month_start(year, month).to_date().replace(day=28) + timedelta(days=4)
    return CalendarDate.from_date(following - timedelta(days=following.day))


def _today(tz: str) -> CalendarDate:
    return CalendarDate.from_date(now_in_timezone(tz).date())


def _week_start(day: CalendarDate) -> CalendarDate:
    dow = day.day_of_week
    days_to_subtract = 6 if dow == 0 else dow - 1
    return day.add_days(-days_to_subtract)


def today(tz: str | None = None) -> str:
    """
    Get today's date as observed in a timezone.

    Args:
        tz: IANA timezone identifier (defaults to the user's timezone)

    Returns:
        Date string in YYYY-MM-DD format

    Raises:
        InvalidTimezoneError: If the timezone is not resolvable
    """
    return str(_today(effective_timezone(tz)))


def normalize_date(value: DateLike, tz: str | None = None) -> str:
    """
    Validate a date and return it in canonical YYYY-MM-DD form.

    Raises:
        InvalidDateFormatError: If the value is not a valid date
        InvalidTimezoneError: If the timezone is not resolvable
    """
    _ = effective_timezone(tz)
    return str(CalendarDate.coerce(value))


def navigate_date(
    current_date: DateLike, direction: Direction, tz: str | None = None
) -> str:
    """
    Step one calendar day backwards or forwards.

    Crosses month, year and leap-day boundaries by ordinary calendar
    succession; DST transitions in ``tz`` never skip or repeat a date.

    Args:
        current_date: Date in YYYY-MM-DD format
        direction: 'prev' or 'next'
        tz: IANA timezone identifier (defaults to the user's timezone)

    Returns:
        The adjacent date in YYYY-MM-DD format

    Raises:
        InvalidDateFormatError: If the date is malformed or not a real day
        InvalidDirectionError: If direction is not 'prev' or 'next'
        InvalidTimezoneError: If the timezone is not resolvable

    Examples:
        >>> navigate_date("2025-08-31", "next", "UTC")
        '2025-09-01'
        >>> navigate_date("2024-03-01", "prev", "UTC")
        '2024-02-29'
    """
    _ = effective_timezone(tz)
    day = CalendarDate.coerce(current_date)

    match direction:
        case "prev":
            return str(day.add_days(-1))
        case "next":
            return str(day.add_days(1))
        case _:
            raise InvalidDirectionError(direction)


def is_today(value: DateLike, tz: str | None = None) -> bool:
    """Check whether a date is today in the given timezone."""
    resolved = effective_timezone(tz)
    return CalendarDate.coerce(value) == _today(resolved)


def is_future_date(value: DateLike, tz: str | None = None) -> bool:
    """Check whether a date is after today in the given timezone."""
    resolved = effective_timezone(tz)
    return CalendarDate.coerce(value) > _today(resolved)


def week_start(value: DateLike, tz: str | None = None) -> str:
    """
    Get the Monday that starts the ISO week containing a date.

    Examples:
        >>> week_start("2025-09-07", "UTC")
        '2025-09-01'
        >>> week_start("2025-08-31", "UTC")
        '2025-08-25'
    """
    _ = effective_timezone(tz)
    return str(_week_start(CalendarDate.coerce(value)))


def week_end(value: DateLike, tz: str | None = None) -> str:
    """Get the Sunday that ends the ISO week containing a date."""
    _ = effective_timezone(tz)
    return str(_week_start(CalendarDate.coerce(value)).add_days(6))


def week_range(value: DateLike, tz: str | None = None) -> WeekRange:
    """Get the Monday and Sunday of the week containing a date."""
    _ = effective_timezone(tz)
    start = _week_start(CalendarDate.coerce(value))
    return WeekRange(start=str(start), end=str(start.add_days(6)))


def week_dates(week_start_date: DateLike, tz: str | None = None) -> DateSpan:
    """
    Get the seven dates of a week.

    The start date is used as given; pass an actual week start (see
    ``week_start``) to get a Monday-to-Sunday week.
    """
    _ = effective_timezone(tz)
    return DateSpan(CalendarDate.coerce(week_start_date), 7)


def month_start(year: int, month: int, tz: str | None = None) -> str:
    """
    Get the first day of a month.

    Raises:
        InvalidDateFormatError: If month is outside 1-12 or the year is out of range
    """
    _ = effective_timezone(tz)
    return str(_month_start(year, month))


def month_end(year: int, month: int, tz: str | None = None) -> str:
    """
    Get the last day of a month, accounting for leap years.

    Examples:
        >>> month_end(2024, 2, "UTC")
        '2024-02-29'
        >>> month_end(2025, 2, "UTC")
        '2025-02-28'
    """
    _ = effective_timezone(tz)
    return str(_month_end(year, month))


def month_dates(year: int, month: int, tz: str | None = None) -> DateSpan:
    """Get every date of a month, first to last."""
    _ = effective_timezone(tz)
    start = _month_start(year, month)
    return DateSpan(start, _month_end(year, month).day)


def prev_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month earlier."""
    if month == 1:
        return year - 1, 12
    return year, month - 1


def next_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month later."""
    if month == 12:
        return year + 1, 1
    return year, month + 1


def calendar_grid(
    year: int, month: int, tz: str | None = None
) -> list[CalendarGridCell]:
    """
    Build a 6x7 month-view grid starting on a Sunday.

    Leading cells come from the previous month, trailing cells from the
    next month, so the grid always holds exactly 42 days regardless of
    month length or starting weekday.

    Args:
        year: Year (e.g., 2025)
        month: Month (1-12)
        tz: IANA timezone identifier used to flag today's cell

    Returns:
        42 CalendarGridCell entries in row-major order
    """
    resolved = effective_timezone(tz)
    first = _month_start(year, month)
    current_day = _today(resolved)

    # itermonthdates pads to whole weeks; keep going until six are filled
    days = list(_GRID_CALENDAR.itermonthdates(year, month))
    while len(days) < GRID_SIZE:
        days.append(days[-1] + timedelta(days=1))

    grid: list[CalendarGridCell] = []
    for index, day in enumerate(days):
        cell_date = CalendarDate.from_date(day)
        grid.append(
            CalendarGridCell(
                date=str(cell_date),
                is_current_month=(day.year, day.month) == (first.year, first.month),
                is_today=cell_date == current_day,
                day_of_week=index % 7,
            )
        )
    return grid


def day_bounds(value: DateLike, tz: str | None = None) -> DayBounds:
    """
    Get the first and last instant of a calendar day in a timezone.

    On DST transition days the span is 23 or 25 hours long. A midnight that
    does not exist locally starts the day at the first valid instant.

    Returns:
        DayBounds with timezone-aware start and end datetimes
    """
    zone = get_zone(effective_timezone(tz))
    day = CalendarDate.coerce(value)

    def local_midnight(d: date) -> datetime:
        naive = datetime.combine(d, time.min)
        # Round-trip through UTC to land on a real local instant
        return naive.replace(tzinfo=zone).astimezone(UTC).astimezone(zone)

    following_day = day.add_days(1)
    try:
        start = local_midnight(day.to_date())
        following = local_midnight(following_day.to_date())
        end = (following.astimezone(UTC) - timedelta(microseconds=1)).astimezone(zone)
    except OverflowError as e:
        raise InvalidDateFormatError(day, "day bounds fall outside the supported range") from e
    return DayBounds(start=start, end=end)


def utc_timestamp_to_date(timestamp: datetime | str, tz: str | None = None) -> str:
    """
    Get the calendar date of an instant as observed in a timezone.

    Args:
        timestamp: Aware datetime or ISO-8601 string; naive values are UTC
        tz: IANA timezone identifier (defaults to the user's timezone)

    Returns:
        Date string in YYYY-MM-DD format

    Raises:
        InvalidDateFormatError: If the timestamp string cannot be parsed

    Examples:
        >>> utc_timestamp_to_date("2025-09-03T02:30:00Z", "America/New_York")
        '2025-09-02'
    """
    zone = get_zone(effective_timezone(tz))
    if isinstance(timestamp, str):
        try:
            moment = datetime.fromisoformat(timestamp)
        except ValueError as e:
            raise InvalidDateFormatError(timestamp, "not an ISO-8601 timestamp") from e
    else:
        moment = timestamp

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    try:
        local = moment.astimezone(zone)
    except OverflowError as e:
        raise InvalidDateFormatError(timestamp, "outside the supported range") from e
    return str(CalendarDate.from_date(local.date()))


def date_to_utc_timestamp(value: DateLike, tz: str | None = None) -> str:
    """
    Get the UTC timestamp of local midnight of a date, for storage.

    Examples:
        >>> date_to_utc_timestamp("2025-09-03", "America/New_York")
        '2025-09-03T04:00:00.000Z'
    """
    start = day_bounds(value, tz).start.astimezone(UTC)
    return start.isoformat(timespec="milliseconds").replace("+00:00", "Z")
