"""
Calendar date value type for Coach Calendar.

Dates are modelled as plain year/month/day values with no time-of-day or
timezone attached, serialised canonically as ``YYYY-MM-DD``. Keeping the
value separate from ``datetime`` avoids picking up an implicit zone when a
date is moved between users in different timezones.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, timedelta

from ..core.exceptions import InvalidDateFormatError

MIN_YEAR = 1900
MAX_YEAR = 2100

_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def check_year_in_range(year: int, value: object | None = None) -> None:
    """
    Reject years outside the accepted bound.

    Raises:
        InvalidDateFormatError: If the year is below MIN_YEAR or above MAX_YEAR
    """
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise InvalidDateFormatError(
            value if value is not None else year,
            f"year must be between {MIN_YEAR} and {MAX_YEAR}",
        )


@dataclass(frozen=True, order=True, slots=True)
class CalendarDate:
    """
    A Gregorian calendar day.

    Construction validates the day against the month length (leap years
    included); field order makes comparison chronological.

    Examples:
        >>> str(CalendarDate(2025, 9, 3))
        '2025-09-03'
        >>> CalendarDate.parse("2024-02-29").day_of_week
        4
    """

    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        try:
            _ = date(self.year, self.month, self.day)
        except (TypeError, ValueError) as e:
            raise InvalidDateFormatError(
                f"{self.year}-{self.month}-{self.day}", str(e)
            ) from e

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    @classmethod
    def parse(cls, value: object) -> CalendarDate:
        """
        Parse a canonical ``YYYY-MM-DD`` string.

        Args:
            value: Candidate date string

        Returns:
            The parsed CalendarDate

        Raises:
            InvalidDateFormatError: If the value is not a string in
                ``YYYY-MM-DD`` form, does not name a real day, or its year is
                outside MIN_YEAR..MAX_YEAR
        """
        if not isinstance(value, str) or not _DATE_PATTERN.fullmatch(value):
            raise InvalidDateFormatError(value)

        year, month, day = (int(part) for part in value.split("-"))
        check_year_in_range(year, value)
        try:
            return cls(year, month, day)
        except InvalidDateFormatError as e:
            raise InvalidDateFormatError(value, "no such calendar day") from e

    @classmethod
    def from_date(cls, value: date) -> CalendarDate:
        """Build a CalendarDate from a ``datetime.date`` (or the date part of a datetime)."""
        return cls(value.year, value.month, value.day)

    @classmethod
    def coerce(cls, value: object) -> CalendarDate:
        """
        Accept a CalendarDate, a ``datetime.date`` or a ``YYYY-MM-DD`` string.

        Raises:
            InvalidDateFormatError: If the value cannot be interpreted as a date
        """
        if isinstance(value, CalendarDate):
            return value
        if isinstance(value, date):
            return cls.from_date(value)
        return cls.parse(value)

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)

    def add_days(self, days: int) -> CalendarDate:
        """
        Return the date ``days`` calendar days away (negative moves backwards).

        Raises:
            InvalidDateFormatError: If the result falls outside years 1..9999
        """
        try:
            return CalendarDate.from_date(self.to_date() + timedelta(days=days))
        except OverflowError as e:
            raise InvalidDateFormatError(self, f"{days:+d} days is outside the supported calendar") from e

    @property
    def day_of_week(self) -> int:
        """Day of week with Sunday = 0 through Saturday = 6."""
        return (self.to_date().weekday() + 1) % 7


DateLike = str | CalendarDate | date
