"""
Tests for timezone-aware calendar arithmetic.

This module tests day navigation, week and month boundaries, the month
grid, "today" evaluation across timezones and the UTC storage helpers.
"""

from datetime import UTC, date, datetime, timedelta

import pytest

from src.coach_calendar.utils.core.exceptions import (
    CoachCalendarError,
    InvalidDateFormatError,
    InvalidDirectionError,
    InvalidTimezoneError,
)
from src.coach_calendar.utils.time.calendar_date import CalendarDate
from src.coach_calendar.utils.time.calendar_math import (
    GRID_SIZE,
    DateSpan,
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
from tests.utils.test_helpers import freeze_now


class TestNavigateDate:
    """Test single-day navigation."""

    def test_next_crosses_month_boundary(self) -> None:
        """Test stepping from the last day of a month."""
        assert navigate_date("2025-08-31", "next", "UTC") == "2025-09-01"

    def test_next_into_leap_day(self) -> None:
        """Test that February 29 follows February 28 in a leap year."""
        assert navigate_date("2024-02-28", "next", "UTC") == "2024-02-29"

    def test_next_skips_leap_day_in_common_year(self) -> None:
        """Test that March 1 follows February 28 in a common year."""
        assert navigate_date("2025-02-28", "next", "UTC") == "2025-03-01"

    def test_prev_crosses_year_boundary(self) -> None:
        """Test stepping back from January 1."""
        assert navigate_date("2025-01-01", "prev", "UTC") == "2024-12-31"

    def test_prev_into_leap_day(self) -> None:
        """Test stepping back from March 1 in a leap year."""
        assert navigate_date("2024-03-01", "prev", "UTC") == "2024-02-29"

    @pytest.mark.parametrize(
        ("current", "expected"),
        [
            ("2025-03-08", "2025-03-09"),
            ("2025-03-09", "2025-03-10"),  # spring forward
            ("2025-11-01", "2025-11-02"),
            ("2025-11-02", "2025-11-03"),  # fall back
        ],
    )
    def test_dst_transitions_do_not_distort_succession(
        self, current: str, expected: str
    ) -> None:
        """Test that DST days in New York neither skip nor repeat a date."""
        assert navigate_date(current, "next", "America/New_York") == expected

    @pytest.mark.parametrize("tz", ["UTC", "America/New_York", "Asia/Kolkata", "Pacific/Auckland"])
    def test_round_trip(self, tz: str) -> None:
        """Test that next then prev returns the starting date."""
        for start in ("2024-02-29", "2025-03-09", "2025-12-31", "2025-11-02"):
            forward = navigate_date(start, "next", tz)
            assert navigate_date(forward, "prev", tz) == start

    def test_accepts_date_values(self) -> None:
        """Test that date and CalendarDate inputs are accepted."""
        assert navigate_date(date(2025, 8, 31), "next", "UTC") == "2025-09-01"
        assert navigate_date(CalendarDate(2025, 8, 31), "prev", "UTC") == "2025-08-30"

    def test_invalid_date_format(self) -> None:
        """Test that malformed dates are rejected."""
        with pytest.raises(InvalidDateFormatError):
            _ = navigate_date("invalid-date", "next", "UTC")

    def test_unreal_date(self) -> None:
        """Test that well-formed but unreal dates are rejected."""
        with pytest.raises(InvalidDateFormatError):
            _ = navigate_date("2025-02-30", "next", "UTC")

    def test_invalid_direction(self) -> None:
        """Test that unknown directions are rejected."""
        with pytest.raises(InvalidDirectionError) as exc_info:
            _ = navigate_date("2025-09-03", "sideways", "UTC")  # pyright: ignore[reportArgumentType]

        assert exc_info.value.value == "sideways"

    def test_invalid_timezone(self) -> None:
        """Test that the timezone is validated even though succession ignores it."""
        with pytest.raises(InvalidTimezoneError):
            _ = navigate_date("2025-09-03", "next", "Not/AZone")

    def test_navigation_past_year_bound(self) -> None:
        """Test that arithmetic may step just outside the parseable year range."""
        assert navigate_date("2100-12-31", "next", "UTC") == "2101-01-01"
        assert navigate_date("1900-01-01", "prev", "UTC") == "1899-12-31"

    def test_omitted_timezone_uses_resolver(self, pinned_timezone: str) -> None:
        """Test that tz defaults to the resolved user timezone."""
        assert navigate_date("2025-09-03", "next") == "2025-09-04"


class TestToday:
    """Test evaluation of the current date in a timezone."""

    def test_same_instant_different_dates(self) -> None:
        """Test that one instant is a different date in LA than in UTC."""
        with freeze_now(datetime(2025, 9, 2, 3, 0, tzinfo=UTC)):
            assert today("America/Los_Angeles") == "2025-09-01"
            assert today("UTC") == "2025-09-02"
            assert today("Asia/Tokyo") == "2025-09-02"

    def test_date_line(self) -> None:
        """Test a zone already on the next day."""
        with freeze_now(datetime(2025, 12, 31, 12, 0, tzinfo=UTC)):
            assert today("Pacific/Auckland") == "2026-01-01"
            assert today("Pacific/Honolulu") == "2025-12-31"

    def test_real_clock_returns_canonical_date(self) -> None:
        """Test that the unfrozen clock yields a parseable date."""
        assert str(CalendarDate.parse(today("UTC"))) == today("UTC")

    def test_invalid_timezone(self) -> None:
        """Test that unknown timezones are rejected."""
        with pytest.raises(InvalidTimezoneError):
            _ = today("Not/AZone")

    def test_omitted_timezone_uses_resolver(self, pinned_timezone: str) -> None:
        """Test that today() with no tz uses the pinned user timezone."""
        # 05:00 UTC is still the previous evening in Denver
        with freeze_now(datetime(2025, 9, 2, 5, 0, tzinfo=UTC)):
            assert today() == "2025-09-01"

    def test_is_today(self) -> None:
        """Test today checks per timezone."""
        with freeze_now(datetime(2025, 9, 2, 3, 0, tzinfo=UTC)):
            assert is_today("2025-09-01", "America/Los_Angeles") is True
            assert is_today("2025-09-02", "America/Los_Angeles") is False
            assert is_today("2025-09-02", "UTC") is True

    def test_is_future_date(self) -> None:
        """Test future checks relative to today."""
        with freeze_now(datetime(2025, 9, 3, 12, 0, tzinfo=UTC)):
            assert is_future_date("2025-09-04", "UTC") is True
            assert is_future_date("2025-09-03", "UTC") is False
            assert is_future_date("2025-09-02", "UTC") is False

    def test_is_today_rejects_bad_date(self) -> None:
        """Test that malformed dates are rejected rather than compared."""
        with pytest.raises(InvalidDateFormatError):
            _ = is_today("09/03/2025", "UTC")


class TestNormalizeDate:
    """Test canonicalisation of date inputs."""

    def test_string_passthrough(self) -> None:
        """Test that canonical strings are returned unchanged."""
        assert normalize_date("2025-09-03", "UTC") == "2025-09-03"

    def test_date_value(self) -> None:
        """Test that date values are serialised."""
        assert normalize_date(date(2025, 1, 2), "UTC") == "2025-01-02"

    def test_rejects_malformed(self) -> None:
        """Test that malformed strings are rejected."""
        with pytest.raises(InvalidDateFormatError):
            _ = normalize_date("2025-1-2", "UTC")


class TestWeekBoundaries:
    """Test Monday-to-Sunday week calculations."""

    def test_tuesday_goes_back_to_monday(self) -> None:
        """Test a mid-week date."""
        assert week_start("2025-09-02", "UTC") == "2025-09-01"

    def test_sunday_belongs_to_preceding_monday(self) -> None:
        """Test that Sunday ends the ISO week instead of starting one."""
        assert week_start("2025-09-07", "UTC") == "2025-09-01"
        assert week_start("2025-08-31", "UTC") == "2025-08-25"

    def test_monday_is_its_own_week_start(self) -> None:
        """Test a Monday."""
        assert week_start("2025-09-01", "UTC") == "2025-09-01"

    def test_week_end(self) -> None:
        """Test the Sunday ending a week."""
        assert week_end("2025-09-03", "UTC") == "2025-09-07"
        assert week_end("2025-09-07", "UTC") == "2025-09-07"

    def test_week_crossing_year(self) -> None:
        """Test a week that spans New Year."""
        week = week_range("2026-01-01", "UTC")
        assert week.start == "2025-12-29"
        assert week.end == "2026-01-04"

    def test_every_day_of_a_month_maps_into_its_week(self) -> None:
        """Test the Monday/Sunday invariant for a whole month."""
        for value in month_dates(2025, 9, "UTC"):
            start, end = week_range(value, "UTC")
            assert CalendarDate.parse(start).day_of_week == 1
            assert CalendarDate.parse(end).day_of_week == 0
            assert start <= value <= end
            assert (CalendarDate.parse(end).to_date() - CalendarDate.parse(start).to_date()).days == 6

    def test_week_dates(self) -> None:
        """Test the seven dates of a week."""
        assert list(week_dates("2025-09-01", "UTC")) == [
            "2025-09-01",
            "2025-09-02",
            "2025-09-03",
            "2025-09-04",
            "2025-09-05",
            "2025-09-06",
            "2025-09-07",
        ]

    def test_week_dates_start_used_as_given(self) -> None:
        """Test that a non-Monday start is not snapped."""
        days = list(week_dates("2025-09-03", "UTC"))
        assert days[0] == "2025-09-03"
        assert days[-1] == "2025-09-09"

    def test_week_rejects_invalid_date(self) -> None:
        """Test that malformed dates are rejected."""
        with pytest.raises(InvalidDateFormatError):
            _ = week_start("not-a-date", "UTC")


class TestMonthBoundaries:
    """Test month start, end and listing."""

    @pytest.mark.parametrize(
        ("year", "month", "expected"),
        [
            (2024, 2, "2024-02-29"),
            (2025, 2, "2025-02-28"),
            (2000, 2, "2000-02-29"),
            (1900, 2, "1900-02-28"),
            (2025, 4, "2025-04-30"),
            (2025, 12, "2025-12-31"),
        ],
    )
    def test_month_end(self, year: int, month: int, expected: str) -> None:
        """Test month lengths including leap-year rules."""
        assert month_end(year, month, "UTC") == expected

    def test_month_start(self) -> None:
        """Test the first day of a month."""
        assert month_start(2025, 9, "UTC") == "2025-09-01"

    @pytest.mark.parametrize("month", [0, 13, -1])
    def test_invalid_month(self, month: int) -> None:
        """Test that months outside 1-12 are rejected."""
        with pytest.raises(InvalidDateFormatError):
            _ = month_start(2025, month, "UTC")

    @pytest.mark.parametrize("year", [1899, 2101])
    def test_year_out_of_range(self, year: int) -> None:
        """Test that years outside the accepted range are rejected."""
        with pytest.raises(InvalidDateFormatError):
            _ = month_dates(year, 1, "UTC")

    def test_month_dates(self) -> None:
        """Test listing every date of a leap February."""
        days = month_dates(2024, 2, "UTC")
        assert len(days) == 29
        assert list(days)[0] == "2024-02-01"
        assert list(days)[-1] == "2024-02-29"

    def test_prev_and_next_month(self) -> None:
        """Test month stepping across year boundaries."""
        assert prev_month(2025, 1) == (2024, 12)
        assert prev_month(2025, 9) == (2025, 8)
        assert next_month(2025, 12) == (2026, 1)
        assert next_month(2025, 9) == (2025, 10)


class TestDateSpan:
    """Test the lazy date sequence."""

    def test_restartable(self) -> None:
        """Test that a span can be iterated more than once."""
        span = DateSpan(CalendarDate(2025, 9, 29), 4)
        assert list(span) == ["2025-09-29", "2025-09-30", "2025-10-01", "2025-10-02"]
        assert list(span) == list(span)

    def test_contains(self) -> None:
        """Test membership by string and date value."""
        span = DateSpan(CalendarDate(2025, 9, 29), 4)
        assert "2025-10-01" in span
        assert date(2025, 9, 29) in span
        assert "2025-10-03" not in span
        assert "2025-09-28" not in span
        assert "garbage" not in span

    def test_negative_length_is_empty(self) -> None:
        """Test that a negative length yields nothing."""
        span = DateSpan(CalendarDate(2025, 9, 1), -3)
        assert len(span) == 0
        assert list(span) == []

    def test_repr(self) -> None:
        """Test the debugging representation."""
        assert repr(DateSpan(CalendarDate(2025, 9, 1), 7)) == "DateSpan(start='2025-09-01', length=7)"


class TestCalendarGrid:
    """Test the 42-cell month-view grid."""

    @pytest.mark.parametrize(
        ("year", "month"),
        [(2024, 2), (2025, 2), (2026, 2), (2025, 6), (2025, 8), (2025, 9), (2025, 11)],
    )
    def test_always_42_cells(self, year: int, month: int) -> None:
        """Test the grid size for several month shapes."""
        grid = calendar_grid(year, month, "UTC")
        assert len(grid) == GRID_SIZE == 42

    def test_september_2025_layout(self) -> None:
        """Test leading and trailing padding for a month starting on Monday."""
        grid = calendar_grid(2025, 9, "UTC")
        assert grid[0].date == "2025-08-31"
        assert grid[0].is_current_month is False
        assert grid[1].date == "2025-09-01"
        assert grid[-1].date == "2025-10-11"
        assert sum(cell.is_current_month for cell in grid) == 30

    def test_leap_february(self) -> None:
        """Test February 2024 with its leap day."""
        grid = calendar_grid(2024, 2, "UTC")
        assert grid[0].date == "2024-01-28"
        assert grid[-1].date == "2024-03-09"
        current = [cell.date for cell in grid if cell.is_current_month]
        assert len(current) == 29
        assert current[-1] == "2024-02-29"

    def test_month_starting_on_sunday(self) -> None:
        """Test that a Sunday first day gets no leading padding."""
        grid = calendar_grid(2025, 6, "UTC")
        assert grid[0].date == "2025-06-01"
        assert grid[0].is_current_month is True
        assert grid[-1].date == "2025-07-12"

    def test_four_week_february(self) -> None:
        """Test a 28-day month starting on Sunday, padded with two trailing weeks."""
        grid = calendar_grid(2026, 2, "UTC")
        assert grid[0].date == "2026-02-01"
        assert grid[27].date == "2026-02-28"
        assert all(not cell.is_current_month for cell in grid[28:])
        assert grid[-1].date == "2026-03-14"

    def test_day_of_week_columns(self) -> None:
        """Test that columns run Sunday (0) to Saturday (6)."""
        grid = calendar_grid(2025, 9, "UTC")
        for index, cell in enumerate(grid):
            assert cell.day_of_week == index % 7
            assert CalendarDate.parse(cell.date).day_of_week == cell.day_of_week

    def test_cells_are_consecutive(self) -> None:
        """Test that the grid has no gaps or repeats."""
        grid = calendar_grid(2025, 3, "America/New_York")
        days = [CalendarDate.parse(cell.date).to_date() for cell in grid]
        assert all(b - a == timedelta(days=1) for a, b in zip(days, days[1:]))

    def test_today_flag(self) -> None:
        """Test that exactly one cell is flagged as today."""
        with freeze_now(datetime(2025, 9, 15, 12, 0, tzinfo=UTC)):
            grid = calendar_grid(2025, 9, "UTC")
        flagged = [cell for cell in grid if cell.is_today]
        assert len(flagged) == 1
        assert flagged[0].date == "2025-09-15"

    def test_today_flag_depends_on_timezone(self) -> None:
        """Test that the flagged cell follows the requested timezone."""
        with freeze_now(datetime(2025, 9, 2, 3, 0, tzinfo=UTC)):
            la = calendar_grid(2025, 9, "America/Los_Angeles")
            utc = calendar_grid(2025, 9, "UTC")
        assert [c.date for c in la if c.is_today] == ["2025-09-01"]
        assert [c.date for c in utc if c.is_today] == ["2025-09-02"]

    def test_today_in_padding(self) -> None:
        """Test that a padding cell can carry the today flag."""
        with freeze_now(datetime(2025, 10, 2, 12, 0, tzinfo=UTC)):
            grid = calendar_grid(2025, 9, "UTC")
        flagged = [cell for cell in grid if cell.is_today]
        assert len(flagged) == 1
        assert flagged[0].date == "2025-10-02"
        assert flagged[0].is_current_month is False

    def test_no_today_outside_grid(self) -> None:
        """Test a grid that does not contain today."""
        with freeze_now(datetime(2025, 9, 15, 12, 0, tzinfo=UTC)):
            grid = calendar_grid(2024, 1, "UTC")
        assert not any(cell.is_today for cell in grid)

    def test_invalid_month(self) -> None:
        """Test that invalid months are rejected."""
        with pytest.raises(InvalidDateFormatError):
            _ = calendar_grid(2025, 13, "UTC")

    def test_invalid_timezone(self) -> None:
        """Test that invalid timezones are rejected."""
        with pytest.raises(InvalidTimezoneError):
            _ = calendar_grid(2025, 9, "Not/AZone")


class TestDayBounds:
    """Test local day spans as real instants."""

    @staticmethod
    def _length(value: str, tz: str) -> timedelta:
        bounds = day_bounds(value, tz)
        return bounds.end.astimezone(UTC) - bounds.start.astimezone(UTC)

    def test_ordinary_day(self) -> None:
        """Test a day without a DST transition."""
        bounds = day_bounds("2025-09-03", "America/New_York")
        assert bounds.start == datetime(2025, 9, 3, 4, 0, tzinfo=UTC)
        assert (bounds.start.hour, bounds.start.minute) == (0, 0)
        assert (bounds.end.hour, bounds.end.minute, bounds.end.second) == (23, 59, 59)
        assert self._length("2025-09-03", "America/New_York") == timedelta(hours=24, microseconds=-1)

    def test_spring_forward_day_is_23_hours(self) -> None:
        """Test the short day of a spring DST transition."""
        assert self._length("2025-03-09", "America/New_York") == timedelta(hours=23, microseconds=-1)

    def test_fall_back_day_is_25_hours(self) -> None:
        """Test the long day of an autumn DST transition."""
        assert self._length("2025-11-02", "America/New_York") == timedelta(hours=25, microseconds=-1)

    def test_missing_local_midnight(self) -> None:
        """Test a day whose midnight was skipped by DST."""
        bounds = day_bounds("2018-11-04", "America/Sao_Paulo")
        assert bounds.start.hour == 1
        assert bounds.start.date() == date(2018, 11, 4)

    def test_bounds_are_timezone_aware(self) -> None:
        """Test that bounds carry the requested timezone."""
        bounds = day_bounds("2025-09-03", "Asia/Tokyo")
        assert bounds.start.utcoffset() == timedelta(hours=9)
        assert bounds.end.utcoffset() == timedelta(hours=9)


class TestUtcTimestamps:
    """Test conversion between stored UTC timestamps and calendar dates."""

    def test_timestamp_to_local_date(self) -> None:
        """Test that a late-UTC instant is the previous day in New York."""
        assert utc_timestamp_to_date("2025-09-03T02:30:00Z", "America/New_York") == "2025-09-02"
        assert utc_timestamp_to_date("2025-09-03T02:30:00Z", "Asia/Tokyo") == "2025-09-03"

    def test_naive_timestamp_is_utc(self) -> None:
        """Test that timestamps without an offset are read as UTC."""
        assert utc_timestamp_to_date("2025-09-03T02:30:00", "America/New_York") == "2025-09-02"

    def test_datetime_input(self) -> None:
        """Test aware datetime input."""
        moment = datetime(2025, 9, 3, 2, 30, tzinfo=UTC)
        assert utc_timestamp_to_date(moment, "America/Los_Angeles") == "2025-09-02"

    def test_unparseable_timestamp(self) -> None:
        """Test that garbage timestamps are rejected."""
        with pytest.raises(InvalidDateFormatError):
            _ = utc_timestamp_to_date("yesterday", "UTC")

    def test_date_to_utc_timestamp(self) -> None:
        """Test local midnight expressed as a UTC timestamp."""
        assert date_to_utc_timestamp("2025-09-03", "America/New_York") == "2025-09-03T04:00:00.000Z"
        assert date_to_utc_timestamp("2025-01-15", "America/New_York") == "2025-01-15T05:00:00.000Z"
        assert date_to_utc_timestamp("2025-09-03", "UTC") == "2025-09-03T00:00:00.000Z"
        assert date_to_utc_timestamp("2025-09-03", "Asia/Tokyo") == "2025-09-02T15:00:00.000Z"

    @pytest.mark.parametrize("tz", ["UTC", "America/New_York", "Asia/Kolkata", "Pacific/Auckland"])
    def test_storage_round_trip(self, tz: str) -> None:
        """Test that a stored midnight maps back to the same date."""
        for value in ("2025-03-09", "2025-09-03", "2025-11-02"):
            assert utc_timestamp_to_date(date_to_utc_timestamp(value, tz), tz) == value


class TestCalendarLimits:
    """Test arithmetic that would step past the first or last representable day."""

    @pytest.mark.parametrize(
        ("value", "direction"),
        [
            (date(9999, 12, 31), "next"),
            (CalendarDate(1, 1, 1), "prev"),
        ],
    )
    def test_navigate_past_calendar_limit(self, value: date | CalendarDate, direction: str) -> None:
        """Test that stepping off either end of the calendar is a date error."""
        with pytest.raises(InvalidDateFormatError):
            _ = navigate_date(value, direction, "UTC")  # pyright: ignore[reportArgumentType]

    def test_week_end_past_calendar_limit(self) -> None:
        """Test that the week of the last representable day cannot end."""
        with pytest.raises(CoachCalendarError):
            _ = week_end(date(9999, 12, 31), "UTC")
        with pytest.raises(CoachCalendarError):
            _ = week_range(date(9999, 12, 31), "UTC")

    def test_week_start_past_calendar_limit(self) -> None:
        """Test that the first representable week starts on 0001-01-01, a Monday."""
        assert week_start(CalendarDate(1, 1, 1), "UTC") == "0001-01-01"
        assert week_start(CalendarDate(1, 1, 7), "UTC") == "0001-01-01"

    def test_navigate_last_supported_step(self) -> None:
        """Test that steps within the representable calendar still work."""
        assert navigate_date(date(9999, 12, 30), "next", "UTC") == "9999-12-31"
        assert navigate_date(CalendarDate(1, 1, 2), "prev", "UTC") == "0001-01-01"

    @pytest.mark.parametrize(
        ("value", "tz"),
        [
            (date(1, 1, 1), "Asia/Tokyo"),
            (date(9999, 12, 31), "America/New_York"),
        ],
    )
    def test_day_bounds_past_calendar_limit(self, value: date, tz: str) -> None:
        """Test that day bounds which fall off the calendar are a date error."""
        with pytest.raises(CoachCalendarError):
            _ = day_bounds(value, tz)

    def test_utc_timestamp_past_calendar_limit(self) -> None:
        """Test that an instant whose local date is unrepresentable is a date error."""
        with pytest.raises(InvalidDateFormatError):
            _ = utc_timestamp_to_date(datetime(1, 1, 1, 2, tzinfo=UTC), "America/New_York")

    def test_span_past_calendar_limit(self) -> None:
        """Test that iterating a span off the calendar is a date error."""
        span = DateSpan(CalendarDate(9999, 12, 30), 5)
        assert len(span) == 5
        with pytest.raises(InvalidDateFormatError):
            _ = list(span)
