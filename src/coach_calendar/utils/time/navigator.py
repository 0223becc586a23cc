"""
Stateful date cursor for day-by-day views.

Backs the journal and dashboard "previous day / next day / today"
controls: it keeps the currently shown date, moves it through the
calendar arithmetic functions and reports every move to a callback.
"""

import logging
from collections.abc import Callable

from .calendar_date import DateLike
from .calendar_math import is_future_date, is_today, navigate_date, normalize_date, today
from .formatting import DateStyle, format_date, format_long
from .timezone import effective_timezone

logger = logging.getLogger(__name__)


class DateNavigator:
    """
    Cursor over calendar dates in a fixed timezone.

    Examples:
        >>> nav = DateNavigator("2025-09-03", tz="UTC")
        >>> nav.go_to_next_day()
        '2025-09-04'
        >>> nav.format_current("month-day")
        'September 4'
    """

    def __init__(
        self,
        initial_date: DateLike | None = None,
        tz: str | None = None,
        on_change: Callable[[str], None] | None = None,
    ) -> None:
        """
        Initialize the navigator.

        Args:
            initial_date: Date to start on (defaults to today in ``tz``)
            tz: IANA timezone identifier, resolved once here
            on_change: Called with the new date after every move

        Raises:
            InvalidDateFormatError: If initial_date is not a valid date
            InvalidTimezoneError: If the timezone is not resolvable
        """
        self.timezone: str = effective_timezone(tz)
        self._on_change: Callable[[str], None] | None = on_change
        self._current: str = (
            normalize_date(initial_date, self.timezone)
            if initial_date is not None
            else today(self.timezone)
        )

    @property
    def current_date(self) -> str:
        """The date currently shown."""
        return self._current

    def _move_to(self, new_date: str) -> str:
        self._current = new_date
        logger.debug(f"Navigated to {new_date} ({self.timezone})")
        if self._on_change is not None:
            self._on_change(new_date)
        return new_date

    def go_to_previous_day(self) -> str:
        return self._move_to(navigate_date(self._current, "prev", self.timezone))

    def go_to_next_day(self) -> str:
        return self._move_to(navigate_date(self._current, "next", self.timezone))

    def go_to_today(self) -> str:
        return self._move_to(today(self.timezone))

    def set_date(self, value: DateLike) -> str:
        """Jump to a specific date."""
        return self._move_to(normalize_date(value, self.timezone))

    def is_today(self) -> bool:
        return is_today(self._current, self.timezone)

    def is_future(self) -> bool:
        return is_future_date(self._current, self.timezone)

    def can_go_to_next_day(self) -> bool:
        """Whether moving forward stays out of the future."""
        return not self.is_today() and not self.is_future()

    def format_current(self, style: DateStyle = "long") -> str:
        return format_date(self._current, style, self.timezone)

    def format_current_long(self) -> str:
        return format_long(self._current, self.timezone)
