"""Market session (open/closed) calculation.

Trading hours default to the IDX regular session, 09:00 to 15:30 local
time, Monday to Friday, excluding public holidays.
"""

from datetime import datetime, time, timedelta

from idxwatch.errors import CalendarError
from idxwatch.market.calendar import MarketCalendar
from idxwatch.models import MarketSessionState, SessionStatus


MARKET_OPEN = time(9, 0)
MARKET_CLOSE = time(15, 30)

# Upper bound for the next-open search; a year without a trading day means
# the holiday data is broken.
MAX_SEARCH_DAYS = 366


def is_weekend(moment: datetime) -> bool:
    """Check if a date falls on Saturday or Sunday."""
    return moment.weekday() >= 5  # Saturday = 5, Sunday = 6


class MarketSessionCalculator:
    """Classify instants into session states.

    Nothing is stored between calls; every query is computed from the
    supplied ``now`` and the holiday calendar.
    """

    def __init__(
        self,
        calendar: MarketCalendar,
        open_time: time = MARKET_OPEN,
        close_time: time = MARKET_CLOSE,
        close_inclusive: bool = True,
    ):
        """Initialize the calculator.

        Args:
            calendar: Holiday calendar for the market.
            open_time: Session open (local time).
            close_time: Session close (local time).
            close_inclusive: Whether ``close_time`` itself counts as open.
        """
        if open_time >= close_time:
            raise ValueError("open_time must be before close_time")
        self.calendar = calendar
        self.open_time = open_time
        self.close_time = close_time
        self.close_inclusive = close_inclusive

    def is_within_hours(self, now: datetime) -> bool:
        current = now.time()
        if current < self.open_time:
            return False
        if self.close_inclusive:
            return current <= self.close_time
        return current < self.close_time

    def is_after_close(self, now: datetime) -> bool:
        current = now.time()
        if self.close_inclusive:
            return current > self.close_time
        return current >= self.close_time

    def is_trading_day(self, moment: datetime, now: datetime | None = None) -> bool:
        return not is_weekend(moment) and not self.calendar.is_holiday(moment.date(), now or moment)

    def current_state(self, now: datetime) -> MarketSessionState:
        """Compute the session state at ``now``.

        Args:
            now: Exchange-local wall-clock time.

        Returns:
            MarketSessionState; ``next_open_at`` is set whenever closed.
        """
        if self.calendar.is_holiday(now.date(), now):
            status = SessionStatus.CLOSED_HOLIDAY
        elif is_weekend(now):
            status = SessionStatus.CLOSED_WEEKEND
        elif self.is_within_hours(now):
            return MarketSessionState(status=SessionStatus.OPEN)
        else:
            status = SessionStatus.CLOSED_AFTER_HOURS

        return MarketSessionState(status=status, next_open_at=self.next_open(now))

    def next_open(self, now: datetime) -> datetime:
        """Find the next session open at or after ``now``'s trading day.

        Raises:
            CalendarError: If no trading day exists within a year.
        """
        candidate = now
        if self.is_after_close(now):
            candidate = candidate + timedelta(days=1)

        candidate = candidate.replace(
            hour=self.open_time.hour,
            minute=self.open_time.minute,
            second=0,
            microsecond=0,
        )

        for _ in range(MAX_SEARCH_DAYS):
            if self.is_trading_day(candidate, now):
                return candidate
            candidate = candidate + timedelta(days=1)

        raise CalendarError(f"No trading day found within {MAX_SEARCH_DAYS} days of {now:%Y-%m-%d}")

    def time_until_open(self, now: datetime, state: MarketSessionState | None = None) -> tuple[int, int]:
        """Return (hours, minutes) until the next open, or (0, 0) while open."""
        state = state or self.current_state(now)
        if state.next_open_at is None:
            return 0, 0
        seconds = max(0, int((state.next_open_at - now).total_seconds()))
        hours, remainder = divmod(seconds, 3600)
        return hours, remainder // 60

    def describe(self, now: datetime, state: MarketSessionState | None = None) -> str:
        """Human readable status line, e.g. 'CLOSED - Opens in 17 hours 29 minutes'."""
        state = state or self.current_state(now)
        if state.is_open:
            return "OPEN"

        hours, minutes = self.time_until_open(now, state)
        if state.status is SessionStatus.CLOSED_HOLIDAY:
            return f"CLOSED (Holiday) - Opens in {hours} hours"
        if state.status is SessionStatus.CLOSED_WEEKEND:
            return f"CLOSED (Weekend) - Opens in {hours} hours"
        return f"CLOSED - Opens in {hours} hours {minutes} minutes"
