"""Public holiday calendar with a time-to-live cache.

Holidays are fetched lazily from a ``HolidaySource`` for the current and
the next year. A refresh that fails keeps whatever was cached before, so the
session display degrades to a possibly-wrong label instead of an error.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, Optional

from idxwatch.errors import FetchError, MalformedDateError
from idxwatch.sources.base import HolidaySource


logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(hours=12)
DEFAULT_RETRY_INTERVAL = timedelta(minutes=5)


def parse_holiday_date(entry: object) -> date:
    """Coerce a raw holiday entry into a date.

    Accepts ``date`` objects and ISO ``YYYY-MM-DD`` strings (anything after
    the first ten characters, such as a time part, is ignored).

    Raises:
        MalformedDateError: If the entry does not resolve to a valid date.
    """
    if isinstance(entry, datetime):
        return entry.date()
    if isinstance(entry, date):
        return entry
    if isinstance(entry, str):
        try:
            return date.fromisoformat(entry.strip()[:10])
        except ValueError as e:
            raise MalformedDateError(f"Invalid holiday date: {entry!r}") from e
    raise MalformedDateError(f"Unsupported holiday entry: {entry!r}")


def parse_holiday_dates(entries: Iterable[object]) -> set[date]:
    """Parse entries, skipping the ones that are not valid dates."""
    parsed = set()
    for entry in entries:
        try:
            parsed.add(parse_holiday_date(entry))
        except MalformedDateError as e:
            logger.debug("Skipping holiday entry: %s", e)
    return parsed


class MarketCalendar:
    """Holiday lookups backed by a lazily refreshed cache."""

    def __init__(
        self,
        source: HolidaySource,
        country_code: str = "ID",
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = datetime.now,
        retry_interval: timedelta = DEFAULT_RETRY_INTERVAL,
    ):
        """Initialize the calendar.

        Args:
            source: Where holiday dates are fetched from.
            country_code: ISO 3166-1 alpha-2 country code of the market.
            ttl: How long a successful fetch stays fresh.
            clock: Returns the current time; injected for tests.
            retry_interval: Minimum wait after a refresh where every year failed.
        """
        self.source = source
        self.country_code = country_code
        self.ttl = ttl
        self.retry_interval = retry_interval
        self._clock = clock
        self._holidays: frozenset[date] = frozenset()
        self._fetched_at: Optional[datetime] = None
        self._failed_at: Optional[datetime] = None
        # First year covered by the cached and by the last failed generation.
        self._year: Optional[int] = None
        self._failed_year: Optional[int] = None

    @property
    def fetched_at(self) -> Optional[datetime]:
        """When the cache was last (at least partly) refreshed."""
        return self._fetched_at

    def is_fresh(self, now: Optional[datetime] = None) -> bool:
        """Check whether the cache is non-empty, covers ``now`` and is younger than the TTL."""
        if not self._holidays or self._fetched_at is None:
            return False
        now = now or self._clock()
        if now.year != self._year or now < self._fetched_at:
            return False
        return now - self._fetched_at < self.ttl

    def is_holiday(self, day: date, now: Optional[datetime] = None) -> bool:
        """Check whether a date is a public holiday.

        Refreshes the cache first when it is stale as of ``now`` (default:
        the calendar clock). Never raises on source failures; with no data
        at all the answer is False.
        """
        if isinstance(day, datetime):
            day = day.date()
        self.refresh(now=now)
        return day in self._holidays

    def holidays(self, now: Optional[datetime] = None) -> frozenset[date]:
        """Return the cached holiday set, refreshing it when stale."""
        self.refresh(now=now)
        return self._holidays

    def refresh(self, force: bool = False, now: Optional[datetime] = None) -> bool:
        """Refresh the cache if it is stale.

        Args:
            force: Refetch even when the cache is fresh.
            now: Current time; picks the years fetched. Defaults to the clock.

        Returns:
            True if a fetch was attempted and at least one year succeeded.
        """
        now = now or self._clock()
        if not force:
            if self.is_fresh(now):
                return False
            if self._is_throttled(now):
                return False

        years = (now.year, now.year + 1)
        merged: set[date] = set()
        succeeded = 0

        for year in years:
            try:
                entries = self.source.fetch_holidays(year, self.country_code)
            except FetchError as e:
                logger.warning("Failed to fetch holidays for year %s: %s", year, e)
                # Keep the previous generation's dates for the failed year.
                merged.update(d for d in self._holidays if d.year == year)
                continue
            merged.update(parse_holiday_dates(entries))
            succeeded += 1

        if succeeded == 0:
            logger.warning(
                "Failed to fetch holiday data; keeping %d cached holidays",
                len(self._holidays),
            )
            self._failed_at = now
            self._failed_year = now.year
            return False

        self._holidays = frozenset(merged)
        self._fetched_at = now
        self._year = now.year
        # An empty result is never fresh; throttle it like a failure.
        self._failed_at = None if merged else now
        self._failed_year = None if merged else now.year
        logger.info(
            "Loaded %d holidays for %s (%s-%s)",
            len(self._holidays),
            self.country_code,
            years[0],
            years[1],
        )
        return True

    def _is_throttled(self, now: datetime) -> bool:
        if self._failed_at is None or self._failed_year != now.year:
            return False
        return timedelta(0) <= now - self._failed_at < self.retry_interval
