"""Poll tick for the live view.

A ``Watcher`` owns the price history for one symbol. Each ``tick`` fetches a
quote, records it, renders the chart and computes the session status,
returning everything the display needs as a ``Frame``.
"""

import logging
import re
from datetime import datetime
from typing import Callable, Optional

from pydantic import BaseModel, Field

from idxwatch.chart import ChartRenderer
from idxwatch.errors import CalendarError, FetchError
from idxwatch.market import MarketSessionCalculator, PriceHistoryBuffer
from idxwatch.models import MarketSessionState, Quote
from idxwatch.sources.base import QuoteSource


logger = logging.getLogger(__name__)

_CHANGE_PATTERN = re.compile(r"^\s*([+\-−]?\s*[\d.,]+)")


class Frame(BaseModel):
    """Everything shown for one refresh of the live view."""

    symbol: str = Field(..., description="Exchange-qualified symbol")
    timestamp: datetime = Field(..., description="When the tick ran")
    quote: Optional[Quote] = Field(default=None, description="Latest successful quote")
    previous_price: Optional[float] = Field(
        default=None, description="Price from the tick before the latest quote"
    )
    state: Optional[MarketSessionState] = Field(default=None, description="Session state")
    status_line: str = Field(default="UNKNOWN", description="Session status text")
    chart: str = Field(default="", description="Rendered chart text")
    error: Optional[str] = Field(default=None, description="Error from this tick, if any")

    model_config = {"frozen": True}

    @property
    def price_direction(self) -> int:
        """1 if the price rose (or held), -1 if it fell, 0 without a previous price."""
        if self.quote is None or not self.previous_price:
            return 0
        return 1 if self.quote.price >= self.previous_price else -1


def parse_change(change_text: str) -> Optional[float]:
    """Extract the absolute change from text like '+25.00 (0.26%)'."""
    match = _CHANGE_PATTERN.match(change_text or "")
    if not match:
        return None
    number = match.group(1).replace("−", "-").replace(" ", "").replace(",", "")
    try:
        return float(number)
    except ValueError:
        return None


class Watcher:
    """Drives the fetch, record and render cycle for one symbol."""

    def __init__(
        self,
        symbol: str,
        source: QuoteSource,
        history: PriceHistoryBuffer,
        renderer: ChartRenderer,
        session: MarketSessionCalculator,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.symbol = symbol
        self.source = source
        self.history = history
        self.renderer = renderer
        self.session = session
        self._clock = clock
        self._last_quote: Optional[Quote] = None
        self._previous_price: Optional[float] = None
        self._last_chart = ""

    def seed_placeholders(self, quote: Quote, at: datetime) -> None:
        """Seed the history so a chart shell shows before real samples arrive.

        Uses the previous close implied by the change text, then the current
        price. Both are discarded when the first real sample is appended, so
        the next tick holds a single point and shows "Collecting data..."
        again until a second real sample arrives.
        """
        change = parse_change(quote.change_text)
        previous_close = quote.price - change if change is not None else quote.price
        self.history.append(previous_close, at, is_real_sample=False)
        self.history.append(quote.price, at, is_real_sample=False)

    def tick(self, terminal_width: int) -> Frame:
        """Run one poll iteration.

        A failed fetch leaves the history untouched and returns the last
        good quote and chart along with the error message.
        """
        now = self._clock()
        state, status_line = self._session_status(now)

        try:
            quote = self.source.fetch_quote(self.symbol)
        except FetchError as e:
            logger.error("Error updating data: %s", e)
            return Frame(
                symbol=self.symbol,
                timestamp=now,
                quote=self._last_quote,
                previous_price=self._previous_price,
                state=state,
                status_line=status_line,
                chart=self._last_chart,
                error=str(e),
            )

        if self._last_quote is None:
            self.seed_placeholders(quote, now)
        else:
            self.history.append(quote.price, now, is_real_sample=True)

        self._previous_price = self._last_quote.price if self._last_quote else None
        self._last_quote = quote
        self._last_chart = self.renderer.render(self.history.snapshot(), terminal_width)

        return Frame(
            symbol=self.symbol,
            timestamp=now,
            quote=quote,
            previous_price=self._previous_price,
            state=state,
            status_line=status_line,
            chart=self._last_chart,
        )

    def _session_status(self, now: datetime) -> tuple[Optional[MarketSessionState], str]:
        try:
            state = self.session.current_state(now)
        except CalendarError as e:
            logger.warning("Cannot determine market state: %s", e)
            return None, "UNKNOWN"
        return state, self.session.describe(now, state)

    def close(self) -> None:
        self.source.close()
        self.session.calendar.source.close()
