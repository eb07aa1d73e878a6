"""Market state: price history, holiday calendar and session hours."""

from idxwatch.market.calendar import MarketCalendar
from idxwatch.market.history import DEFAULT_CAPACITY, PriceHistoryBuffer
from idxwatch.market.session import MarketSessionCalculator

__all__ = [
    "DEFAULT_CAPACITY",
    "MarketCalendar",
    "MarketSessionCalculator",
    "PriceHistoryBuffer",
]
