"""Quote and holiday sources for idxwatch."""

from idxwatch.sources.base import HolidaySource, QuoteSource
from idxwatch.sources.google_finance import GoogleFinanceSource, qualify_symbol
from idxwatch.sources.nager import NagerHolidaySource

__all__ = [
    "GoogleFinanceSource",
    "HolidaySource",
    "NagerHolidaySource",
    "QuoteSource",
    "qualify_symbol",
]
