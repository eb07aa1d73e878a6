"""Data models for idxwatch."""

from idxwatch.models.price_point import PricePoint
from idxwatch.models.quote import Quote
from idxwatch.models.session import MarketSessionState, SessionStatus

__all__ = [
    "MarketSessionState",
    "PricePoint",
    "Quote",
    "SessionStatus",
]
