"""Base source interfaces for idxwatch."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Union

from idxwatch.models import Quote


class QuoteSource(ABC):
    """Abstract base class for quote providers."""

    @abstractmethod
    def fetch_quote(self, symbol: str) -> Quote:
        """Get the current quote for a symbol.
        
        Args:
            symbol: Exchange-qualified symbol (e.g., BBCA:IDX).
            
        Returns:
            Quote with the last price and change text.
            
        Raises:
            NotFoundError: If the page holds no price for the symbol.
            FetchError: If the request fails.
        """
        pass

    def close(self) -> None:
        """Release any held connections."""


class HolidaySource(ABC):
    """Abstract base class for public holiday providers."""

    @abstractmethod
    def fetch_holidays(self, year: int, country_code: str) -> list[Union[str, date]]:
        """Get public holidays for one year.
        
        Args:
            year: Calendar year.
            country_code: ISO 3166-1 alpha-2 country code.
            
        Returns:
            Raw holiday entries (ISO date strings or dates). Entries may be
            malformed; callers skip the ones that do not parse.
            
        Raises:
            FetchError: If the request fails.
        """
        pass

    def close(self) -> None:
        """Release any held connections."""
