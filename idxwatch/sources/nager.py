"""Public holiday source backed by the Nager.Date API."""

import logging

import requests

from idxwatch.errors import FetchError
from idxwatch.sources.base import HolidaySource


logger = logging.getLogger(__name__)

HOLIDAY_API_URL = "https://date.nager.at/api/v3/PublicHolidays/{year}/{country}"


class NagerHolidaySource(HolidaySource):
    """Fetch public holidays from date.nager.at."""

    def __init__(self, url_template: str = HOLIDAY_API_URL, timeout: int = 10):
        self.url_template = url_template
        self.timeout = timeout
        self.session = requests.Session()

    def fetch_holidays(self, year: int, country_code: str) -> list[str]:
        url = self.url_template.format(year=year, country=country_code.upper())

        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise FetchError(f"Failed to fetch holidays for {year}: {e}") from e
        except ValueError as e:
            raise FetchError(f"Holiday response for {year} is not JSON: {e}") from e

        if not isinstance(payload, list):
            raise FetchError(f"Unexpected holiday response for {year}: {type(payload).__name__}")

        # Entries without a date come through as None and are skipped by the calendar.
        entries = [item.get("date") if isinstance(item, dict) else None for item in payload]
        logger.debug("Fetched %d holiday entries for %s/%s", len(entries), country_code, year)
        return entries

    def close(self) -> None:
        self.session.close()
