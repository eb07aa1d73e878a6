"""Google Finance quote scraper.

Fetches the public quote page (``/finance/quote/BBCA:IDX``) and pulls the
last price out of its ``data-last-price`` attribute, plus the change text and
the key statistics rows.
"""

import logging
import math
import re
from html.parser import HTMLParser
from typing import Optional

import requests

from idxwatch.errors import FetchError, NotFoundError
from idxwatch.models import Quote
from idxwatch.sources.base import QuoteSource


logger = logging.getLogger(__name__)

GOOGLE_FINANCE_URL = "https://www.google.com/finance/quote/"
DEFAULT_EXCHANGE = "IDX"
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

# Class names of the page elements we read, keyed by what they hold.
WATCHED_CLASSES = {
    "change": {"YMlKec", "vpf-qc"},
    "percent": {"JwB6zf", "vpf-qc"},
    "label": {"mfs7Fc"},
    "value": {"P6K39c"},
}


def qualify_symbol(symbol: str, exchange: str = DEFAULT_EXCHANGE) -> str:
    """Upper-case a symbol and append the exchange suffix if missing.

    >>> qualify_symbol("bbca")
    'BBCA:IDX'
    """
    symbol = symbol.strip().upper()
    suffix = f":{exchange.upper()}"
    if symbol.endswith(suffix):
        return symbol
    return symbol + suffix


def _normalize_text(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


class _QuotePageParser(HTMLParser):
    """Collects the price attribute and the text of watched divs."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.last_price: Optional[str] = None
        self.found: dict[str, list[str]] = {key: [] for key in WATCHED_CLASSES}
        self._open_divs: list[tuple[Optional[str], list[str]]] = []

    def handle_starttag(self, tag, attrs):
        attributes = dict(attrs)
        if self.last_price is None and attributes.get("data-last-price"):
            self.last_price = attributes["data-last-price"]

        if tag != "div":
            return
        classes = set((attributes.get("class") or "").split())
        key = None
        for name, required in WATCHED_CLASSES.items():
            if classes.issuperset(required):
                key = name
                break
        self._open_divs.append((key, []))

    def handle_endtag(self, tag):
        if tag != "div" or not self._open_divs:
            return
        key, parts = self._open_divs.pop()
        if key is not None:
            self.found[key].append(_normalize_text("".join(parts)))

    def handle_data(self, data):
        for key, parts in self._open_divs:
            if key is not None:
                parts.append(data)


def parse_quote_page(html: str, symbol: str) -> Quote:
    """Build a Quote from a Google Finance quote page.

    Raises:
        NotFoundError: If the page has no parsable, non-negative last price.
    """
    parser = _QuotePageParser()
    parser.feed(html)
    parser.close()

    if parser.last_price is None:
        raise NotFoundError(f"Stock not found: {symbol}")

    try:
        price = float(parser.last_price.replace(",", ""))
    except ValueError as e:
        raise NotFoundError(f"Unparsable price for {symbol}: {parser.last_price!r}") from e

    if not math.isfinite(price) or price < 0:
        raise NotFoundError(f"Invalid price for {symbol}: {parser.last_price!r}")

    change_text = ""
    changes = parser.found["change"]
    percents = parser.found["percent"]
    if changes and percents:
        change_text = f"{changes[0]} ({percents[0]})"

    details = [
        (label, value)
        for label, value in zip(parser.found["label"], parser.found["value"])
        if label and value
    ]

    return Quote(symbol=symbol, price=price, change_text=change_text, details=details)


class GoogleFinanceSource(QuoteSource):
    """Quote source scraping Google Finance pages."""

    def __init__(
        self,
        exchange: str = DEFAULT_EXCHANGE,
        base_url: str = GOOGLE_FINANCE_URL,
        timeout: int = 10,
    ):
        """Initialize the source.

        Args:
            exchange: Exchange suffix appended to bare symbols.
            base_url: Quote page base URL.
            timeout: HTTP timeout in seconds.
        """
        self.exchange = exchange
        self.base_url = base_url
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    def fetch_quote(self, symbol: str) -> Quote:
        symbol = qualify_symbol(symbol, self.exchange)
        url = self.base_url + symbol

        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise FetchError(f"Failed to fetch quote for {symbol}: {e}") from e

        quote = parse_quote_page(response.text, symbol)
        logger.debug("Fetched %s at %s", symbol, quote.price)
        return quote

    def close(self) -> None:
        self.session.close()
