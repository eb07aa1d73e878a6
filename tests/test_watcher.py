"""Tests for the live view poll tick and its display.

**Feature: idx-live-view**
"""

import random
from datetime import datetime, timedelta
from typing import Optional

import pytest
from rich.console import Console

from idxwatch.chart import PLACEHOLDER_TEXT, ChartRenderer
from idxwatch.cli.display import (
    chart_decorator,
    compose_frame,
    format_rupiah,
    random_stock_color,
)
from idxwatch.errors import FetchError, NotFoundError
from idxwatch.market import MarketCalendar, MarketSessionCalculator, PriceHistoryBuffer
from idxwatch.models import Quote, SessionStatus
from idxwatch.sources.base import HolidaySource, QuoteSource
from idxwatch.sources.google_finance import parse_quote_page
from idxwatch.watcher import Frame, Watcher, parse_change


# ============================================================================
# Test Fixtures
# ============================================================================

class ScriptedQuoteSource(QuoteSource):
    """Quote source replaying prices, quote pages or exceptions."""

    def __init__(self, script: list):
        self.script = list(script)
        self.closed = False

    def fetch_quote(self, symbol: str) -> Quote:
        item = self.script.pop(0)
        if isinstance(item, Exception):
            raise item
        if isinstance(item, str):
            return parse_quote_page(item, symbol)
        return Quote(symbol=symbol, price=item, change_text="+25.00 (0.26%)")

    def close(self) -> None:
        self.closed = True


class NoHolidays(HolidaySource):
    def fetch_holidays(self, year: int, country_code: str) -> list[str]:
        return []


class SteppingClock:
    """Clock advancing five seconds per call."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + timedelta(seconds=5)
        return current


def make_watcher(script: list, start: Optional[datetime] = None) -> Watcher:
    clock = SteppingClock(start or datetime(2024, 1, 2, 10, 0, 0))
    calendar = MarketCalendar(NoHolidays(), clock=lambda: datetime(2024, 1, 2, 10, 0, 0))
    return Watcher(
        symbol="BBCA:IDX",
        source=ScriptedQuoteSource(script),
        history=PriceHistoryBuffer(),
        renderer=ChartRenderer(),
        session=MarketSessionCalculator(calendar),
        clock=clock,
    )


# ============================================================================
# Watcher
# ============================================================================

class TestParseChange:
    """Change text parsing used for placeholder seeding."""

    @pytest.mark.parametrize("text,expected", [
        ("+25.00 (0.26%)", 25.0),
        ("-1,250.50 (1.10%)", -1250.5),
        ("−75.00 (0.80%)", -75.0),
        ("", None),
        ("n/a", None),
    ])
    def test_parse_change(self, text: str, expected: Optional[float]):
        assert parse_change(text) == expected


class TestWatcherTick:
    """
    **Feature: idx-live-view, Property 10: Tick Isolation**

    *For any* failed fetch, the history and chart stay as they were and
    the loop can carry on.
    """

    def test_first_tick_seeds_placeholders(self):
        watcher = make_watcher([9875.0])

        frame = watcher.tick(80)

        assert watcher.history.prices() == [9850.0, 9875.0]
        assert not watcher.history.real_data_started
        assert frame.chart != PLACEHOLDER_TEXT
        assert frame.previous_price is None
        assert frame.state.status is SessionStatus.OPEN
        assert frame.status_line == "OPEN"

    def test_second_tick_replaces_placeholders(self):
        watcher = make_watcher([9875.0, 9900.0])

        watcher.tick(80)
        frame = watcher.tick(80)

        assert watcher.history.real_data_started
        assert watcher.history.prices() == [9900.0]
        assert frame.chart == PLACEHOLDER_TEXT
        assert frame.previous_price == 9875.0
        assert frame.price_direction == 1

    def test_real_samples_accumulate(self):
        watcher = make_watcher([100.0, 101.0, 99.0, 102.0])

        for _ in range(4):
            frame = watcher.tick(80)

        assert watcher.history.prices() == [101.0, 99.0, 102.0]
        assert frame.chart.count("•") == 3

    def test_failed_tick_keeps_history_and_chart(self):
        watcher = make_watcher([100.0, 101.0, 102.0, FetchError("offline"), 103.0])

        for _ in range(3):
            good = watcher.tick(80)
        failed = watcher.tick(80)

        assert failed.error == "offline"
        assert failed.chart == good.chart
        assert failed.quote == good.quote
        assert watcher.history.prices() == [101.0, 102.0]

        recovered = watcher.tick(80)
        assert recovered.error is None
        assert watcher.history.prices() == [101.0, 102.0, 103.0]

    def test_not_found_is_reported(self):
        watcher = make_watcher([NotFoundError("Stock not found: BBCA:IDX")])

        frame = watcher.tick(80)

        assert frame.quote is None
        assert "Stock not found" in frame.error
        assert len(watcher.history) == 0

    def test_invalid_page_price_keeps_loop_alive(self):
        watcher = make_watcher([100.0, 101.0, '<div data-last-price="-5"></div>', 102.0])

        watcher.tick(80)
        good = watcher.tick(80)
        failed = watcher.tick(80)

        assert "Invalid price" in failed.error
        assert failed.quote == good.quote
        assert watcher.history.prices() == [101.0]

        watcher.tick(80)
        assert watcher.history.prices() == [101.0, 102.0]

    def test_after_hours_status(self):
        watcher = make_watcher([100.0], start=datetime(2024, 1, 2, 15, 31, 0))

        frame = watcher.tick(80)

        assert frame.state.status is SessionStatus.CLOSED_AFTER_HOURS
        assert frame.status_line == "CLOSED - Opens in 17 hours 29 minutes"

    def test_close_releases_sources(self):
        watcher = make_watcher([])

        watcher.close()

        assert watcher.source.closed


# ============================================================================
# Display
# ============================================================================

class TestDisplayHelpers:
    """Formatting helpers for the live view."""

    @pytest.mark.parametrize("amount,expected", [
        (9875.0, "9.875"),
        (9875.5, "9.875,5"),
        (1234567.0, "1.234.567"),
        (50.0, "50"),
        (0.0, "0"),
    ])
    def test_format_rupiah(self, amount: float, expected: str):
        assert format_rupiah(amount) == expected

    def test_random_stock_color_is_light(self):
        color = random_stock_color(random.Random(7))
        components = [int(c) for c in color[4:-1].split(",")]

        assert color.startswith("rgb(")
        assert all(100 <= c <= 255 for c in components)

    def test_chart_decorator_markup(self):
        decorate = chart_decorator("rgb(200,150,120)")

        assert decorate("•", "line") == "[rgb(200,150,120)]•[/rgb(200,150,120)]"
        assert decorate("|", "tick") == "[yellow]|[/yellow]"

    def test_no_color_decorator_is_plain(self):
        decorate = chart_decorator("rgb(200,150,120)", no_color=True)

        assert decorate("•", "line") == "•"


class TestComposeFrame:
    """The composed view contains header, price, chart and errors."""

    def render(self, frame: Frame, detailed: bool = False) -> str:
        console = Console(width=80, record=True, no_color=True)
        console.print(compose_frame(frame, 80, "rgb(200,150,120)", 30, detailed=detailed))
        return console.export_text()

    def test_full_view(self):
        frame = Frame(
            symbol="BBCA:IDX",
            timestamp=datetime(2024, 1, 2, 10, 0, 0),
            quote=Quote(
                symbol="BBCA:IDX",
                price=9875.0,
                change_text="+25.00 (0.26%)",
                details=[("Previous close", "Rp 9,850.00")],
            ),
            status_line="OPEN",
            chart="      20 |•",
        )

        text = self.render(frame, detailed=True)

        assert "=== BBCA Live Trading Data ===" in text
        assert "Time: 2024-01-02 10:00:00  Market: OPEN" in text
        assert "Price: Rp 9.875" in text
        assert "Change: +25.00 (0.26%)" in text
        assert "Detailed Information" in text
        assert "Previous close" in text
        assert "Price Chart (Last 30 updates):" in text

    def test_error_line(self):
        frame = Frame(
            symbol="BBCA:IDX",
            timestamp=datetime(2024, 1, 2, 10, 0, 0),
            error="offline",
        )

        text = self.render(frame)

        assert "Error updating data: offline" in text
        assert "Price:" not in text
