"""ASCII line chart rendering for price history.

The chart is a fixed-height grid of characters. Each visible sample is a
point marker; consecutive points are joined by vertical trend glyphs in the
later sample's column. Rows are labelled with prices, and a time axis runs
underneath.

Example (plain, height 10)::

          20 | •│
          19 | ││
         ...
          10 |•│•
             ---
             |12:00:00
"""

import math
from typing import Callable, Sequence

from idxwatch.models import PricePoint


CHART_HEIGHT = 10
PLACEHOLDER_TEXT = "Collecting data..."

POINT_MARKER = "•"
TREND_GLYPH = "│"
EMPTY_CELL = " "

# Columns taken by the "%8s |" price label.
LABEL_WIDTH = 10
AXIS_INDENT = " " * (LABEL_WIDTH - 1)
TIME_FORMAT = "%H:%M:%S"
TIME_MARKS = 5
MIN_CHART_WIDTH = 2

# Roles passed to the decoration function.
ROLE_LABEL = "label"
ROLE_LINE = "line"
ROLE_AXIS = "axis"
ROLE_TICK = "tick"
ROLE_TIME = "time"

Decorator = Callable[[str, str], str]


def plain(text: str, role: str) -> str:
    """Decoration that leaves text unchanged."""
    return text


def scale_to_row(price: float, low: float, span: float, height: int = CHART_HEIGHT) -> int:
    """Map a price to a grid row, 0 being the lowest price.

    Halves round up. A zero span (flat series) maps everything to row 0.
    """
    if span == 0:
        return 0
    row = math.floor((height - 1) * (price - low) / span + 0.5)
    return max(0, min(height - 1, row))


class ChartRenderer:
    """Render price history into chart text.

    Rendering is a pure function of the history and terminal width; the
    renderer keeps no state between calls.
    """

    def __init__(self, height: int = CHART_HEIGHT, decorate: Decorator = plain):
        """Initialize the renderer.

        Args:
            height: Number of price rows.
            decorate: Called as ``decorate(text, role)`` for every styled
                fragment; returns the text to emit (e.g. with colour markup).
        """
        if height < 2:
            raise ValueError("height must be at least 2")
        self.height = height
        self.decorate = decorate

    def visible_width(self, history_length: int, terminal_width: int) -> int:
        """Number of samples that fit beside the price labels."""
        return min(history_length, max(MIN_CHART_WIDTH, terminal_width - LABEL_WIDTH))

    def build_grid(self, history: Sequence[PricePoint], terminal_width: int) -> list[list[str]]:
        """Rasterize the most recent samples into a grid (row 0 = lowest)."""
        prices = [point.price for point in history]
        low = min(prices)
        span = max(prices) - low

        data_points = self.visible_width(len(prices), terminal_width)
        visible = prices[len(prices) - data_points:]
        rows = [scale_to_row(price, low, span, self.height) for price in visible]

        grid = [[EMPTY_CELL] * data_points for _ in range(self.height)]
        for column, row in enumerate(rows):
            grid[row][column] = POINT_MARKER

        for column in range(1, data_points):
            start, end = sorted((rows[column - 1], rows[column]))
            for row in range(start, end + 1):
                # Points win over trend glyphs.
                if grid[row][column] == EMPTY_CELL:
                    grid[row][column] = TREND_GLYPH

        return grid

    def render(self, history: Sequence[PricePoint], terminal_width: int) -> str:
        """Render the chart for a history snapshot.

        Args:
            history: Samples, oldest first.
            terminal_width: Available columns.

        Returns:
            Chart text, or PLACEHOLDER_TEXT with fewer than two samples.
        """
        if len(history) < 2:
            return PLACEHOLDER_TEXT

        prices = [point.price for point in history]
        low = min(prices)
        span = max(prices) - low

        grid = self.build_grid(history, terminal_width)
        data_points = len(grid[0])
        visible = list(history)[len(history) - data_points:]

        lines = []
        for row in range(self.height - 1, -1, -1):
            label = f"{low + span * row / (self.height - 1):.0f}"
            cells = "".join(
                cell if cell == EMPTY_CELL else self.decorate(cell, ROLE_LINE)
                for cell in grid[row]
            )
            lines.append(self.decorate(f"{label:>8} |", ROLE_LABEL) + cells)

        lines.append(AXIS_INDENT + self.decorate("-" * data_points, ROLE_AXIS))
        lines.append(AXIS_INDENT + self._time_axis(visible))
        return "\n".join(lines)

    def _time_axis(self, visible: Sequence[PricePoint]) -> str:
        data_points = len(visible)
        interval = max(1, data_points // TIME_MARKS)
        parts = []

        column = 0
        while column < data_points:
            if column % interval == 0:
                stamp = visible[column].timestamp.strftime(TIME_FORMAT)
                parts.append(self.decorate("|", ROLE_TICK) + self.decorate(stamp, ROLE_TIME))
                column += len(stamp) + 1  # "|" plus the time
            else:
                parts.append(" ")
                column += 1

        return "".join(parts)
