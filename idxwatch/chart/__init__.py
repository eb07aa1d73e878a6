"""Terminal chart rendering."""

from idxwatch.chart.renderer import CHART_HEIGHT, PLACEHOLDER_TEXT, ChartRenderer

__all__ = [
    "CHART_HEIGHT",
    "ChartRenderer",
    "PLACEHOLDER_TEXT",
]
