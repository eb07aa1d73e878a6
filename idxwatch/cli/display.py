"""Rich renderables for the live view."""

import random
from typing import Optional

from rich.console import Group, RenderableType
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from idxwatch.chart.renderer import (
    Decorator,
    ROLE_AXIS,
    ROLE_LABEL,
    ROLE_LINE,
    ROLE_TICK,
    ROLE_TIME,
    plain,
)
from idxwatch.watcher import Frame


CHART_ROLE_STYLES = {
    ROLE_LABEL: "blue",
    ROLE_AXIS: "blue",
    ROLE_TIME: "blue",
    ROLE_TICK: "yellow",
}


def random_stock_color(rng: Optional[random.Random] = None) -> str:
    """Pick a light RGB colour for the session, e.g. 'rgb(180,120,230)'."""
    rng = rng or random.Random()
    r, g, b = (rng.randint(100, 255) for _ in range(3))
    return f"rgb({r},{g},{b})"


def chart_decorator(stock_color: str, no_color: bool = False) -> Decorator:
    """Return a chart decoration function emitting rich markup."""
    if no_color:
        return plain

    def decorate(text: str, role: str) -> str:
        style = stock_color if role == ROLE_LINE else CHART_ROLE_STYLES.get(role)
        if style is None:
            return escape(text)
        return f"[{style}]{escape(text)}[/{style}]"

    return decorate


def format_rupiah(amount: float) -> str:
    """Format a price the Indonesian way, e.g. 9875.5 -> '9.875,5'."""
    text = f"{amount:,.3f}".rstrip("0").rstrip(".")
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def _header(frame: Frame, width: int, stock_color: str) -> list[RenderableType]:
    title = f"=== {frame.symbol.split(':', 1)[0]} Live Trading Data ==="
    market_style = "green" if frame.state is not None and frame.state.is_open else "red"

    status = Text()
    status.append(f"Time: {frame.timestamp:%Y-%m-%d %H:%M:%S}", style=stock_color)
    status.append("  Market: ")
    status.append(frame.status_line, style=market_style)

    separator = Text("=" * width, style=stock_color)
    return [
        separator,
        Text(title, style=stock_color, justify="center"),
        status,
        separator,
    ]


def _price_lines(frame: Frame) -> list[RenderableType]:
    if frame.quote is None:
        return []

    direction = frame.price_direction
    price_style = {1: "green", -1: "red"}.get(direction, "default")
    lines: list[RenderableType] = [
        Text(f"Price: Rp {format_rupiah(frame.quote.price)}", style=price_style),
    ]

    change = frame.quote.change_text
    if change:
        lines.append(Text(f"Change: {change}", style="green" if "+" in change else "red"))
    lines.append(Text(""))
    return lines


def _details_table(frame: Frame) -> Optional[Table]:
    if frame.quote is None or not frame.quote.details:
        return None

    table = Table(
        title="Detailed Information",
        title_style="yellow",
        show_header=False,
        box=None,
    )
    table.add_column("Label", style="blue", min_width=20)
    table.add_column("Value")
    for label, value in frame.quote.details:
        table.add_row(label, value)
    return table


def compose_frame(
    frame: Frame,
    width: int,
    stock_color: str,
    history_size: int,
    detailed: bool = False,
) -> Group:
    """Build the full live view for a frame.

    Args:
        frame: Result of a watcher tick.
        width: Terminal width.
        stock_color: Rich colour used for the header and chart line.
        history_size: Buffer capacity, shown in the chart title.
        detailed: Whether to include the key statistics table.
    """
    parts: list[RenderableType] = _header(frame, width, stock_color)
    parts.extend(_price_lines(frame))

    if detailed:
        table = _details_table(frame)
        if table is not None:
            parts.append(table)
            parts.append(Text(""))

    if frame.chart:
        parts.append(Text(f"Price Chart (Last {history_size} updates):"))
        chart = Text.from_markup(frame.chart)
        chart.no_wrap = True
        chart.overflow = "crop"
        parts.append(chart)

    if frame.error:
        parts.append(Text(""))
        parts.append(Text(f"Error updating data: {frame.error}", style="red"))

    return Group(*parts)
