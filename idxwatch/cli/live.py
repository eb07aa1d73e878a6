"""Live view and quote commands for idxwatch.

Handles the redrawing price/chart view and one-shot quotes.
"""

import time

import click
from rich.console import Console
from rich.live import Live
from rich.panel import Panel

from idxwatch.chart import ChartRenderer
from idxwatch.cli.common import build_session, error_panel, get_config
from idxwatch.cli.display import (
    chart_decorator,
    compose_frame,
    format_rupiah,
    random_stock_color,
)
from idxwatch.config import make_clock
from idxwatch.errors import FetchError
from idxwatch.market import PriceHistoryBuffer
from idxwatch.sources import GoogleFinanceSource, qualify_symbol
from idxwatch.watcher import Watcher

console = Console()


@click.command()
@click.argument("symbol")
@click.option(
    "-d", "--detailed",
    is_flag=True,
    help="Show detailed information (key statistics)",
)
@click.option(
    "-i", "--interval",
    default=None,
    type=click.IntRange(min=1),
    help="Refresh interval in seconds (default: 5, or display.interval)",
)
@click.option(
    "-n", "--no-color",
    is_flag=True,
    help="Disable colored output",
)
@click.pass_context
def watch(ctx: click.Context, symbol: str, detailed: bool, interval: int | None, no_color: bool) -> None:
    """Watch the live price and chart for a stock.

    SYMBOL is the IDX ticker (e.g., BBCA, TLKM, BBRI). The ":IDX" suffix
    is added when missing.

    Press Ctrl+C to stop watching.

    \b
    Examples:
      idx watch BBCA
      idx watch TLKM --interval 10
      idx watch BBRI -d -n
    """
    view_console = Console(no_color=no_color, highlight=False)
    config = get_config(ctx, view_console)
    interval = interval or config.display.interval

    symbol = qualify_symbol(symbol, config.quote.exchange)
    stock_color = "default" if no_color else random_stock_color()

    watcher = Watcher(
        symbol=symbol,
        source=GoogleFinanceSource(exchange=config.quote.exchange, timeout=config.quote.timeout),
        history=PriceHistoryBuffer(capacity=config.display.history_size),
        renderer=ChartRenderer(
            height=config.display.chart_height,
            decorate=chart_decorator(stock_color, no_color=no_color),
        ),
        session=build_session(config),
        clock=make_clock(config.market.timezone),
    )

    view_console.print("[yellow]Starting live data feed... Press Ctrl+C to exit[/yellow]")

    try:
        time.sleep(1)
        # screen=True switches to the alternate buffer and restores it on exit.
        with Live(console=view_console, screen=True, auto_refresh=False) as live_display:
            while True:
                width = view_console.width
                frame = watcher.tick(width)
                live_display.update(
                    compose_frame(
                        frame,
                        width=width,
                        stock_color=stock_color,
                        history_size=config.display.history_size,
                        detailed=detailed,
                    ),
                    refresh=True,
                )
                time.sleep(interval)
    except KeyboardInterrupt:
        view_console.print("[dim]Stopped watching.[/dim]")
    finally:
        watcher.close()


@click.command()
@click.argument("symbol")
@click.option(
    "-d", "--detailed",
    is_flag=True,
    help="Include key statistics",
)
@click.pass_context
def quote(ctx: click.Context, symbol: str, detailed: bool) -> None:
    """Display the current quote for a stock.

    SYMBOL is the IDX ticker (e.g., BBCA, TLKM, BBRI).

    \b
    Examples:
      idx quote BBCA
      idx quote TLKM --detailed
    """
    config = get_config(ctx, console)
    source = GoogleFinanceSource(exchange=config.quote.exchange, timeout=config.quote.timeout)

    try:
        q = source.fetch_quote(symbol)
    except FetchError as e:
        error_panel(console, f"Failed to get quote:\n\n{e}")
        raise SystemExit(1)
    finally:
        source.close()

    if not q.change_text:
        change_color = "white"
    elif "+" in q.change_text:
        change_color = "green"
    else:
        change_color = "red"

    quote_text = (
        f"[bold]{q.display_symbol}[/bold]\n\n"
        f"[bold white]Price:[/bold white] Rp {format_rupiah(q.price)}\n"
        f"[bold white]Change:[/bold white] [{change_color}]{q.change_text or '-'}[/{change_color}]"
    )
    if detailed and q.details:
        quote_text += "\n\n" + "\n".join(
            f"[dim]{label}:[/dim] {value}" for label, value in q.details
        )

    console.print(Panel(
        quote_text,
        title=f"[bold {change_color}]Quote[/bold {change_color}]",
        border_style=change_color,
    ))
