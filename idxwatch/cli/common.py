"""Shared helpers for idxwatch commands."""

from datetime import timedelta

import click
from rich.console import Console
from rich.panel import Panel

from idxwatch.config import AppConfig, load_config, make_clock
from idxwatch.errors import ConfigError
from idxwatch.logging_utils import setup_logging
from idxwatch.market import MarketCalendar, MarketSessionCalculator
from idxwatch.sources import NagerHolidaySource


def error_panel(console: Console, message: str, title: str = "Error") -> None:
    """Print an error in a red panel."""
    console.print(Panel(
        f"[red]{message}[/red]",
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))


def get_config(ctx: click.Context, console: Console) -> AppConfig:
    """Load configuration and set up logging for a command.

    Exits with status 1 when the config file is invalid.
    """
    obj = ctx.find_root().obj or {}
    try:
        config = load_config(obj.get("config_path"))
    except ConfigError as e:
        error_panel(console, str(e), title="Configuration Error")
        raise SystemExit(1)

    setup_logging(
        level=obj.get("log_level") or config.logging.level,
        log_file=config.logging.file or None,
    )
    return config


def build_session(config: AppConfig) -> MarketSessionCalculator:
    """Create the session calculator with its holiday calendar."""
    calendar = MarketCalendar(
        source=NagerHolidaySource(timeout=config.quote.timeout),
        country_code=config.market.country_code,
        ttl=timedelta(hours=config.market.holiday_ttl_hours),
        clock=make_clock(config.market.timezone),
    )
    return MarketSessionCalculator(
        calendar,
        open_time=config.market.open_time,
        close_time=config.market.close_time,
        close_inclusive=config.market.close_inclusive,
    )
