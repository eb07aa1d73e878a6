"""Market status command for idxwatch."""

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from idxwatch.cli.common import build_session, error_panel, get_config
from idxwatch.config import make_clock
from idxwatch.errors import CalendarError

console = Console()


@click.command()
@click.option(
    "--holidays", "show_holidays",
    is_flag=True,
    help="List cached public holidays for this year and next",
)
@click.pass_context
def market(ctx: click.Context, show_holidays: bool) -> None:
    """Show whether the market is open and when it next opens.

    \b
    Examples:
      idx market
      idx market --holidays
    """
    config = get_config(ctx, console)
    session = build_session(config)
    now = make_clock(config.market.timezone)()

    try:
        _show_status(session, now, config, show_holidays)
    except CalendarError as e:
        error_panel(console, f"Cannot determine market state:\n\n{e}")
        raise SystemExit(1)
    finally:
        session.calendar.source.close()


def _show_status(session, now, config, show_holidays: bool) -> None:
    state = session.current_state(now)

    color = "green" if state.is_open else "red"
    lines = [
        f"[bold white]Time:[/bold white] {now:%Y-%m-%d %H:%M:%S} ({config.market.timezone})",
        f"[bold white]Hours:[/bold white] {config.market.open_time:%H:%M} - {config.market.close_time:%H:%M}",
        f"[bold white]Market:[/bold white] [{color}]{session.describe(now, state)}[/{color}]",
    ]
    if state.next_open_at is not None:
        lines.append(f"[dim]Next open:[/dim] {state.next_open_at:%A %Y-%m-%d %H:%M}")

    console.print(Panel(
        "\n".join(lines),
        title=f"[bold {color}]Market Status[/bold {color}]",
        border_style=color,
    ))

    if show_holidays:
        holidays = sorted(session.calendar.holidays(now))
        if not holidays:
            console.print("[yellow]No holiday data available.[/yellow]")
            return

        table = Table(
            title=f"Public Holidays ({config.market.country_code})",
            show_header=True,
            header_style="bold cyan",
        )
        table.add_column("Date")
        table.add_column("Day", style="dim")
        for day in holidays:
            table.add_row(day.isoformat(), day.strftime("%A"))
        console.print(table)
