"""Helpers shared by pipsuite CLI commands."""

from datetime import date, datetime
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

console = Console()


def _get_config() -> Optional[dict]:
    """Lazily load configuration."""
    from pipsuite.config import load_config

    return load_config()


def get_data_store():
    """Get the data store instance for the configured database."""
    from pipsuite.config import get_db_path
    from pipsuite.db.store import DataStore

    return DataStore(get_db_path(_get_config()))


def get_settings(section: str) -> dict:
    """A config section with template defaults filled in."""
    from pipsuite.config import get_section

    return get_section(_get_config(), section)


def fail(message: str, title: str = "Error") -> None:
    """Print an error panel and exit with status 1."""
    console.print(Panel(
        f"[red]{escape(message)}[/red]",
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))
    raise SystemExit(1)


def pnl_markup(value: float, prefix: str = "$") -> str:
    """Colored, signed P&L string."""
    color = "green" if value >= 0 else "red"
    sign = "+" if value >= 0 else "-"
    return f"[{color}]{sign}{prefix}{abs(value):,.2f}[/{color}]"


def parse_day(value: Optional[str]) -> Optional[date]:
    """Parse a YYYY-MM-DD option value."""
    if value is None:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise click.BadParameter(f"Invalid date '{value}', expected YYYY-MM-DD")


def filter_options(func):
    """Attach the shared trade filter options to a command."""
    options = [
        click.option("--account", "account_id", default=None, help="Only trades of this account."),
        click.option("--from", "start", default=None, help="Start date (YYYY-MM-DD), inclusive."),
        click.option("--to", "end", default=None, help="End date (YYYY-MM-DD), inclusive."),
        click.option("--tag", "tags", multiple=True, help="Required tag. Repeatable."),
        click.option("--any-tag", is_flag=True, default=False, help="Match any tag instead of all."),
        click.option("--asset", "assets", multiple=True, help="Allowed symbol. Repeatable."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def build_filter(
    account_id: Optional[str],
    start: Optional[str],
    end: Optional[str],
    tags: tuple,
    any_tag: bool,
    assets: tuple,
):
    """Build a TradeFilter from the shared filter options."""
    from pipsuite.analytics.filters import TradeFilter

    return TradeFilter(
        start=parse_day(start),
        end=parse_day(end),
        account_id=account_id,
        tags=frozenset(tags),
        tag_match="any" if any_tag else "all",
        assets=frozenset(a.strip().upper() for a in assets),
    )
