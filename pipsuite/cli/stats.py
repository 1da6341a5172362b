"""Performance analytics commands for pipsuite CLI."""

from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from pipsuite.cli.common import (
    build_filter,
    console,
    filter_options,
    get_data_store,
    pnl_markup,
)


def _filtered_trades(account_id, start, end, tags, any_tag, assets) -> list:
    """Non-deleted trades passing the shared filter options."""
    from pipsuite.analytics import apply_filters

    store = get_data_store()
    return apply_filters(store.get_trades(), build_filter(account_id, start, end, tags, any_tag, assets))


@click.command()
@filter_options
def stats(account_id, start, end, tags, any_tag, assets) -> None:
    """Show win rate, profit factor, expectancy and net P&L.

    Statistics cover closed trades only; open trades are counted in the total.

    \b
    Examples:
      pipsuite stats
      pipsuite stats --from 2024-01-01 --to 2024-03-31 --asset XAUUSD
    """
    from pipsuite.analytics import PROFIT_FACTOR_SENTINEL, compute_stats, distribution

    trades = _filtered_trades(account_id, start, end, tags, any_tag, assets)
    snapshot = compute_stats(trades)
    split = distribution(trades)

    pf = "∞" if snapshot.profit_factor == PROFIT_FACTOR_SENTINEL else f"{snapshot.profit_factor:.2f}"

    table = Table(show_header=False, box=None)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Total Trades", str(snapshot.total_trades))
    table.add_row("Closed Trades", str(snapshot.closed_trades))
    table.add_row("Win Rate", f"{snapshot.win_rate:.1f}%")
    table.add_row("Wins / Losses / BE", f"{split.wins} / {split.losses} / {split.break_even}")
    table.add_row("Net P&L", pnl_markup(snapshot.net_pnl))
    table.add_row("Avg Win", f"[green]${snapshot.avg_win:,.2f}[/green]")
    table.add_row("Avg Loss", f"[red]${snapshot.avg_loss:,.2f}[/red]")
    table.add_row("Profit Factor", pf)
    table.add_row("Expectancy", pnl_markup(snapshot.expectancy))
    table.add_row("Best Trade", pnl_markup(snapshot.best_trade))
    table.add_row("Worst Trade", pnl_markup(snapshot.worst_trade))

    console.print(Panel(table, title="[bold]Performance[/bold]", border_style="cyan"))


@click.command()
@filter_options
def equity(account_id, start, end, tags, any_tag, assets) -> None:
    """Show the cumulative P&L curve of closed trades."""
    from pipsuite.analytics import equity_curve

    points = equity_curve(_filtered_trades(account_id, start, end, tags, any_tag, assets))
    if not points:
        console.print("[dim]No closed trades found[/dim]")
        return

    table = Table(title="Equity Curve", show_header=True, header_style="bold cyan")
    table.add_column("Date/Time", style="dim")
    table.add_column("Trade P&L", justify="right")
    table.add_column("Cumulative", justify="right")

    for point in points:
        table.add_row(
            point.timestamp.strftime("%Y-%m-%d %H:%M"),
            pnl_markup(point.trade_pnl),
            pnl_markup(point.cumulative_pnl),
        )

    console.print(table)


@click.command()
@filter_options
def daily(account_id, start, end, tags, any_tag, assets) -> None:
    """Show P&L per calendar day."""
    from pipsuite.analytics import daily_pnl

    buckets = daily_pnl(_filtered_trades(account_id, start, end, tags, any_tag, assets))
    if not buckets:
        console.print("[dim]No closed trades found[/dim]")
        return

    table = Table(title="Daily P&L", show_header=True, header_style="bold cyan")
    table.add_column("Date", style="dim")
    table.add_column("Trades", justify="right")
    table.add_column("P&L", justify="right")

    for bucket in buckets:
        table.add_row(bucket.date.isoformat(), str(bucket.count), pnl_markup(bucket.pnl))

    console.print(table)


@click.command()
@filter_options
@click.option("--all-hours", is_flag=True, default=False, help="Include hours without trades.")
def hourly(account_id, start, end, tags, any_tag, assets, all_hours: bool) -> None:
    """Show P&L by hour of entry."""
    from pipsuite.analytics import hourly_pnl

    buckets = hourly_pnl(_filtered_trades(account_id, start, end, tags, any_tag, assets))

    table = Table(title="Hourly P&L", show_header=True, header_style="bold cyan")
    table.add_column("Hour", style="dim")
    table.add_column("Trades", justify="right")
    table.add_column("P&L", justify="right")

    for bucket in buckets:
        if bucket.count == 0 and not all_hours:
            continue
        table.add_row(bucket.label, str(bucket.count), pnl_markup(bucket.pnl))

    console.print(table)


@click.command()
@filter_options
@click.option("--top", type=int, default=None, help="Number of strategies to show (default 8).")
@click.option(
    "--by",
    "dimension",
    type=click.Choice(["setup", "symbol", "type", "account", "tag"]),
    default="setup",
    help="Grouping dimension.",
)
def strategies(account_id, start, end, tags, any_tag, assets, top: Optional[int], dimension: str) -> None:
    """Show performance per strategy (or another dimension), best first.

    \b
    Examples:
      pipsuite strategies
      pipsuite strategies --by symbol --top 5
    """
    from pipsuite.analytics import TOP_STRATEGIES, breakdown_by

    results = breakdown_by(
        _filtered_trades(account_id, start, end, tags, any_tag, assets),
        dimension,
        top=top if top is not None else TOP_STRATEGIES,
    )
    if not results:
        console.print("[dim]No closed trades found[/dim]")
        return

    table = Table(title=f"Performance by {dimension}", show_header=True, header_style="bold cyan")
    table.add_column(dimension.title(), style="bold")
    table.add_column("Trades", justify="right")
    table.add_column("Win Rate", justify="right")
    table.add_column("P&L", justify="right")

    for result in results:
        table.add_row(result.key, str(result.count), f"{result.win_rate:.1f}%", pnl_markup(result.pnl))

    console.print(table)
