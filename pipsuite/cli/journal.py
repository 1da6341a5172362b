"""Journal commands for pipsuite CLI.

Handles setup, recording and closing trades, and the trash lifecycle.
"""

import uuid
from datetime import datetime
from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from pipsuite.cli.common import (
    build_filter,
    console,
    fail,
    filter_options,
    get_data_store,
    get_settings,
    pnl_markup,
)


@click.command()
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing config file.")
def init(force: bool) -> None:
    """Create the config file and initialize the journal database.

    \b
    Examples:
      pipsuite init
      pipsuite init --force
    """
    from pipsuite.config import CONFIG_PATH, create_template_config, get_db_path, load_config

    if CONFIG_PATH.exists() and not force:
        console.print(f"[dim]Config already exists at {CONFIG_PATH}[/dim]")
    else:
        create_template_config()
        console.print(f"[green]✓[/green] Config written to [cyan]{CONFIG_PATH}[/cyan]")

    store = get_data_store()
    accounts = store.get_accounts()
    store.get_tag_groups()
    store.get_strategies()

    console.print(Panel(
        f"Database: [cyan]{get_db_path(load_config())}[/cyan]\n"
        f"Tables: {', '.join(store.get_tables())}\n"
        f"Accounts: {', '.join(a.name for a in accounts)}",
        title="[bold green]Journal Ready[/bold green]",
        border_style="green",
    ))


@click.command()
@click.argument("symbol")
@click.option("--entry", type=float, required=True, help="Entry price.")
@click.option("--lots", type=float, required=True, help="Position size in lots.")
@click.option("--sl", "stop_loss", type=float, default=None, help="Stop loss price.")
@click.option("--tp", "take_profit", type=float, default=None, help="Take profit price.")
@click.option(
    "--type",
    "trade_type",
    type=click.Choice(["LONG", "SHORT"], case_sensitive=False),
    default=None,
    help="Direction. Derived from target/stop when omitted.",
)
@click.option("--risk", "risk_percentage", type=float, default=None, help="Planned risk %.")
@click.option("--setup", default="", help="Setup / strategy name.")
@click.option("--tag", "tags", multiple=True, help="Tag. Repeatable.")
@click.option("--notes", default="", help="Free-form notes.")
@click.option("--account", "account_id", default=None, help="Account ID.")
@click.option("--date", "entry_date", default=None, help="Entry time (ISO format). Defaults to now.")
def add(
    symbol: str,
    entry: float,
    lots: float,
    stop_loss: Optional[float],
    take_profit: Optional[float],
    trade_type: Optional[str],
    risk_percentage: Optional[float],
    setup: str,
    tags: tuple,
    notes: str,
    account_id: Optional[str],
    entry_date: Optional[str],
) -> None:
    """Record a new open trade.

    \b
    Examples:
      pipsuite add XAUUSD --entry 2000 --lots 0.1 --sl 1995 --tp 2010 --setup SMC
      pipsuite add EURUSD --entry 1.1 --lots 1 --type SHORT --tag "#FOMO"
    """
    from pipsuite.assets import default_catalog
    from pipsuite.models import Trade, TradeType
    from pipsuite.risk import classify_direction

    asset = default_catalog().find(symbol)
    if asset is None:
        console.print(f"[yellow]Symbol {symbol.upper()} is not in the asset catalog.[/yellow]")

    try:
        when = datetime.fromisoformat(entry_date) if entry_date else datetime.now()
    except ValueError:
        fail(f"Invalid date: {entry_date}")

    direction = (
        TradeType(trade_type.upper())
        if trade_type
        else classify_direction(entry, take_profit, stop_loss)
    )

    store = get_data_store()
    account_id = account_id or get_settings("journal")["default_account"]
    if store.get_account(account_id) is None:
        fail(f"Account not found: {account_id}")

    try:
        trade = Trade(
            id=uuid.uuid4().hex[:12],
            account_id=account_id,
            symbol=asset.pair if asset else symbol.upper(),
            type=direction,
            entry_price=entry,
            stop_loss=stop_loss,
            take_profit=take_profit,
            quantity=lots,
            risk_percentage=risk_percentage,
            entry_date=when,
            tags=list(dict.fromkeys(tags)),
            setup=setup,
            notes=notes,
        )
    except ValueError as e:
        fail(str(e), title="Invalid Trade")

    store.save_trade(trade)
    console.print(
        f"[green]✓[/green] Recorded {trade.type.value} {trade.symbol} "
        f"{trade.quantity:g} lots @ {trade.entry_price:g} [dim](id {trade.id})[/dim]"
    )


@click.command()
@click.argument("trade_id")
@click.option("--exit", "exit_price", type=float, required=True, help="Exit price.")
@click.option("--pnl", "main_pnl", type=float, required=True, help="P&L of the final exit.")
@click.option("--fees", type=float, default=0.0, help="Fees paid.")
@click.option(
    "--update-balance",
    is_flag=True,
    default=False,
    help="Apply the net P&L to the account balance.",
)
def close(trade_id: str, exit_price: float, main_pnl: float, fees: float, update_balance: bool) -> None:
    """Close an open trade.

    \b
    Examples:
      pipsuite close 3f2a9c1b7d4e --exit 2010 --pnl 100
      pipsuite close 3f2a9c1b7d4e --exit 1995 --pnl -50 --update-balance
    """
    from pipsuite.assets import default_catalog
    from pipsuite.journal import close_trade

    store = get_data_store()
    trade = store.get_trade(trade_id)
    if trade is None:
        fail(f"Trade not found: {trade_id}")

    try:
        closed = close_trade(
            trade,
            exit_price=exit_price,
            main_pnl=main_pnl,
            fees=fees,
            asset=default_catalog().find(trade.symbol),
            affect_balance=update_balance,
        )
    except ValueError as e:
        fail(str(e), title="Cannot Close Trade")

    store.save_trade(closed)
    if update_balance and closed.pnl != 0:
        balance = store.adjust_account_balance(closed.account_id, closed.pnl)
        console.print(f"[dim]Account {closed.account_id} balance: {balance:,.2f}[/dim]")

    console.print(Panel(
        f"Status: [bold]{closed.status.value}[/bold]\n"
        f"Net P&L: {pnl_markup(closed.pnl)}\n"
        f"Tags: {' '.join(closed.tags) or '-'}",
        title=f"[bold]Closed {closed.symbol}[/bold]",
        border_style="green" if closed.pnl >= 0 else "red",
    ))


@click.command()
@filter_options
@click.option("--trash", is_flag=True, default=False, help="Show trades in the trash instead.")
@click.option("--search", default=None, help="Text search over symbol, setup and notes.")
def trades(
    account_id: Optional[str],
    start: Optional[str],
    end: Optional[str],
    tags: tuple,
    any_tag: bool,
    assets: tuple,
    trash: bool,
    search: Optional[str],
) -> None:
    """List journaled trades.

    \b
    Examples:
      pipsuite trades
      pipsuite trades --from 2024-01-01 --tag "#FOMO"
      pipsuite trades --trash
    """
    from pipsuite.analytics import apply_filters

    store = get_data_store()
    filters = build_filter(account_id, start, end, tags, any_tag, assets).model_copy(
        update={"deleted": "only" if trash else "exclude", "search": search}
    )
    rows = apply_filters(store.get_trades(), filters)

    title = "Trash" if trash else "Trade Journal"
    if not rows:
        console.print(Panel(
            "[dim]No trades found[/dim]",
            title=f"[bold]{title}[/bold]",
            border_style="dim",
        ))
        return

    table = Table(
        title=title,
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("ID", style="dim")
    table.add_column("Date/Time", style="dim")
    table.add_column("Symbol", style="bold")
    table.add_column("Side", justify="center")
    table.add_column("Lots", justify="right")
    table.add_column("Entry", justify="right")
    table.add_column("Exit", justify="right")
    table.add_column("P&L", justify="right")
    table.add_column("Status", justify="center")
    table.add_column("Setup")
    table.add_column("Tags", style="dim")

    for trade in rows:
        side_color = "green" if trade.type.value == "LONG" else "red"
        table.add_row(
            trade.id,
            trade.local_time.strftime("%Y-%m-%d %H:%M"),
            trade.symbol,
            f"[{side_color}]{trade.type.value}[/{side_color}]",
            f"{trade.quantity:g}",
            f"{trade.entry_price:g}",
            f"{trade.exit_price:g}" if trade.exit_price is not None else "-",
            pnl_markup(trade.pnl) if trade.is_closed else "-",
            trade.status.value,
            trade.setup or "-",
            " ".join(trade.tags),
        )

    console.print(table)
    console.print(f"\n[bold]Total Trades:[/bold] {len(rows)}")


@click.command()
@click.argument("trade_ids", nargs=-1, required=True)
def delete(trade_ids: tuple) -> None:
    """Move trades to the trash.

    Balance changes applied when the trade was closed are reversed.
    """
    store = get_data_store()
    try:
        deleted = store.soft_delete_trades(trade_ids)
    except ValueError as e:
        fail(str(e))
    console.print(f"[green]✓[/green] Moved {len(deleted)} trade(s) to the trash")


@click.command()
@click.argument("trade_ids", nargs=-1, required=True)
def restore(trade_ids: tuple) -> None:
    """Restore trades from the trash."""
    store = get_data_store()
    try:
        restored = store.restore_trades(trade_ids)
    except ValueError as e:
        fail(str(e))
    console.print(f"[green]✓[/green] Restored {len(restored)} trade(s)")


@click.command()
@click.option("--days", type=int, default=None, help="Retention window in days (default 30).")
def purge(days: Optional[int]) -> None:
    """Permanently delete trashed trades past the retention window."""
    from pipsuite.db.store import TRASH_RETENTION_DAYS

    store = get_data_store()
    count = store.purge_deleted(days if days is not None else TRASH_RETENTION_DAYS)
    console.print(f"[green]✓[/green] Purged {count} trade(s)")
