"""Position sizing command for pipsuite CLI."""

import asyncio
from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from pipsuite.cli.common import console, fail, get_settings


def _resolve_rate(currency: str) -> float:
    """Quote-to-USD rate for sizing; 1.0 for USD or when unavailable."""
    from pipsuite.fx import CurrencyNormalizer, FrankfurterRateProvider

    if currency.upper() == "USD":
        return 1.0
    fx = get_settings("fx")
    provider = FrankfurterRateProvider(base_url=fx["base_url"], timeout=float(fx["timeout"]))
    rate = asyncio.run(CurrencyNormalizer(provider).resolve(currency))
    if rate is None:
        console.print(f"[yellow]No {currency}/USD rate available, sizing without conversion.[/yellow]")
        return 1.0
    return rate


@click.command()
@click.argument("symbol")
@click.option("--entry", type=str, required=True, help="Entry price.")
@click.option("--sl", "stop_loss", type=str, default=None, help="Stop loss price.")
@click.option("--tp", "take_profit", type=str, default=None, help="Take profit price.")
@click.option("--price", "current_price", type=str, default=None, help="Current market price.")
@click.option("--lots", type=str, default=None, help="Position size in lots.")
@click.option("--risk", "risk_percentage", type=str, default=None, help="Risk as % of balance.")
@click.option("--balance", type=str, default=None, help="Account balance.")
@click.option("--leverage", type=str, default=None, help="Account leverage.")
def calc(
    symbol: str,
    entry: str,
    stop_loss: Optional[str],
    take_profit: Optional[str],
    current_price: Optional[str],
    lots: Optional[str],
    risk_percentage: Optional[str],
    balance: Optional[str],
    leverage: Optional[str],
) -> None:
    """Size a position and show its risk/reward.

    Give either --lots or --risk; the other is derived from the balance,
    entry and stop. Without either, the configured default risk % is used.

    \b
    Examples:
      pipsuite calc XAUUSD --entry 2000 --sl 1995 --tp 2010 --risk 1
      pipsuite calc EURUSD --entry 1.1 --sl 1.095 --lots 0.5 --balance 5000
    """
    from pipsuite.assets import default_catalog
    from pipsuite.models import TradeDraft
    from pipsuite.risk import (
        apply_quantity,
        apply_risk_percentage,
        compute_derived_metrics,
        is_calculator_active,
    )

    asset = default_catalog().find(symbol)
    if asset is None:
        fail(f"Unknown symbol: {symbol}", title="Calculator Unavailable")

    risk_defaults = get_settings("risk")
    draft = TradeDraft(
        symbol=asset.pair,
        entry_price=entry,
        stop_loss=stop_loss,
        take_profit=take_profit,
        current_price=current_price,
        balance=balance if balance is not None else risk_defaults["default_balance"],
        leverage=leverage if leverage is not None else risk_defaults["default_leverage"],
    )

    if draft.number("entry_price") is None:
        fail(f"Invalid entry price: {entry}")

    if lots is not None or risk_percentage is not None or draft.number("stop_loss") is not None:
        rate = _resolve_rate(asset.quote)
        if lots is not None:
            draft = apply_quantity(draft, asset, lots, rate)
        elif is_calculator_active(draft, asset):
            risk_value = risk_percentage or risk_defaults["default_risk_percentage"]
            draft = apply_risk_percentage(draft, asset, risk_value, rate)
    else:
        rate = 1.0

    metrics = compute_derived_metrics(draft, asset, rate)

    table = Table(
        title=f"{asset.pair} Position",
        show_header=False,
        box=None,
    )
    table.add_column("Field", style="bold")
    table.add_column("Value", justify="right")

    direction_color = "green" if metrics.direction.value == "LONG" else "red"
    table.add_row("Direction", f"[{direction_color}]{metrics.direction.value}[/{direction_color}]")
    table.add_row("Order", metrics.order_type.label)

    lots_value = draft.number("quantity")
    risk_value = draft.number("risk_percentage")
    table.add_row("Lots", f"{lots_value:.2f}" if lots_value is not None else "-")
    table.add_row("Risk %", f"{risk_value:.2f}%" if risk_value is not None else "-")
    table.add_row(
        "SL distance",
        f"{metrics.sl.points:g} pts / {metrics.sl.pips:,.1f} pips / {metrics.sl.ticks:,.0f} ticks",
    )
    table.add_row(
        "TP distance",
        f"{metrics.tp.points:g} pts / {metrics.tp.pips:,.1f} pips / {metrics.tp.ticks:,.0f} ticks",
    )
    table.add_row("Risk", f"[red]{metrics.risk_amount:,.2f} {metrics.quote_currency}[/red]")
    table.add_row(
        "Potential profit",
        f"[green]{metrics.potential_profit:,.2f} {metrics.quote_currency}[/green]",
    )
    table.add_row("Reward:Risk", f"1:{metrics.reward_to_risk:.2f}")
    table.add_row("Required margin", f"{metrics.required_margin:,.2f} {metrics.quote_currency}")

    console.print(Panel(table, border_style="cyan"))

    for warning in metrics.warnings:
        console.print(f"[yellow]⚠ {warning}[/yellow]")
