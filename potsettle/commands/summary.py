"""Status and history commands."""

import sqlite3

from rich.console import Console
from rich.table import Table

from potsettle.commands.admin import fail, require_database, require_settings
from potsettle.commands.month import resolve_month
from potsettle.dates import month_label
from potsettle.domain.models import Money, Month
from potsettle.domain.money import format_money
from potsettle.domain.summary import summarize_patrimony, wallet_progress
from potsettle.store.queries import get_assets, get_settlements, get_wallet_transactions, get_wallets

console = Console()


def status_command() -> None:
    """Show wallet and asset balances."""
    db_path = require_database()
    settings = require_settings()
    currency = settings.currency

    try:
        wallets = get_wallets(settings.user, db_path)
        assets = get_assets(settings.user, db_path)
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    summary = summarize_patrimony(wallets, assets)

    if wallets:
        table = Table(title="Wallets")
        table.add_column("Wallet", style="cyan")
        table.add_column("Balance", justify="right")
        table.add_column("Target", justify="right")
        table.add_column("Progress", justify="right")
        for wallet in wallets:
            progress = wallet_progress(wallet)
            target = wallet.target_balance
            table.add_row(
                wallet.name,
                format_money(wallet.current_balance, currency),
                format_money(target, currency) if target is not None else "-",
                f"{progress:.0f}%" if progress is not None else "-",
            )
        console.print(table)

    if assets:
        table = Table(title="Assets")
        table.add_column("Asset", style="cyan")
        table.add_column("Kind", style="magenta")
        table.add_column("Balance", justify="right")
        table.add_column("Share", justify="right")
        for asset in assets:
            share = (asset.current_balance / summary.total_assets) * 100 if summary.total_assets > 0 else 0
            table.add_row(asset.name, asset.kind, format_money(asset.current_balance, currency), f"{share:.1f}%")
        console.print(table)

    console.print(f"\n[bold]Total in wallets:[/bold] {format_money(summary.total_wallets, currency)}")
    console.print(f"[bold]Total in assets:[/bold] {format_money(summary.total_assets, currency)}")
    color = "green" if summary.difference == 0 else "yellow"
    console.print(f"[bold]Difference:[/bold] [{color}]{format_money(summary.difference, currency)}[/{color}]")


def history_command(month: str | None = None) -> None:
    """List settled months, or the wallet movements of one month."""
    db_path = require_database()
    settings = require_settings()
    currency = settings.currency

    try:
        if month:
            target_month = resolve_month(month)
            movements = get_wallet_transactions(settings.user, target_month, db_path)
        else:
            settlements = get_settlements(settings.user, db_path)
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    if month:
        if not movements:
            console.print(f"[yellow]No movements for {month_label(target_month)}[/yellow]")
            return
        table = Table(title=f"Wallet movements - {month_label(target_month)}")
        table.add_column("Wallet", style="cyan")
        table.add_column("Kind", style="magenta")
        table.add_column("Amount", justify="right")
        table.add_column("Description")
        for movement in movements:
            amount = Money(movement["amount"])
            style = "red" if amount < 0 else "green"
            table.add_row(
                movement["wallet_id"],
                movement["kind"],
                f"[{style}]{format_money(amount, currency)}[/{style}]",
                movement["description"] or "",
            )
        console.print(table)
        return

    if not settlements:
        console.print("[yellow]No settled months yet[/yellow]")
        return

    table = Table(title="Settled months")
    table.add_column("Month", style="cyan")
    table.add_column("Monthly pot", justify="right")
    table.add_column("Settled at", style="dim")
    for row in settlements:
        table.add_row(
            month_label(Month(row["month"])),
            format_money(Money(row["monthly_pot"]), currency),
            row["created_at"],
        )
    console.print(table)
