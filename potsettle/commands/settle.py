"""Preview and settle commands for closing a month."""

import sqlite3
import sys

import typer
from rich.console import Console
from rich.table import Table

from potsettle.commands.admin import fail, require_database, require_settings
from potsettle.commands.month import load_settlement_input, resolve_month
from potsettle.dates import month_label
from potsettle.domain.analysis import budget_usage
from potsettle.domain.distribution import distribution_shares
from potsettle.domain.models import Money, WalletId
from potsettle.domain.money import format_money
from potsettle.domain.settlement import Settlement, ValidationIssue, compute_settlement, settle, validate_settlement
from potsettle.domain.summary import project_balances
from potsettle.store.queries import commit_settlement, settlement_exists

console = Console()


def format_signed(amount: Money, currency: str) -> str:
    """Format a delta with a sign and color."""
    if amount < 0:
        return f"[red]{format_money(amount, currency)}[/red]"
    return f"[green]+{format_money(amount, currency)}[/green]"


def format_usage(percentage: float) -> str:
    """Color budget usage by how close it is to the limit."""
    text = f"{percentage:.0f}%"
    if percentage > 100:
        return f"[red]{text}[/red]"
    elif percentage > 90:
        return f"[yellow]{text}[/yellow]"
    return f"[green]{text}[/green]"


def render_categories(settlement: Settlement, currency: str) -> None:
    """Render per-category spending, excess and surplus."""
    table = Table(title=f"Categories - {month_label(settlement.month)}")
    table.add_column("Category", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Budget", justify="right")
    table.add_column("Spent", justify="right")
    table.add_column("Used", justify="right")
    table.add_column("Excess", justify="right")
    table.add_column("Surplus", justify="right")
    table.add_column("Wallet", style="dim")

    for stats in settlement.stats:
        table.add_row(
            stats.category.name,
            stats.category.kind,
            format_money(stats.category.monthly_budget, currency),
            format_money(stats.expense.amount, currency),
            format_usage(budget_usage(stats)),
            f"[red]{format_money(stats.excess, currency)}[/red]" if stats.excess else "-",
            f"[green]{format_money(stats.surplus, currency)}[/green]" if stats.surplus else "-",
            stats.wallet_id or "-",
        )

    console.print(table)


def render_pot(settlement: Settlement, currency: str) -> None:
    """Render totals and the monthly pot."""
    pot = settlement.pot
    console.print(f"\n[bold]Budgeted:[/bold] {format_money(pot.total_budget, currency)}")
    console.print(f"[bold]Spent:[/bold] {format_money(pot.total_spent, currency)}")
    console.print(f"[bold]Income:[/bold] {format_money(pot.total_income, currency)}")
    if pot.excesses_covered_by_wallets:
        console.print(
            f"[dim]Excesses covered by wallets: {format_money(pot.excesses_covered_by_wallets, currency)} "
            "(not taken from the pot)[/dim]"
        )
    if pot.excesses_absorbed_by_pot:
        console.print(
            f"[dim]Excesses absorbed by the pot: {format_money(pot.excesses_absorbed_by_pot, currency)}[/dim]"
        )
    color = "green" if pot.monthly_pot >= 0 else "red"
    console.print(f"[bold]Monthly pot:[/bold] [{color}]{format_money(pot.monthly_pot, currency)}[/{color}]\n")


def render_distribution(settlement: Settlement, currency: str) -> None:
    """Render how the pot is shared across wallets."""
    if not settlement.distribution:
        console.print("[dim]Nothing to distribute[/dim]")
        return

    shares = distribution_shares(settlement.distribution, settlement.pot.monthly_pot)
    table = Table(title="Pot distribution")
    table.add_column("Wallet", style="cyan")
    table.add_column("Share", justify="right")
    table.add_column("Amount", justify="right")
    for wallet_id, amount in settlement.distribution.items():
        table.add_row(wallet_id, f"{shares[wallet_id]:.1f}%", format_money(amount, currency))
    console.print(table)


def render_wallet_changes(settlement: Settlement, current: dict[WalletId, Money], currency: str) -> None:
    """Render movements and resulting wallet balances."""
    if not settlement.movements:
        console.print("[dim]No wallet movements[/dim]")
        return

    table = Table(title="Wallet movements")
    table.add_column("Wallet", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Amount", justify="right")
    table.add_column("Description")
    for movement in settlement.movements:
        table.add_row(movement.wallet_id, movement.kind, format_signed(movement.amount, currency), movement.description)
    console.print(table)

    projected = project_balances(current, settlement.wallet_deltas)
    balances = Table(title="Wallet balances")
    balances.add_column("Wallet", style="cyan")
    balances.add_column("Before", justify="right")
    balances.add_column("Change", justify="right")
    balances.add_column("After", justify="right")
    for wallet_id, delta in settlement.wallet_deltas.items():
        balances.add_row(
            wallet_id,
            format_money(current.get(wallet_id, Money(0)), currency),
            format_signed(delta, currency),
            format_money(projected[wallet_id], currency),
        )
    console.print(balances)


def render_asset_changes(settlement: Settlement, currency: str) -> None:
    """Render income deposits per asset."""
    for asset_id, delta in settlement.asset_deltas.items():
        console.print(f"  {asset_id}: {format_signed(delta, currency)}")


def render_issues(issues: list[ValidationIssue]) -> None:
    """Render every validation issue blocking the settlement."""
    console.print("[red]The month cannot be settled yet:[/red]", style="bold")
    for issue in issues:
        console.print(f"  • {issue.detail}")


def render_warnings(warnings: list[str]) -> None:
    for warning in warnings:
        console.print(f"[yellow]! {warning}[/yellow]")


def preview_command(month: str | None = None) -> None:
    """Show how the month would be settled, with any blocking issues."""
    db_path = require_database()
    settings = require_settings()
    target_month = resolve_month(month)

    try:
        inputs = load_settlement_input(settings.user, target_month, settings.currency, db_path)
        exists = settlement_exists(settings.user, target_month, db_path)
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    settlement = compute_settlement(inputs)
    current = {wallet.id: wallet.current_balance for wallet in inputs.wallets}

    render_categories(settlement, settings.currency)
    render_pot(settlement, settings.currency)
    render_distribution(settlement, settings.currency)
    render_wallet_changes(settlement, current, settings.currency)
    if settlement.asset_deltas:
        console.print("\n[bold]Asset deposits:[/bold]")
        render_asset_changes(settlement, settings.currency)
    render_warnings(settlement.warnings)

    issues = validate_settlement(inputs, exists)
    if issues:
        render_issues(issues)
    else:
        console.print("\n[green]Ready to settle. Run 'potsettle settle' to commit.[/green]")


def settle_command(month: str | None = None, yes: bool = False) -> None:
    """Validate and commit the settlement of a month."""
    db_path = require_database()
    settings = require_settings()
    target_month = resolve_month(month)

    try:
        inputs = load_settlement_input(settings.user, target_month, settings.currency, db_path)
        exists = settlement_exists(settings.user, target_month, db_path)
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    settlement, issues = settle(inputs, exists)
    if settlement is None:
        render_issues(issues)
        sys.exit(1)

    render_pot(settlement, settings.currency)
    render_distribution(settlement, settings.currency)
    render_warnings(settlement.warnings)

    if not yes and not typer.confirm(f"Settle {month_label(target_month)}? This cannot be undone"):
        console.print("[yellow]Cancelled[/yellow]")
        return

    try:
        commit_settlement(settings.user, settlement, db_path)
    except sqlite3.IntegrityError:
        fail(f"A settlement for {target_month} already exists")
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓ {month_label(target_month)} settled[/green]", style="bold")
    for wallet_id, delta in settlement.wallet_deltas.items():
        console.print(f"  {wallet_id}: {format_signed(delta, settings.currency)}")
    render_asset_changes(settlement, settings.currency)
