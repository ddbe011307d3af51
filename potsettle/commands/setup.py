"""Commands for managing categories, wallets, assets and distribution rules."""

import sqlite3
from pathlib import Path

from rich.console import Console
from rich.table import Table

from potsettle.commands.admin import fail, require_database, require_settings
from potsettle.domain.distribution import percentage_total
from potsettle.domain.models import (
    ASSET_KINDS,
    CATEGORY_KINDS,
    RULE_KINDS,
    Asset,
    AssetId,
    Category,
    CategoryId,
    DistributionRule,
    Money,
    UserId,
    Wallet,
    WalletId,
)
from potsettle.domain.money import format_money, parse_money
from potsettle.domain.summary import wallet_progress
from potsettle.store.queries import (
    add_asset,
    add_category,
    add_wallet,
    delete_distribution_rule,
    get_assets,
    get_categories,
    get_distribution_rules,
    get_wallets,
    set_category_active,
    set_distribution_rule,
)

console = Console()


def parse_amount_or_exit(amount_str: str, label: str = "amount") -> Money:
    """Parse a money argument, exiting with an error when invalid."""
    amount = parse_money(amount_str)
    if amount is None:
        fail(f"Invalid {label}: {amount_str}")
    return amount


def _wallet_names(user_id: UserId, db_path: Path) -> set[str]:
    return {wallet.id for wallet in get_wallets(user_id, db_path)}


def category_add_command(
    name: str,
    budget: str,
    kind: str = "plain",
    wallet: str | None = None,
    annual: str | None = None,
) -> None:
    """Add or update a budgeted category."""
    db_path = require_database()
    settings = require_settings()

    if kind not in CATEGORY_KINDS:
        fail(f"Invalid kind '{kind}'. Choose from: {', '.join(CATEGORY_KINDS)}")

    monthly_budget = parse_amount_or_exit(budget, "budget")
    annual_budget = parse_amount_or_exit(annual, "annual budget") if annual else None

    try:
        if wallet and wallet not in _wallet_names(settings.user, db_path):
            fail(f"Wallet '{wallet}' not found")

        category = Category(
            id=CategoryId(name),
            name=name,
            kind=kind,  # type: ignore[arg-type]
            monthly_budget=monthly_budget,
            annual_budget=annual_budget,
            wallet_id=WalletId(wallet) if wallet else None,
        )
        add_category(settings.user, category, db_path)
        console.print(
            f"[green]✓ {name} ({kind}) budgeted at {format_money(monthly_budget, settings.currency)}[/green]"
        )
    except sqlite3.Error as e:
        fail(f"Database error: {e}")


def category_list_command(all: bool = False) -> None:
    """List categories."""
    db_path = require_database()
    settings = require_settings()

    try:
        categories = get_categories(settings.user, db_path, active_only=not all)
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    if not categories:
        console.print("[yellow]No categories found[/yellow]")
        return

    table = Table(title="Categories")
    table.add_column("Name", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Monthly", justify="right")
    table.add_column("Annual", justify="right")
    table.add_column("Wallet", style="dim")
    table.add_column("Active", justify="center")

    for category in categories:
        table.add_row(
            category.name,
            category.kind,
            format_money(category.monthly_budget, settings.currency),
            format_money(category.annual_budget, settings.currency) if category.annual_budget is not None else "-",
            category.wallet_id or "-",
            "✓" if category.active else "⊗",
        )

    console.print(table)


def category_deactivate_command(name: str) -> None:
    """Deactivate a category so it is no longer budgeted."""
    db_path = require_database()
    settings = require_settings()

    try:
        if not set_category_active(settings.user, CategoryId(name), False, db_path):
            fail(f"Category '{name}' not found")
        console.print(f"[green]✓ {name} deactivated[/green]")
    except sqlite3.Error as e:
        fail(f"Database error: {e}")


def wallet_add_command(name: str, balance: str = "0", target: str | None = None) -> None:
    """Add or update a wallet."""
    db_path = require_database()
    settings = require_settings()

    wallet = Wallet(
        id=WalletId(name),
        name=name,
        current_balance=parse_amount_or_exit(balance, "balance"),
        target_balance=parse_amount_or_exit(target, "target") if target else None,
    )
    try:
        add_wallet(settings.user, wallet, db_path)
        console.print(f"[green]✓ Wallet {name}: {format_money(wallet.current_balance, settings.currency)}[/green]")
    except sqlite3.Error as e:
        fail(f"Database error: {e}")


def wallet_list_command() -> None:
    """List wallets with progress towards their targets."""
    db_path = require_database()
    settings = require_settings()

    try:
        wallets = get_wallets(settings.user, db_path)
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    if not wallets:
        console.print("[yellow]No wallets found[/yellow]")
        return

    table = Table(title="Wallets")
    table.add_column("Name", style="cyan")
    table.add_column("Balance", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("Progress", justify="right")

    for wallet in wallets:
        progress = wallet_progress(wallet)
        table.add_row(
            wallet.name,
            format_money(wallet.current_balance, settings.currency),
            format_money(wallet.target_balance, settings.currency) if wallet.target_balance is not None else "-",
            f"{progress:.0f}%" if progress is not None else "-",
        )

    console.print(table)


def asset_add_command(name: str, kind: str = "bank-account", balance: str = "0") -> None:
    """Add or update an asset."""
    db_path = require_database()
    settings = require_settings()

    if kind not in ASSET_KINDS:
        fail(f"Invalid kind '{kind}'. Choose from: {', '.join(ASSET_KINDS)}")

    asset = Asset(id=AssetId(name), name=name, kind=kind, current_balance=parse_amount_or_exit(balance, "balance"))
    try:
        add_asset(settings.user, asset, db_path)
        console.print(f"[green]✓ Asset {name}: {format_money(asset.current_balance, settings.currency)}[/green]")
    except sqlite3.Error as e:
        fail(f"Database error: {e}")


def asset_list_command() -> None:
    """List assets."""
    db_path = require_database()
    settings = require_settings()

    try:
        assets = get_assets(settings.user, db_path)
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    if not assets:
        console.print("[yellow]No assets found[/yellow]")
        return

    table = Table(title="Assets")
    table.add_column("Name", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Balance", justify="right")
    for asset in assets:
        table.add_row(asset.name, asset.kind, format_money(asset.current_balance, settings.currency))
    console.print(table)


def rule_set_command(wallet: str, kind: str, value: str, priority: int = 0) -> None:
    """Set the distribution rule of a wallet."""
    db_path = require_database()
    settings = require_settings()

    if kind not in RULE_KINDS:
        fail(f"Invalid kind '{kind}'. Choose from: {', '.join(RULE_KINDS)}")

    if kind == "fixed":
        rule_value: float = parse_amount_or_exit(value, "amount")
    else:
        try:
            rule_value = float(value)
        except ValueError:
            rule_value = -1.0
        if not 0 <= rule_value <= 100:
            fail(f"Invalid percentage: {value} (must be between 0 and 100)")

    try:
        if wallet not in _wallet_names(settings.user, db_path):
            fail(f"Wallet '{wallet}' not found")
        rule = DistributionRule(wallet_id=WalletId(wallet), kind=kind, value=rule_value, priority=priority)  # type: ignore[arg-type]
        set_distribution_rule(settings.user, rule, db_path)
        display = format_money(Money(int(rule_value)), settings.currency) if kind == "fixed" else f"{rule_value:g}%"
        console.print(f"[green]✓ {wallet} receives {display} (priority {priority})[/green]")
    except sqlite3.Error as e:
        fail(f"Database error: {e}")


def rule_remove_command(wallet: str) -> None:
    """Remove the distribution rule of a wallet."""
    db_path = require_database()
    settings = require_settings()

    try:
        if not delete_distribution_rule(settings.user, WalletId(wallet), db_path):
            fail(f"No rule for wallet '{wallet}'")
        console.print(f"[green]✓ Rule for {wallet} removed[/green]")
    except sqlite3.Error as e:
        fail(f"Database error: {e}")


def rule_list_command() -> None:
    """List distribution rules in priority order."""
    db_path = require_database()
    settings = require_settings()

    try:
        rules = get_distribution_rules(settings.user, db_path)
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    if not rules:
        console.print("[yellow]No distribution rules[/yellow]")
        return

    table = Table(title="Distribution rules")
    table.add_column("Priority", justify="right")
    table.add_column("Wallet", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Value", justify="right")

    for rule in rules:
        value = format_money(Money(int(rule.value)), settings.currency) if rule.kind == "fixed" else f"{rule.value:g}%"
        table.add_row(str(rule.priority), rule.wallet_id, rule.kind, value)

    console.print(table)

    total = percentage_total(rule for rule in rules if rule.is_active)
    if total:
        color = "green" if abs(total - 100) <= 0.01 else "red"
        console.print(f"[{color}]Percentage total: {total:.1f}%[/{color}]")
