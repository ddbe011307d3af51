"""Commands for recording a month's expenses and incomes."""

import sqlite3
from pathlib import Path

from rich.console import Console

from potsettle.commands.admin import fail, require_database, require_settings
from potsettle.commands.setup import parse_amount_or_exit
from potsettle.dates import current_month, month_label, parse_month
from potsettle.domain.models import AssetId, CategoryExpense, CategoryId, Income, Month, UserId, WalletId
from potsettle.domain.money import format_money
from potsettle.domain.pot import can_pot_cover_excess
from potsettle.domain.settlement import SettlementInput
from potsettle.store.queries import (
    PeriodSettledError,
    add_income,
    clear_incomes,
    get_assets,
    get_categories,
    get_distribution_rules,
    get_expenses,
    get_incomes,
    get_wallets,
    set_expense,
)

console = Console()


def resolve_month(month: str | None) -> Month:
    """Parse the --month option, defaulting to the current month."""
    if not month:
        return current_month()
    try:
        return parse_month(month)
    except ValueError:
        fail(f"Invalid month '{month}'. Use YYYY-MM")


def load_settlement_input(user_id: UserId, month: Month, currency: str, db_path: Path) -> SettlementInput:
    """Read every record the settlement engine needs for a month.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    return SettlementInput(
        month=month,
        categories=get_categories(user_id, db_path),
        expenses=get_expenses(user_id, month, db_path),
        incomes=get_incomes(user_id, month, db_path),
        rules=get_distribution_rules(user_id, db_path),
        wallets=get_wallets(user_id, db_path),
        assets=get_assets(user_id, db_path),
        currency=currency,
    )


def expense_command(
    category: str,
    amount: str,
    wallet: str | None = None,
    month: str | None = None,
) -> None:
    """Record what was spent in a category this month."""
    db_path = require_database()
    settings = require_settings()
    target_month = resolve_month(month)
    spent = parse_amount_or_exit(amount)

    try:
        categories = {c.id: c for c in get_categories(settings.user, db_path, active_only=True)}
        if category not in categories:
            fail(f"Category '{category}' not found or inactive")

        if wallet and wallet not in {w.id for w in get_wallets(settings.user, db_path)}:
            fail(f"Wallet '{wallet}' not found")

        # New entries default to the category's own wallet
        wallet_id = WalletId(wallet) if wallet else categories[CategoryId(category)].wallet_id
        set_expense(
            settings.user,
            target_month,
            CategoryExpense(category_id=CategoryId(category), amount=spent, wallet_id=wallet_id),
            db_path,
        )

        budget = categories[CategoryId(category)].monthly_budget
        console.print(
            f"[green]✓ {category}: {format_money(spent, settings.currency)} of "
            f"{format_money(budget, settings.currency)} in {month_label(target_month)}[/green]"
        )
        if spent > budget and not wallet_id:
            inputs = load_settlement_input(settings.user, target_month, settings.currency, db_path)
            if can_pot_cover_excess(CategoryId(category), inputs.categories, inputs.expenses, inputs.incomes):
                console.print("[dim]The excess will be absorbed by the monthly pot[/dim]")
            else:
                console.print("[yellow]The monthly pot cannot cover this excess; consider --wallet[/yellow]")

    except PeriodSettledError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")


def income_command(
    amount: str,
    asset: str | None = None,
    description: str | None = None,
    month: str | None = None,
) -> None:
    """Record an income for this month."""
    db_path = require_database()
    settings = require_settings()
    target_month = resolve_month(month)
    received = parse_amount_or_exit(amount)

    try:
        if asset and asset not in {a.id for a in get_assets(settings.user, db_path)}:
            fail(f"Asset '{asset}' not found")

        add_income(
            settings.user,
            target_month,
            Income(amount=received, asset_id=AssetId(asset) if asset else None, description=description),
            db_path,
        )
        destination = f" into {asset}" if asset else ""
        console.print(
            f"[green]✓ Income of {format_money(received, settings.currency)}{destination} "
            f"in {month_label(target_month)}[/green]"
        )
        if received > 0 and not asset:
            console.print("[yellow]Incomes need an asset before the month can be settled[/yellow]")

    except PeriodSettledError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")


def incomes_clear_command(month: str | None = None) -> None:
    """Delete every income recorded for a draft month."""
    db_path = require_database()
    settings = require_settings()
    target_month = resolve_month(month)

    try:
        count = clear_incomes(settings.user, target_month, db_path)
        console.print(f"[green]✓ Removed {count} income(s) from {month_label(target_month)}[/green]")
    except PeriodSettledError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")
