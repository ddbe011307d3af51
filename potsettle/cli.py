"""CLI entry point for potsettle."""

import logging

import typer
from rich.logging import RichHandler

from potsettle.commands.admin import backup_command, init_command
from potsettle.commands.month import expense_command, income_command, incomes_clear_command
from potsettle.commands.settle import preview_command, settle_command
from potsettle.commands.setup import (
    asset_add_command,
    asset_list_command,
    category_add_command,
    category_deactivate_command,
    category_list_command,
    rule_list_command,
    rule_remove_command,
    rule_set_command,
    wallet_add_command,
    wallet_list_command,
)
from potsettle.commands.summary import history_command, status_command

app = typer.Typer(
    name="potsettle",
    help="Monthly budget settlement - share what is left across your savings wallets",
    add_completion=False,
)
category_app = typer.Typer(help="Manage budgeted categories", no_args_is_help=True)
wallet_app = typer.Typer(help="Manage savings wallets", no_args_is_help=True)
asset_app = typer.Typer(help="Manage assets that receive income", no_args_is_help=True)
rule_app = typer.Typer(help="Manage how the monthly pot is distributed", no_args_is_help=True)

app.add_typer(category_app, name="category")
app.add_typer(wallet_app, name="wallet")
app.add_typer(asset_app, name="asset")
app.add_typer(rule_app, name="rule")

MONTH_HELP = "Month to work on (YYYY-MM, default: current month)"


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed log output"),
) -> None:
    """Monthly budget settlement - share what is left across your savings wallets."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing database and config"),
) -> None:
    """Initialize potsettle database and configuration."""
    init_command(force)


@app.command(name="backup")
def backup(
    output_dir: str = typer.Option(
        None, "--output", "-o", help="Backup directory (default: $XDG_DATA_HOME/potsettle/backups)"
    ),
) -> None:
    """Snapshot your ledger database and configuration."""
    backup_command(output_dir)


@category_app.command(name="add")
def category_add(
    name: str,
    budget: str = typer.Option(..., "--budget", "-b", help="Monthly budget"),
    kind: str = typer.Option("plain", "--kind", "-k", help="plain, accumulative, mixed or accumulative-optional"),
    wallet: str = typer.Option(None, "--wallet", "-w", help="Default wallet for surplus and excess"),
    annual: str = typer.Option(None, "--annual", help="Annual budget"),
) -> None:
    """Add or update a category."""
    category_add_command(name, budget, kind, wallet, annual)


@category_app.command(name="list")
def category_list(
    all: bool = typer.Option(False, "--all", "-a", help="Include inactive categories"),
) -> None:
    """List your categories."""
    category_list_command(all)


@category_app.command(name="deactivate")
def category_deactivate(name: str) -> None:
    """Stop budgeting a category."""
    category_deactivate_command(name)


@wallet_app.command(name="add")
def wallet_add(
    name: str,
    balance: str = typer.Option("0", "--balance", help="Current balance"),
    target: str = typer.Option(None, "--target", help="Target balance"),
) -> None:
    """Add or update a wallet."""
    wallet_add_command(name, balance, target)


@wallet_app.command(name="list")
def wallet_list() -> None:
    """List your wallets."""
    wallet_list_command()


@asset_app.command(name="add")
def asset_add(
    name: str,
    kind: str = typer.Option("bank-account", "--kind", "-k", help="bank-account, cash, investment, property or other"),
    balance: str = typer.Option("0", "--balance", help="Current balance"),
) -> None:
    """Add or update an asset."""
    asset_add_command(name, kind, balance)


@asset_app.command(name="list")
def asset_list() -> None:
    """List your assets."""
    asset_list_command()


@rule_app.command(name="set")
def rule_set(
    wallet: str,
    kind: str = typer.Option(..., "--kind", "-k", help="fixed or percentage"),
    value: str = typer.Option(..., "--value", help="Amount for fixed rules, 0-100 for percentage rules"),
    priority: int = typer.Option(0, "--priority", "-p", help="Lower priorities are applied first"),
) -> None:
    """Set how much of the monthly pot a wallet receives."""
    rule_set_command(wallet, kind, value, priority)


@rule_app.command(name="remove")
def rule_remove(wallet: str) -> None:
    """Remove the rule of a wallet."""
    rule_remove_command(wallet)


@rule_app.command(name="list")
def rule_list() -> None:
    """List distribution rules."""
    rule_list_command()


@app.command()
def expense(
    category: str,
    amount: str,
    wallet: str = typer.Option(None, "--wallet", "-w", help="Wallet that covers the excess or keeps the surplus"),
    month: str = typer.Option(None, "--month", help=MONTH_HELP),
) -> None:
    """Record what you spent in a category."""
    expense_command(category, amount, wallet, month)


@app.command()
def income(
    amount: str,
    asset: str = typer.Option(None, "--asset", "-a", help="Asset the income was deposited into"),
    description: str = typer.Option(None, "--description", "-d", help="What the income was"),
    month: str = typer.Option(None, "--month", help=MONTH_HELP),
) -> None:
    """Record an income."""
    income_command(amount, asset, description, month)


@app.command(name="incomes-clear")
def incomes_clear(
    month: str = typer.Option(None, "--month", help=MONTH_HELP),
) -> None:
    """Delete every income of a month that is not settled yet."""
    incomes_clear_command(month)


@app.command()
def preview(
    month: str = typer.Option(None, "--month", help=MONTH_HELP),
) -> None:
    """Preview the settlement of a month."""
    preview_command(month)


@app.command()
def settle(
    month: str = typer.Option(None, "--month", help=MONTH_HELP),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Settle a month and update your wallet and asset balances."""
    settle_command(month, yes)


@app.command()
def status() -> None:
    """Show your wallet and asset balances."""
    status_command()


@app.command()
def history(
    month: str = typer.Option(None, "--month", help="Show the wallet movements of this month (YYYY-MM)"),
) -> None:
    """Show settled months."""
    history_command(month)


if __name__ == "__main__":
    app()
