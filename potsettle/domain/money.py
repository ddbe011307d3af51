"""Pure helpers for parsing and formatting money amounts.

All monetary amounts are in cents (Money type).
"""

import math

from potsettle.domain.models import Money

DEFAULT_CURRENCY = "€"


def format_money(amount: Money, currency: str = DEFAULT_CURRENCY) -> str:
    """Format cents for display.

    Args:
        amount: Amount in cents.
        currency: Currency symbol to prefix.

    Returns:
        Formatted amount, e.g. "€1,234.56" or "-€50.00".
    """
    sign = "-" if amount < 0 else ""
    return f"{sign}{currency}{abs(amount) / 100:,.2f}"


def parse_money(amount_str: str) -> Money | None:
    """Parse money string to cents.

    Args:
        amount_str: String containing amount in major units (e.g. "12.34").

    Returns:
        Money amount in cents, or None if invalid or negative.
    """
    try:
        major = float(amount_str.strip().replace(",", ""))
    except (ValueError, AttributeError):
        return None
    if not math.isfinite(major) or major < 0:
        return None
    return Money(int(round(major * 100)))
