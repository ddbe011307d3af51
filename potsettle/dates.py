"""Date utilities for potsettle.

Pure functions for settlement period parsing and formatting.
"""

from datetime import date, datetime

from potsettle.domain.models import Month


def parse_month(value: str) -> Month:
    """Validate and normalize a settlement period.

    Args:
        value: Month in YYYY-MM format (e.g. "2025-1" or "2025-01").

    Returns:
        Month normalized to YYYY-MM.

    Raises:
        ValueError: If the value is not a valid year and month.
    """
    dt = datetime.strptime(value.strip(), "%Y-%m")
    return Month(dt.strftime("%Y-%m"))


def month_label(month: Month) -> str:
    """Human-readable month (e.g., "January 2025")."""
    return datetime.strptime(month, "%Y-%m").strftime("%B %Y")


def current_month(today: date | None = None) -> Month:
    """Month containing today (or the given date)."""
    today = today or date.today()
    return Month(today.strftime("%Y-%m"))
