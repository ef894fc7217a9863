"""
Display formatting for calculated rates and amounts.
"""

import math
from typing import Optional

NOT_AVAILABLE = "N/A"


def format_percentage(value: Optional[float], decimal_places: int = 2) -> str:
    """
    Format a decimal rate as a percentage string.

    Args:
        value: Decimal rate (0.1234 = 12.34%)
        decimal_places: Digits after the decimal point

    Returns:
        e.g. "12.34%", or "N/A" for missing or non-finite values
    """
    if value is None or not math.isfinite(value):
        return NOT_AVAILABLE
    return f"{value * 100:.{decimal_places}f}%"


def format_currency(value: float) -> str:
    """Format an amount with thousands separators and two decimals."""
    sign = "-" if value < 0 else ""
    return f"{sign}{abs(value):,.2f}"
