"""
Display Formatting

Small helpers for the text the planner produces (scenario descriptions,
analysis summaries). Amounts are whole currency units.
"""

from typing import Optional

from finplan.config import get_settings


def format_number(value: float) -> str:
    """Thousands separators, no decimals."""
    return f"{round(value):,}"


def format_currency(
    value: float,
    show_sign: bool = False,
    symbol: Optional[str] = None,
) -> str:
    """
    Format an amount with the configured currency symbol.

    show_sign adds an explicit '+' for positive values.
    """
    symbol = symbol if symbol is not None else get_settings().app.currency_symbol
    formatted = format_number(abs(value))

    if show_sign and round(value) != 0:
        sign = "+" if value > 0 else "-"
        return f"{sign}{symbol}{formatted}"

    sign = "-" if round(value) < 0 else ""
    return f"{sign}{symbol}{formatted}"


def format_percentage(value: float, decimals: int = 1) -> str:
    return f"{value:.{decimals}f}%"


def abbreviate_number(value: float) -> str:
    """Abbreviate large numbers (e.g., 1_500_000 -> '1.5M')."""
    abs_value = abs(value)
    sign = "-" if value < 0 else ""

    if abs_value >= 1_000_000_000:
        return f"{sign}{abs_value / 1_000_000_000:.1f}B"
    elif abs_value >= 1_000_000:
        return f"{sign}{abs_value / 1_000_000:.1f}M"
    elif abs_value >= 1_000:
        return f"{sign}{abs_value / 1_000:.1f}K"

    return format_number(value)
