"""Shared helpers."""

from finplan.utils.dates import end_of_month, same_month, shift_month, start_of_month
from finplan.utils.formatting import (
    abbreviate_number,
    format_currency,
    format_number,
    format_percentage,
)

__all__ = [
    "abbreviate_number",
    "end_of_month",
    "format_currency",
    "format_number",
    "format_percentage",
    "same_month",
    "shift_month",
    "start_of_month",
]
