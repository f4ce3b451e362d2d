"""
Planning Inputs

Reduces stored records (this month's transactions, the asset list) to the
figures the projection starts from.
"""

from typing import Iterable

from pydantic import BaseModel

from finplan.models.finance import Asset, AssetType, Transaction
from finplan.models.simulation import AssetsBreakdown


class MonthSummary(BaseModel):
    """Income and expense totals of a set of transactions."""

    income: float = 0.0
    expense: float = 0.0
    transaction_count: int = 0

    @property
    def balance(self) -> float:
        return self.income - self.expense


def summarize_month(transactions: Iterable[Transaction]) -> MonthSummary:
    """Sum positive amounts as income and negative ones as expense."""
    income = 0.0
    expense = 0.0
    count = 0

    for t in transactions:
        count += 1
        if t.amount >= 0:
            income += float(t.amount)
        else:
            expense += abs(float(t.amount))

    return MonthSummary(income=income, expense=expense, transaction_count=count)


def assets_to_breakdown(
    assets: Iterable[Asset],
    current_balance: float = 0.0,
) -> AssetsBreakdown:
    """
    Sort assets into the four buckets.

    Savings and uncategorised assets count as cash. The current month's
    balance is added to cash; a shortfall beyond the cash on hand is
    carried as debt so no bucket goes negative.
    """
    cash = 0.0
    investment = 0.0
    real_estate = 0.0
    debt = 0.0

    for asset in assets:
        amount = float(asset.amount)
        if asset.type == AssetType.INVESTMENT:
            investment += amount
        elif asset.type == AssetType.REAL_ESTATE:
            real_estate += amount
        elif asset.type == AssetType.DEBT:
            debt += amount
        else:
            cash += amount

    cash += current_balance
    if cash < 0:
        debt += -cash
        cash = 0.0

    return AssetsBreakdown(
        cash=cash,
        investment=investment,
        real_estate=real_estate,
        debt=debt,
    )
