"""
Spending Analyzer

DESIGN DECISION: Analysis is a TOTAL function.
Empty or degenerate input (no transactions, nothing in the window) yields
an all-zero SpendingAnalysis instead of an exception, so the caller never
has to guard a division downstream.

Pipeline:
1. Window      - n months back from the as-of date through its month end
2. Filter      - expense categories only, non-zero amounts
3. Divisor     - distinct calendar months actually present (min 1)
4. Aggregate   - per category totals, averages, shares
5. Classify    - fixed vs variable (presence and coefficient of variation)
6. Score       - savings potential from a fixed decision table
"""

import math
from collections import defaultdict
from datetime import date
from typing import Iterable, Optional

import structlog

from finplan.analysis.tables import (
    DISCRETIONARY,
    LOW_POTENTIAL_FIXED,
    SEMI_ESSENTIAL,
    max_reduction_rate,
    tips_for,
)
from finplan.config import get_settings
from finplan.models.analysis import (
    CategoryReduction,
    CategorySpending,
    Difficulty,
    SavingsPotential,
    SpendingAnalysis,
)
from finplan.models.finance import (
    NON_EXPENSE_CATEGORIES,
    CategoryId,
    Transaction,
    category_name,
)
from finplan.utils.dates import end_of_month, shift_month
from finplan.utils.formatting import format_currency


logger = structlog.get_logger(__name__)

# Fixed-expense classification
FIXED_PRESENCE_RATIO = 0.7
FIXED_MAX_CV = 0.3

# Reductions smaller than this are not worth proposing
MIN_REDUCTION_AMOUNT = 1_000


def analyze_spending(
    transactions: Iterable[Transaction],
    months: Optional[int] = None,
    as_of: Optional[date] = None,
) -> SpendingAnalysis:
    """
    Analyze spending over the last `months` months.

    Args:
        transactions: Any transactions; income and out-of-window rows are ignored
        months: Months to look back (0 = this calendar month only).
                Defaults to the configured lookback. A negative lookback
                selects nothing.
        as_of: Reference date, read once. Defaults to today.

    Returns:
        SpendingAnalysis; all zeros when nothing qualifies.
    """
    if months is None:
        months = get_settings().analyzer.default_lookback_months
    as_of = as_of or date.today()

    period_start = shift_month(as_of, -months)
    period_end = end_of_month(as_of)

    expenses = [
        t for t in transactions
        if t.category_id not in NON_EXPENSE_CATEGORIES
        and t.amount != 0
        and period_start <= t.transaction_date <= period_end
    ]

    if not expenses:
        return SpendingAnalysis(
            analyzed_months=max(months, 0),
            period_start=period_start,
            period_end=period_end,
        )

    by_category: dict[CategoryId, list[Transaction]] = defaultdict(list)
    for t in expenses:
        by_category[t.category_id].append(t)

    # Average over the months that actually have data: one month of
    # history should average to that month's totals, not a third of them.
    effective_months = max(len({t.month_key for t in expenses}), 1)
    window_months = months + 1
    log = logger.warning if effective_months < max(months, 1) else logger.info
    log(
        "effective_months_detected",
        effective_months=effective_months,
        window_months=window_months,
    )

    total_expense = sum(abs(float(t.amount)) for t in expenses)
    avg_monthly_expense = total_expense / effective_months

    categories = []
    fixed_expenses = 0.0
    variable_expenses = 0.0

    for category_id, txns in by_category.items():
        category_total = sum(abs(float(t.amount)) for t in txns)
        percentage = category_total / total_expense * 100
        is_fixed = _is_fixed_expense(txns, effective_months)

        if is_fixed:
            fixed_expenses += category_total
        else:
            variable_expenses += category_total

        categories.append(CategorySpending(
            category_id=category_id,
            category_name=category_name(category_id),
            total_amount=category_total,
            avg_monthly_amount=category_total / effective_months,
            transaction_count=len(txns),
            percentage=percentage,
            is_recurring=is_fixed,
            savings_potential=evaluate_savings_potential(category_id, percentage, is_fixed),
        ))

    categories.sort(key=lambda c: c.total_amount, reverse=True)

    return SpendingAnalysis(
        total_expense=total_expense,
        avg_monthly_expense=avg_monthly_expense,
        categories=categories,
        fixed_expenses=fixed_expenses,
        variable_expenses=variable_expenses,
        analyzed_months=effective_months,
        period_start=period_start,
        period_end=period_end,
    )


def _is_fixed_expense(transactions: list[Transaction], effective_months: int) -> bool:
    """
    A category is a fixed expense when it shows up in at least 70% of the
    analyzed months and its monthly totals barely move (CV <= 0.3).
    """
    if len(transactions) < 2:
        return False

    monthly_totals: dict[str, float] = defaultdict(float)
    for t in transactions:
        monthly_totals[t.month_key] += abs(float(t.amount))

    if len(monthly_totals) < effective_months * FIXED_PRESENCE_RATIO:
        return False

    amounts = list(monthly_totals.values())
    mean = sum(amounts) / len(amounts)
    variance = sum((a - mean) ** 2 for a in amounts) / len(amounts)
    cv = math.sqrt(variance) / mean

    return cv <= FIXED_MAX_CV


def evaluate_savings_potential(
    category_id: CategoryId,
    percentage: float,
    is_fixed: bool,
) -> SavingsPotential:
    """How much room there is to cut a category."""
    if is_fixed:
        if category_id in LOW_POTENTIAL_FIXED:
            return SavingsPotential.LOW
        return SavingsPotential.MEDIUM

    if category_id in DISCRETIONARY:
        if percentage > 20:
            return SavingsPotential.HIGH
        elif percentage > 10:
            return SavingsPotential.MEDIUM

    if category_id in SEMI_ESSENTIAL:
        return SavingsPotential.MEDIUM if percentage > 15 else SavingsPotential.LOW

    return SavingsPotential.LOW


def evaluate_difficulty(
    potential: SavingsPotential,
    reduction_percentage: float,
) -> Difficulty:
    if potential == SavingsPotential.HIGH and reduction_percentage <= 20:
        return Difficulty.EASY

    if potential == SavingsPotential.MEDIUM or (
        potential == SavingsPotential.HIGH and reduction_percentage <= 30
    ):
        return Difficulty.MODERATE

    return Difficulty.HARD


def generate_category_reductions(
    analysis: SpendingAnalysis,
    target_monthly_increase: float,
) -> list[CategoryReduction]:
    """
    Build a per-category plan that frees up `target_monthly_increase` a month.

    Categories are consumed greedily, highest savings potential first
    (larger totals first within a tier). The plan never exceeds the target
    and never proposes a cut under MIN_REDUCTION_AMOUNT. Output order is
    consumption order.
    """
    ordered = sorted(
        analysis.categories,
        key=lambda c: (c.savings_potential.rank, c.total_amount),
        reverse=True,
    )

    reductions = []
    remaining = target_monthly_increase

    for cat in ordered:
        if remaining <= 0:
            break

        rate = max_reduction_rate(cat.category_id, cat.savings_potential)
        if rate == 0:
            continue

        capacity = cat.avg_monthly_amount * rate
        reduction = min(capacity, remaining)
        if reduction < MIN_REDUCTION_AMOUNT:
            continue

        percentage = reduction / cat.avg_monthly_amount * 100

        reductions.append(CategoryReduction(
            category_id=cat.category_id,
            category_name=cat.category_name,
            current_amount=cat.avg_monthly_amount,
            target_amount=cat.avg_monthly_amount - reduction,
            reduction_amount=reduction,
            reduction_percentage=percentage,
            difficulty=evaluate_difficulty(cat.savings_potential, percentage),
            tips=tips_for(cat.category_id, percentage),
        ))

        remaining -= reduction

    return reductions


def generate_analysis_summary(
    analysis: SpendingAnalysis,
    reductions: list[CategoryReduction],
) -> str:
    """
    Plain-text rationale for a reduction plan.

    This is what the scenario card shows under "why these cuts".
    """
    total_reduction = sum(r.reduction_amount for r in reductions)
    share = (
        total_reduction / analysis.avg_monthly_expense * 100
        if analysis.avg_monthly_expense > 0
        else 0.0
    )

    top_categories = ", ".join(
        f"{c.category_name} ({c.percentage:.0f}%)" for c in analysis.categories[:3]
    )

    if analysis.analyzed_months == 1:
        period = "This month"
    else:
        period = f"Over the last {analysis.analyzed_months} months"

    lines = [
        f"{period} you spent {format_currency(analysis.avg_monthly_expense)} a month on average.",
        "",
        f"Your largest categories are {top_categories}.",
        "",
        (
            f"Cutting {len(reductions)} categories frees up "
            f"{format_currency(total_reduction)} a month ({share:.1f}%)."
        ),
    ]

    easy = [r.category_name for r in reductions if r.difficulty == Difficulty.EASY]
    if easy:
        lines.append("")
        lines.append(f"Start with {', '.join(easy)}: those are the easiest wins.")

    return "\n".join(lines)
