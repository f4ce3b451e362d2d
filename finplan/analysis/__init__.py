"""Spending analysis package."""

from finplan.analysis.insights import generate_insights, group_expenses_by_category
from finplan.analysis.spending import (
    MIN_REDUCTION_AMOUNT,
    analyze_spending,
    evaluate_difficulty,
    evaluate_savings_potential,
    generate_analysis_summary,
    generate_category_reductions,
)

__all__ = [
    "MIN_REDUCTION_AMOUNT",
    "analyze_spending",
    "evaluate_difficulty",
    "evaluate_savings_potential",
    "generate_analysis_summary",
    "generate_category_reductions",
    "generate_insights",
    "group_expenses_by_category",
]
