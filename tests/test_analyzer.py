"""Tests for the spending analyzer and reduction plans."""

import pytest
from datetime import date

from finplan.analysis import (
    MIN_REDUCTION_AMOUNT,
    analyze_spending,
    evaluate_difficulty,
    evaluate_savings_potential,
    generate_analysis_summary,
    generate_category_reductions,
)
from finplan.models import (
    CategoryId,
    CategorySpending,
    Difficulty,
    SavingsPotential,
    SpendingAnalysis,
)


def category(
    category_id: CategoryId,
    avg: float,
    potential: SavingsPotential,
    months: int = 1,
) -> CategorySpending:
    return CategorySpending(
        category_id=category_id,
        category_name=category_id.value.title(),
        total_amount=avg * months,
        avg_monthly_amount=avg,
        transaction_count=months,
        percentage=10.0,
        is_recurring=False,
        savings_potential=potential,
    )


def analysis_of(*categories: CategorySpending, months: int = 1) -> SpendingAnalysis:
    total = sum(c.total_amount for c in categories)
    return SpendingAnalysis(
        total_expense=total,
        avg_monthly_expense=total / months,
        categories=list(categories),
        analyzed_months=months,
        period_start=date(2024, 1, 1),
        period_end=date(2024, 3, 31),
    )


class TestAnalyzeSpending:
    """Tests for analyze_spending."""

    def test_empty_input_is_all_zero(self, as_of):
        """Test an empty transaction list yields zero totals."""
        analysis = analyze_spending([], months=3, as_of=as_of)
        assert analysis.total_expense == 0
        assert analysis.avg_monthly_expense == 0
        assert analysis.categories == []
        assert analysis.analyzed_months == 3

    def test_negative_lookback_is_empty(self, as_of, make_transaction):
        """Test a negative lookback selects no transactions."""
        analysis = analyze_spending(
            [make_transaction(CategoryId.FOOD, -10_000, date(2024, 3, 1))],
            months=-1,
            as_of=as_of,
        )
        assert analysis.categories == []
        assert analysis.total_expense == 0
        assert analysis.analyzed_months == 0

    def test_window_bounds(self, as_of):
        """Test the analysis window spans whole calendar months."""
        analysis = analyze_spending([], months=3, as_of=as_of)
        assert analysis.period_start == date(2023, 12, 1)
        assert analysis.period_end == date(2024, 3, 31)

    def test_non_expense_categories_are_ignored(self, as_of, make_transaction):
        """Test income and savings categories are left out."""
        transactions = [
            make_transaction(CategoryId.SALARY, 3_000_000, date(2024, 3, 1)),
            make_transaction(CategoryId.SAVINGS, -500_000, date(2024, 3, 2)),
            make_transaction(CategoryId.INVESTMENT, -300_000, date(2024, 3, 3)),
        ]
        analysis = analyze_spending(transactions, months=3, as_of=as_of)
        assert analysis.categories == []
        assert analysis.total_expense == 0

    def test_out_of_window_and_zero_amounts_are_ignored(self, as_of, make_transaction):
        """Test transactions outside the window or with zero amount are dropped."""
        transactions = [
            make_transaction(CategoryId.FOOD, -10_000, date(2023, 11, 30)),
            make_transaction(CategoryId.FOOD, -20_000, date(2024, 4, 1)),
            make_transaction(CategoryId.FOOD, 0, date(2024, 3, 1)),
            make_transaction(CategoryId.FOOD, -30_000, date(2023, 12, 1)),
        ]
        analysis = analyze_spending(transactions, months=3, as_of=as_of)
        assert analysis.total_expense == 30_000
        assert analysis.categories[0].transaction_count == 1

    def test_averages_over_months_with_data(self, as_of, make_transaction):
        """Test averages divide by months that have expenses."""
        transactions = [
            make_transaction(CategoryId.FOOD, -100_000, date(2024, 3, 1)),
            make_transaction(CategoryId.FOOD, -50_000, date(2024, 3, 10)),
        ]
        analysis = analyze_spending(transactions, months=3, as_of=as_of)
        assert analysis.analyzed_months == 1
        assert analysis.avg_monthly_expense == 150_000
        assert analysis.categories[0].avg_monthly_amount == 150_000

    def test_refunds_count_as_magnitudes(self, as_of, make_transaction):
        """Test refunds add to spending as magnitudes."""
        transactions = [
            make_transaction(CategoryId.SHOPPING, -100_000, date(2024, 3, 1)),
            make_transaction(CategoryId.SHOPPING, 20_000, date(2024, 3, 2)),
        ]
        analysis = analyze_spending(transactions, months=0, as_of=as_of)
        assert analysis.total_expense == 120_000

    def test_categories_sorted_by_total(self, as_of, make_transaction):
        """Test categories are ordered by total amount."""
        transactions = [
            make_transaction(CategoryId.FOOD, -100_000, date(2024, 3, 1)),
            make_transaction(CategoryId.HOUSING, -800_000, date(2024, 3, 1)),
            make_transaction(CategoryId.SHOPPING, -300_000, date(2024, 3, 1)),
        ]
        analysis = analyze_spending(transactions, months=3, as_of=as_of)
        assert [c.category_id for c in analysis.categories] == [
            CategoryId.HOUSING,
            CategoryId.SHOPPING,
            CategoryId.FOOD,
        ]
        assert sum(c.percentage for c in analysis.categories) == pytest.approx(100)

    def test_steady_monthly_rent_is_fixed(self, as_of, make_transaction):
        """Test that identical monthly rent is classified as fixed."""
        transactions = [
            make_transaction(CategoryId.HOUSING, -500_000, date(2024, month, 5))
            for month in (1, 2, 3)
        ]
        analysis = analyze_spending(transactions, months=3, as_of=as_of)
        housing = analysis.get_category(CategoryId.HOUSING)
        assert housing.is_recurring
        assert housing.savings_potential == SavingsPotential.LOW
        assert analysis.fixed_expenses == 1_500_000
        assert analysis.variable_expenses == 0

    def test_erratic_spending_is_variable(self, as_of, make_transaction):
        """Test that uneven spending is classified as variable."""
        transactions = [
            make_transaction(CategoryId.FOOD, -100_000, date(2024, 1, 5)),
            make_transaction(CategoryId.FOOD, -300_000, date(2024, 2, 5)),
            make_transaction(CategoryId.FOOD, -50_000, date(2024, 3, 5)),
        ]
        analysis = analyze_spending(transactions, months=3, as_of=as_of)
        food = analysis.get_category(CategoryId.FOOD)
        assert not food.is_recurring
        assert food.savings_potential == SavingsPotential.HIGH

    def test_single_transaction_is_never_fixed(self, as_of, make_transaction):
        """Test a lone transaction is never treated as fixed."""
        analysis = analyze_spending(
            [make_transaction(CategoryId.UTILITIES, -80_000, date(2024, 3, 1))],
            months=3,
            as_of=as_of,
        )
        assert not analysis.categories[0].is_recurring

    def test_sparse_category_is_variable(self, as_of, make_transaction):
        """Test a category seen in few months stays variable."""
        # Utilities in 1 of 3 months, despite identical amounts
        transactions = [
            make_transaction(CategoryId.UTILITIES, -80_000, date(2024, 3, 1)),
            make_transaction(CategoryId.UTILITIES, -80_000, date(2024, 3, 20)),
            make_transaction(CategoryId.FOOD, -10_000, date(2024, 1, 1)),
            make_transaction(CategoryId.FOOD, -10_000, date(2024, 2, 1)),
        ]
        analysis = analyze_spending(transactions, months=3, as_of=as_of)
        assert analysis.analyzed_months == 3
        assert not analysis.get_category(CategoryId.UTILITIES).is_recurring


class TestSavingsPotential:
    """Tests for the savings-potential decision table."""

    @pytest.mark.parametrize("category_id, share, is_fixed, expected", [
        (CategoryId.HOUSING, 50, True, SavingsPotential.LOW),
        (CategoryId.UTILITIES, 5, True, SavingsPotential.LOW),
        (CategoryId.FOOD, 5, True, SavingsPotential.MEDIUM),
        (CategoryId.FOOD, 25, False, SavingsPotential.HIGH),
        (CategoryId.SHOPPING, 15, False, SavingsPotential.MEDIUM),
        (CategoryId.ENTERTAINMENT, 5, False, SavingsPotential.LOW),
        (CategoryId.TRANSPORT, 20, False, SavingsPotential.MEDIUM),
        (CategoryId.HEALTH, 10, False, SavingsPotential.LOW),
        (CategoryId.OTHER, 90, False, SavingsPotential.LOW),
    ])
    def test_decision_table(self, category_id, share, is_fixed, expected):
        """Test the savings-potential decision table."""
        assert evaluate_savings_potential(category_id, share, is_fixed) == expected

    @pytest.mark.parametrize("potential, pct, expected", [
        (SavingsPotential.HIGH, 20, Difficulty.EASY),
        (SavingsPotential.HIGH, 30, Difficulty.MODERATE),
        (SavingsPotential.HIGH, 40, Difficulty.HARD),
        (SavingsPotential.MEDIUM, 50, Difficulty.MODERATE),
        (SavingsPotential.LOW, 5, Difficulty.HARD),
    ])
    def test_difficulty(self, potential, pct, expected):
        """Test difficulty grading from potential and cut size."""
        assert evaluate_difficulty(potential, pct) == expected


class TestCategoryReductions:
    """Tests for generate_category_reductions."""

    def test_greedy_by_potential(self):
        """Test reductions are taken from the highest potential first."""
        analysis = analysis_of(
            category(CategoryId.HOUSING, 1_000_000, SavingsPotential.LOW),
            category(CategoryId.FOOD, 300_000, SavingsPotential.MEDIUM),
            category(CategoryId.SHOPPING, 500_000, SavingsPotential.HIGH),
        )
        reductions = generate_category_reductions(analysis, 220_000)

        assert [r.category_id for r in reductions] == [CategoryId.SHOPPING, CategoryId.FOOD]
        shopping, food = reductions
        assert shopping.reduction_amount == pytest.approx(200_000)
        assert shopping.reduction_percentage == pytest.approx(40)
        assert shopping.difficulty == Difficulty.HARD
        assert len(shopping.tips) == 4
        assert food.reduction_amount == pytest.approx(20_000)
        assert food.target_amount == pytest.approx(280_000)
        assert food.difficulty == Difficulty.MODERATE
        assert len(food.tips) == 2

    def test_ties_broken_by_total(self):
        """Test equal potential is ordered by category total."""
        analysis = analysis_of(
            category(CategoryId.FOOD, 100_000, SavingsPotential.HIGH),
            category(CategoryId.ENTERTAINMENT, 400_000, SavingsPotential.HIGH),
        )
        reductions = generate_category_reductions(analysis, 10_000)
        assert [r.category_id for r in reductions] == [CategoryId.ENTERTAINMENT]

    def test_never_exceeds_target(self):
        """Test the plan never overshoots the target."""
        analysis = analysis_of(
            category(CategoryId.SHOPPING, 500_000, SavingsPotential.HIGH),
            category(CategoryId.FOOD, 300_000, SavingsPotential.MEDIUM),
        )
        reductions = generate_category_reductions(analysis, 200_500)
        # 500 left after shopping is below the minimum
        assert len(reductions) == 1
        assert sum(r.reduction_amount for r in reductions) <= 200_500
        assert all(r.reduction_amount >= MIN_REDUCTION_AMOUNT for r in reductions)

    def test_zero_rate_categories_are_skipped(self):
        """Test categories with no reduction rate are skipped."""
        analysis = analysis_of(category(CategoryId.HOUSING, 2_000_000, SavingsPotential.LOW))
        assert generate_category_reductions(analysis, 100_000) == []

    def test_tiny_categories_are_skipped(self):
        """Test categories below the minimum reduction are skipped."""
        analysis = analysis_of(category(CategoryId.FOOD, 3_000, SavingsPotential.HIGH))
        assert generate_category_reductions(analysis, 100_000) == []

    def test_zero_target(self):
        """Test a zero target yields no reductions."""
        analysis = analysis_of(category(CategoryId.SHOPPING, 500_000, SavingsPotential.HIGH))
        assert generate_category_reductions(analysis, 0) == []

    def test_empty_analysis(self):
        """Test an analysis with no categories yields no reductions."""
        assert generate_category_reductions(analysis_of(), 100_000) == []


class TestAnalysisSummary:
    """Tests for the reduction-plan rationale text."""

    def test_multi_month_summary(self):
        """Test the summary text over several months."""
        analysis = analysis_of(
            category(CategoryId.SHOPPING, 500_000, SavingsPotential.HIGH, months=3),
            months=3,
        )
        reductions = generate_category_reductions(analysis, 90_000)
        summary = generate_analysis_summary(analysis, reductions)

        assert "Over the last 3 months" in summary
        assert "Shopping" in summary
        assert "Start with Shopping" in summary

    def test_single_month_summary(self):
        """Test the summary text for a single month."""
        analysis = analysis_of(category(CategoryId.FOOD, 300_000, SavingsPotential.MEDIUM))
        summary = generate_analysis_summary(analysis, [])
        assert summary.startswith("This month")
        assert "Start with" not in summary
