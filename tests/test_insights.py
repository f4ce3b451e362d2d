"""Tests for month-over-month spending insights."""

from datetime import date

from finplan.analysis import generate_insights, group_expenses_by_category
from finplan.models import CategoryId, InsightType


MARCH = date(2024, 3, 5)
FEBRUARY = date(2024, 2, 5)


class TestGroupExpenses:
    """Tests for group_expenses_by_category."""

    def test_groups_negative_amounts_only(self, make_transaction):
        """Test expenses are grouped by category and income is skipped."""
        totals = group_expenses_by_category([
            make_transaction(CategoryId.FOOD, -30_000, MARCH),
            make_transaction(CategoryId.FOOD, -10_000, MARCH),
            make_transaction(CategoryId.SHOPPING, -60_000, MARCH),
            make_transaction(CategoryId.SALARY, 3_000_000, MARCH),
        ])
        assert [t.category_id for t in totals] == [CategoryId.SHOPPING, CategoryId.FOOD]
        assert totals[1].amount == 40_000
        assert totals[1].transaction_count == 2
        assert totals[0].percentage == 60

    def test_empty(self):
        """Test no transactions gives no totals."""
        assert group_expenses_by_category([]) == []


class TestGenerateInsights:
    """Tests for generate_insights."""

    def test_no_transactions_suggests_logging(self):
        """Test an empty history suggests logging transactions."""
        insights = generate_insights([], [], monthly_income=0)
        assert len(insights) == 1
        assert insights[0].type == InsightType.TIP
        assert insights[0].priority == 10

    def test_spending_up(self, make_transaction):
        """Test a spending increase insight."""
        insights = generate_insights(
            [make_transaction(CategoryId.FOOD, -130_000, MARCH)],
            [make_transaction(CategoryId.FOOD, -100_000, FEBRUARY)],
            monthly_income=0,
        )
        titles = [i.title for i in insights]
        assert "Spending is up" in titles

    def test_spending_down(self, make_transaction):
        """Test a spending decrease insight."""
        insights = generate_insights(
            [make_transaction(CategoryId.FOOD, -80_000, MARCH)],
            [make_transaction(CategoryId.FOOD, -100_000, FEBRUARY)],
            monthly_income=0,
        )
        assert insights[-1].type == InsightType.INFO
        assert any(i.type == InsightType.ACHIEVEMENT for i in insights)

    def test_low_savings_rate_is_top_priority(self, make_transaction):
        """Test a low savings rate is the top insight."""
        insights = generate_insights(
            [make_transaction(CategoryId.HOUSING, -950_000, MARCH)],
            [],
            monthly_income=1_000_000,
        )
        assert insights[0].title == "Low savings rate"
        assert insights[0].priority == 9

    def test_high_savings_rate(self, make_transaction):
        """Test a high savings rate insight."""
        insights = generate_insights(
            [make_transaction(CategoryId.FOOD, -100_000, MARCH)],
            [],
            monthly_income=1_000_000,
        )
        assert any(i.title == "Great savings rate" for i in insights)

    def test_category_spike(self, make_transaction):
        """Test a category spike insight."""
        insights = generate_insights(
            [
                make_transaction(CategoryId.SHOPPING, -300_000, MARCH),
                make_transaction(CategoryId.FOOD, -300_000, MARCH),
            ],
            [
                make_transaction(CategoryId.SHOPPING, -150_000, FEBRUARY),
                make_transaction(CategoryId.FOOD, -290_000, FEBRUARY),
            ],
            monthly_income=0,
        )
        tips = [i for i in insights if i.type == InsightType.TIP]
        assert [t.title for t in tips] == ["Shopping spending is up"]

    def test_small_spike_is_ignored(self, make_transaction):
        """Test that a small increase is not a spike."""
        insights = generate_insights(
            [make_transaction(CategoryId.FOOD, -90_000, MARCH)],
            [make_transaction(CategoryId.FOOD, -30_000, FEBRUARY)],
            monthly_income=0,
        )
        assert not any(i.type == InsightType.TIP for i in insights)

    def test_recurring_expenses(self, make_transaction):
        """Test the recurring expenses insight."""
        insights = generate_insights(
            [make_transaction(CategoryId.HOUSING, -500_000, MARCH, is_recurring=True)],
            [],
            monthly_income=0,
        )
        assert any(i.title == "Recurring expenses" for i in insights)

    def test_sorted_by_priority(self, make_transaction):
        """Test insights are sorted by priority."""
        insights = generate_insights(
            [make_transaction(CategoryId.HOUSING, -950_000, MARCH, is_recurring=True)],
            [make_transaction(CategoryId.HOUSING, -500_000, FEBRUARY)],
            monthly_income=1_000_000,
        )
        priorities = [i.priority for i in insights]
        assert priorities == sorted(priorities, reverse=True)
        assert len({i.id for i in insights}) == len(insights)
