"""
Tests for the Net-Worth Planner

Test strategy:
1. Unit tests for individual components (models, analyzer, engine)
2. Integration tests for flows (with in-memory or mocked storage)
3. No real API calls in tests
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from finplan.analysis.tables import MAX_REDUCTION_RATES, SAVINGS_TIPS
from finplan.models import (
    ALL_CATEGORIES,
    NON_EXPENSE_CATEGORIES,
    AllCashPosition,
    Asset,
    AssetsBreakdown,
    AssetType,
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    BreakdownPosition,
    CategoryId,
    Goal,
    LifeEvent,
    LifeEventKind,
    SimulationInput,
    Transaction,
    ValidationIssue,
    ValidationResult,
    category_name,
    get_category_by_id,
)
from finplan.simulation import ECONOMIC_SCENARIOS


class TestCategories:
    """Tests for the category catalogue and behaviour tables."""

    def test_every_category_has_metadata(self):
        """Test every category has display metadata."""
        assert {c.id for c in ALL_CATEGORIES} == set(CategoryId)

    def test_behaviour_tables_are_exhaustive(self):
        """Test behaviour tables cover every expense category."""
        assert set(MAX_REDUCTION_RATES) == set(CategoryId)
        assert set(SAVINGS_TIPS) == set(CategoryId)

    def test_non_expense_categories(self):
        """Test the non-expense category set."""
        assert NON_EXPENSE_CATEGORIES == {
            CategoryId.SAVINGS,
            CategoryId.INVESTMENT,
            CategoryId.SALARY,
            CategoryId.INVESTMENT_INCOME,
            CategoryId.OTHER_INCOME,
        }

    def test_lookup_unknown_category(self):
        """Test looking up an unknown category."""
        assert get_category_by_id("crypto") is None
        assert category_name("crypto") == "Other"
        assert category_name("food") == "Food"


class TestRecordModels:
    """Tests for transactions, assets and goals."""

    def test_transaction_month_key(self):
        """Test Transaction month key."""
        txn = Transaction(
            category_id=CategoryId.FOOD,
            amount=Decimal("-12000"),
            transaction_date=date(2024, 2, 29),
        )
        assert txn.month_key == "2024-02"
        assert txn.is_expense

    def test_transaction_rejects_bad_recurring_day(self):
        """Test recurring day must be a valid day of month."""
        with pytest.raises(ValidationError):
            Transaction(
                category_id=CategoryId.HOUSING,
                amount=Decimal("-500000"),
                transaction_date=date(2024, 1, 1),
                recurring_day=32,
            )

    def test_unknown_asset_type_is_other(self):
        """Test an unknown asset type falls back to other."""
        asset = Asset(type="car", name="Car", amount=Decimal("20000000"))
        assert asset.type == AssetType.OTHER

    def test_asset_rejects_negative_amount(self):
        """Test negative asset amounts are rejected."""
        with pytest.raises(ValidationError):
            Asset(type="savings", name="Deposit", amount=Decimal("-1"))

    def test_goal_remaining_amount(self):
        """Test Goal remaining amount."""
        goal = Goal(
            name="Trip",
            target_amount=Decimal("3000000"),
            current_amount=Decimal("1000000"),
        )
        assert goal.remaining_amount == Decimal("2000000")


class TestSimulationModels:
    """Tests for the projection input/output models."""

    def test_net_worth(self):
        """Test AssetsBreakdown net worth."""
        assets = AssetsBreakdown(cash=100, investment=200, real_estate=300, debt=50)
        assert assets.net_worth == 550
        assert assets.liquid_net_worth == 250

    def test_buckets_reject_negative(self):
        """Test that buckets reject negative values."""
        with pytest.raises(ValidationError):
            AssetsBreakdown(cash=-1)

    def test_all_cash_position(self):
        """Test AllCashPosition conversion."""
        assert AllCashPosition(amount=5_000).to_breakdown() == AssetsBreakdown(cash=5_000)

    def test_negative_all_cash_position_is_debt(self):
        """Test a negative all-cash position becomes debt."""
        assert AllCashPosition(amount=-5_000).to_breakdown() == AssetsBreakdown(debt=5_000)

    def test_legacy_net_worth_becomes_all_cash(self):
        """Test legacy current_net_worth becomes an all-cash position."""
        inp = SimulationInput(
            current_net_worth=10_000_000,
            monthly_income=1,
            monthly_expense=1,
            years=1,
        )
        assert isinstance(inp.position, AllCashPosition)
        assert inp.starting_assets == AssetsBreakdown(cash=10_000_000)

    def test_legacy_breakdown_wins_over_net_worth(self):
        """Test legacy assets_breakdown takes precedence."""
        inp = SimulationInput(
            current_net_worth=999,
            assets_breakdown={"cash": 1, "investment": 2, "real_estate": 3, "debt": 4},
            monthly_income=1,
            monthly_expense=1,
            years=1,
        )
        assert isinstance(inp.position, BreakdownPosition)
        assert inp.current_net_worth == 2

    def test_starting_assets_is_a_copy(self):
        """Test starting_assets returns a fresh copy."""
        breakdown = AssetsBreakdown(cash=100)
        inp = SimulationInput(
            position=BreakdownPosition(breakdown=breakdown),
            monthly_income=1,
            monthly_expense=1,
            years=1,
        )
        working = inp.starting_assets
        working.cash = 0
        assert inp.starting_assets.cash == 100

    def test_defaults(self):
        """Test SimulationInput defaults."""
        inp = SimulationInput(current_net_worth=0, monthly_income=1, monthly_expense=1, years=1)
        assert inp.annual_inflation_rate == 0.02
        assert inp.annual_investment_return == 0.04
        assert inp.annual_income_growth == 0.03
        assert inp.annual_debt_interest == 0.05
        assert inp.annual_real_estate_growth == 0.03
        assert (inp.current_age, inp.retirement_age) == (35, 65)
        assert inp.monthly_pension == 0
        assert inp.months_to_retirement == 360

    def test_life_event_label(self):
        """Test LifeEvent label."""
        house = LifeEvent(
            date=date(2025, 1, 1),
            amount=1,
            name="Apartment",
            kind=LifeEventKind.ASSET_ACQUISITION,
        )
        trip = LifeEvent(date=date(2025, 1, 1), amount=1, name="Trip")
        assert house.label == "Apartment (asset acquisition)"
        assert trip.label == "Trip (expense)"

    def test_economic_scenario_sets_rates_as_fractions(self):
        """Test EconomicScenario converts percents to fractions."""
        inp = SimulationInput(current_net_worth=0, monthly_income=1, monthly_expense=1, years=1)
        bear = ECONOMIC_SCENARIOS["bear"].apply_to(inp)
        assert bear.annual_inflation_rate == pytest.approx(0.05)
        assert bear.annual_investment_return == pytest.approx(-0.02)
        assert bear.annual_real_estate_growth == pytest.approx(-0.01)
        # Original untouched
        assert inp.annual_inflation_rate == 0.02


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_to_log_dict(self):
        """Test AuditEvent conversion to log dictionary."""
        correlation_id = uuid4()
        event = AuditEventBuilder.spending_analyzed(3, 1_234_567.8, 4, correlation_id)
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "spending_analyzed"
        assert log_dict["correlation_id"] == str(correlation_id)
        assert log_dict["details"]["total_expense"] == 1_234_568

    def test_audit_event_to_sheets_row(self):
        """Test AuditEvent conversion to sheets row."""
        event = AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description="boom",
        )
        row = event.to_sheets_row()
        assert len(row) == 11
        assert row[2] == "system_error"
        assert row[10] == "False"

    def test_empty_reduction_plan_is_a_warning(self):
        """Test an empty reduction plan is logged as a warning."""
        event = AuditEventBuilder.reduction_plan_generated(400_000, 0, [])
        assert event.event_type == AuditEventType.REDUCTION_PLAN_EMPTY
        assert event.severity == AuditSeverity.WARNING

    def test_reduction_plan_generated(self):
        """Test AuditEventBuilder.reduction_plan_generated."""
        event = AuditEventBuilder.reduction_plan_generated(400_000, 350_000, ["shopping"])
        assert event.event_type == AuditEventType.REDUCTION_PLAN_GENERATED
        assert event.details["categories"] == ["shopping"]


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_errors_and_warnings(self):
        """Test ValidationResult errors and warnings."""
        result = ValidationResult(
            strict=False,
            is_valid=False,
            issues=[
                ValidationIssue(field="years", issue_type="out_of_range", message="x", severity="error"),
                ValidationIssue(field="monthly_income", issue_type="negative", message="y", severity="warning"),
            ],
        )
        assert [i.field for i in result.errors] == ["years"]
        assert [i.field for i in result.warnings] == ["monthly_income"]

    def test_severity_must_be_known(self):
        """Test severity must be a known value."""
        with pytest.raises(ValidationError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")
