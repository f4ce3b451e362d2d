"""Shared fixtures."""

from datetime import date
from decimal import Decimal

import pytest

from finplan.config import get_settings
from finplan.models import CategoryId, SimulationInput, Transaction


AS_OF = date(2024, 3, 15)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are cached; reload them around every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def as_of() -> date:
    return AS_OF


@pytest.fixture
def make_transaction():
    def _make(
        category: CategoryId,
        amount: int,
        day: date,
        is_recurring: bool = False,
    ) -> Transaction:
        return Transaction(
            category_id=category,
            amount=Decimal(amount),
            transaction_date=day,
            is_recurring=is_recurring,
        )
    return _make


@pytest.fixture
def zero_rate_input():
    """Rates all zero; override any field by keyword."""
    def _make(**overrides) -> SimulationInput:
        data = dict(
            current_net_worth=10_000_000,
            monthly_income=3_000_000,
            monthly_expense=2_000_000,
            years=1,
            annual_inflation_rate=0,
            annual_investment_return=0,
            annual_income_growth=0,
            annual_debt_interest=0,
            annual_real_estate_growth=0,
        )
        data.update(overrides)
        return SimulationInput(**data)
    return _make
