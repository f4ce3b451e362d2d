"""
Projection Engine

Month-by-month future net worth from a starting position, cash flows and
five annual rate assumptions.

DESIGN DECISION: Each run owns its working balances.
The starting breakdown is copied once into a private accumulator; every
emitted MonthlyProjection carries its own copy of the buckets. Two runs
never share state, so scenarios can be evaluated in any order or in
parallel.

Per month (index 0..years*12):
1. Emit      - snapshot of the state before this month's transition
2. Events    - life events dated in this calendar month
3. Growth    - investment, real estate, debt
4. Cash flow - surplus to cash, deficit drains cash -> investment -> debt
5. Drift     - salary grows with income growth; pension and expense with inflation

The final month is emitted but never transitioned.
"""

from datetime import date
from typing import Optional

import structlog

from finplan.models.simulation import (
    AssetsBreakdown,
    LifeEvent,
    LifeEventKind,
    MonthlyProjection,
    SimulationInput,
)
from finplan.utils.dates import same_month, shift_month
from finplan.validation import SimulationInputValidator


logger = structlog.get_logger(__name__)


def monthly_rate(annual_rate: float) -> float:
    """Constant monthly rate that compounds to `annual_rate` over 12 months."""
    return (1 + annual_rate) ** (1 / 12) - 1


def _pay(assets: AssetsBreakdown, amount: float) -> None:
    """Drain cash, then investment; whatever is left becomes debt."""
    if assets.cash >= amount:
        assets.cash -= amount
        return

    remaining = amount - assets.cash
    assets.cash = 0.0

    if assets.investment >= remaining:
        assets.investment -= remaining
        return

    remaining -= assets.investment
    assets.investment = 0.0
    assets.debt += remaining


def _apply_event(assets: AssetsBreakdown, event: LifeEvent) -> None:
    if event.kind == LifeEventKind.ASSET_ACQUISITION:
        assets.real_estate += event.amount
    _pay(assets, event.amount)


def run_simulation(
    simulation_input: SimulationInput,
    as_of: Optional[date] = None,
    validator: Optional[SimulationInputValidator] = None,
) -> list[MonthlyProjection]:
    """
    Project net worth for every month of the horizon.

    Args:
        simulation_input: Starting position, cash flows and assumptions
        as_of: Reference date for month 0 (read once). Defaults to today.
        validator: Boundary checks; defaults to the configured mode.

    Returns:
        years * 12 + 1 projections in month order.

    Raises:
        InvalidSimulationInput: If the input fails validation
    """
    validator = validator or SimulationInputValidator()
    validator.validate_or_raise(simulation_input)

    as_of = as_of or date.today()
    inp = simulation_input

    inflation = monthly_rate(inp.annual_inflation_rate)
    investment_return = monthly_rate(inp.annual_investment_return)
    income_growth = monthly_rate(inp.annual_income_growth)
    debt_interest = monthly_rate(inp.annual_debt_interest)
    real_estate_growth = monthly_rate(inp.annual_real_estate_growth)

    assets = inp.starting_assets
    salary = inp.monthly_income
    pension = inp.monthly_pension
    expense = inp.monthly_expense

    # An explicit savings figure shifts the working-years cash flow by a
    # fixed amount; it never applies to pension months.
    savings_offset = 0.0
    if inp.monthly_savings is not None:
        savings_offset = inp.monthly_savings - (inp.monthly_income - inp.monthly_expense)

    total_months = inp.total_months
    months_to_retirement = inp.months_to_retirement
    projections: list[MonthlyProjection] = []

    for month in range(total_months + 1):
        month_date = shift_month(as_of, month)
        is_retired = month >= months_to_retirement
        is_last = month == total_months

        income = pension if is_retired else salary
        savings = income - expense
        if not is_retired:
            savings += savings_offset

        events = [] if is_last else [
            e for e in inp.life_events if same_month(e.date, month_date)
        ]

        projections.append(MonthlyProjection(
            month=month,
            date=month_date,
            age=inp.current_age + month // 12,
            is_retired=is_retired,
            net_worth=round(assets.net_worth),
            assets=assets.model_copy(),
            monthly_income=round(income),
            monthly_expense=round(expense),
            monthly_savings=round(savings),
            emergency_fund_months=round(assets.cash / expense, 1) if expense > 0 else 0.0,
            events=tuple(e.label for e in events),
        ))

        if is_last:
            break

        for event in events:
            _apply_event(assets, event)

        assets.investment *= 1 + investment_return
        assets.real_estate *= 1 + real_estate_growth
        assets.debt *= 1 + debt_interest

        if savings >= 0:
            assets.cash += savings
        else:
            _pay(assets, -savings)

        salary *= 1 + income_growth
        pension *= 1 + inflation
        expense *= 1 + inflation

    logger.debug(
        "simulation_completed",
        months=len(projections),
        final_net_worth=projections[-1].net_worth,
    )

    return projections
