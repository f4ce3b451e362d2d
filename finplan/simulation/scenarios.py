"""
Scenario Orchestrator

Runs the engine once per scenario and compares each run to the baseline.

DESIGN DECISION: Adjustments compose in a fixed order.
    income  = income  x income_multiplier
    expense = expense x expense_multiplier + monthly_expense_change
    savings = (income - expense) x savings_multiplier + monthly_savings_change

A savings multiplier or change therefore yields an explicit savings figure
that no longer equals income - expense. Zero or missing multipliers and
changes mean "leave unchanged".
"""

from datetime import date
from typing import Optional, Sequence

import structlog

from finplan.models.analysis import CategoryReduction, SpendingAnalysis
from finplan.models.simulation import (
    EconomicParams,
    EconomicScenario,
    MonthlyProjection,
    ScenarioAdjustment,
    ScenarioResult,
    SimulationInput,
    SimulationResult,
)
from finplan.simulation.engine import run_simulation
from finplan.utils.formatting import format_currency
from finplan.validation import SimulationInputValidator


logger = structlog.get_logger(__name__)


BASELINE_ADJUSTMENT = ScenarioAdjustment(
    id="baseline",
    name="Current habits",
    description="No change",
)

AGGRESSIVE_SAVING_ID = "aggressive-saving-custom"


DEFAULT_SCENARIOS: list[ScenarioAdjustment] = [
    ScenarioAdjustment(
        id="aggressive-saving",
        name="Aggressive saving",
        description="Spend 20% less",
        expense_multiplier=0.8,
    ),
]


ECONOMIC_SCENARIOS: dict[str, EconomicScenario] = {
    "neutral": EconomicScenario(
        id="neutral",
        name="Current trend",
        description="Average economic indicators of the last three years.",
        params=EconomicParams(
            inflation_rate=2.5,
            investment_return=4.0,
            income_growth=3.0,
            debt_interest=5.0,
            real_estate_growth=3.0,
        ),
    ),
    "bull": EconomicScenario(
        id="bull",
        name="Boom",
        description="The economy grows and asset prices rise quickly.",
        params=EconomicParams(
            inflation_rate=2.0,
            investment_return=8.0,
            income_growth=5.0,
            debt_interest=4.0,
            real_estate_growth=5.0,
        ),
    ),
    "bear": EconomicScenario(
        id="bear",
        name="Crisis",
        description="High inflation and recession at the same time.",
        params=EconomicParams(
            inflation_rate=5.0,
            investment_return=-2.0,
            income_growth=1.0,
            debt_interest=7.0,
            real_estate_growth=-1.0,
        ),
    ),
}


def apply_adjustment(
    simulation_input: SimulationInput,
    adjustment: ScenarioAdjustment,
) -> SimulationInput:
    """Return a copy of the input with the adjustment applied."""
    income = simulation_input.monthly_income
    expense = simulation_input.monthly_expense

    if adjustment.income_multiplier:
        income *= adjustment.income_multiplier

    if adjustment.expense_multiplier:
        expense *= adjustment.expense_multiplier

    if adjustment.monthly_expense_change:
        expense += adjustment.monthly_expense_change

    savings = income - expense

    if adjustment.savings_multiplier:
        savings *= adjustment.savings_multiplier

    if adjustment.monthly_savings_change:
        savings += adjustment.monthly_savings_change

    return simulation_input.model_copy(update={
        "monthly_income": income,
        "monthly_expense": expense,
        "monthly_savings": savings,
    })


def find_goal_achievement_date(
    projections: Sequence[MonthlyProjection],
    target_net_worth: float,
) -> Optional[date]:
    """First month whose net worth reaches the target, if any."""
    for projection in projections:
        if projection.net_worth >= target_net_worth:
            return projection.date
    return None


def _to_result(
    adjustment: ScenarioAdjustment,
    projections: list[MonthlyProjection],
    target_net_worth: Optional[float] = None,
) -> ScenarioResult:
    final = projections[-1]
    return ScenarioResult(
        id=adjustment.id,
        name=adjustment.name,
        description=adjustment.description,
        adjustment=adjustment,
        final_net_worth=final.net_worth,
        net_worth_change=0,
        goal_achievement_date=(
            find_goal_achievement_date(projections, target_net_worth)
            if target_net_worth is not None
            else None
        ),
        emergency_fund_months=final.emergency_fund_months,
        projections=projections,
    )


def run_scenario_simulation(
    simulation_input: SimulationInput,
    adjustment: ScenarioAdjustment,
    as_of: Optional[date] = None,
    target_net_worth: Optional[float] = None,
    validator: Optional[SimulationInputValidator] = None,
) -> ScenarioResult:
    """
    Run one adjusted projection.

    net_worth_change is left at 0; run_full_simulation fills it in.
    """
    adjusted = apply_adjustment(simulation_input, adjustment)
    projections = run_simulation(adjusted, as_of=as_of, validator=validator)
    return _to_result(adjustment, projections, target_net_worth)


def run_full_simulation(
    simulation_input: SimulationInput,
    adjustments: Sequence[ScenarioAdjustment],
    as_of: Optional[date] = None,
    target_net_worth: Optional[float] = None,
    validator: Optional[SimulationInputValidator] = None,
) -> SimulationResult:
    """
    Run the baseline and every scenario against the same as-of date.

    Args:
        simulation_input: Baseline input
        adjustments: Scenarios to compare against the baseline
        as_of: Reference date shared by all runs. Defaults to today.
        target_net_worth: If given, each result gets the first month reaching it
        validator: Boundary checks shared by all runs

    Returns:
        SimulationResult with net_worth_change relative to the baseline
    """
    as_of = as_of or date.today()
    validator = validator or SimulationInputValidator()

    baseline_projections = run_simulation(simulation_input, as_of=as_of, validator=validator)
    baseline = _to_result(BASELINE_ADJUSTMENT, baseline_projections, target_net_worth)
    baseline = baseline.model_copy(update={
        "name": "Current habits",
        "description": "If your current spending continues",
    })

    scenarios = []
    for adjustment in adjustments:
        result = run_scenario_simulation(
            simulation_input,
            adjustment,
            as_of=as_of,
            target_net_worth=target_net_worth,
            validator=validator,
        )
        result.net_worth_change = result.final_net_worth - baseline.final_net_worth
        scenarios.append(result)

    logger.info(
        "full_simulation_completed",
        years=simulation_input.years,
        baseline_final_net_worth=baseline.final_net_worth,
        scenario_count=len(scenarios),
    )

    return SimulationResult(
        input=simulation_input,
        baseline=baseline,
        scenarios=scenarios,
    )


def generate_aggressive_saving_scenario(
    analysis: SpendingAnalysis,
    reductions: list[CategoryReduction],
    rationale: str,
) -> ScenarioAdjustment:
    """Package a reduction plan as a scenario that lowers monthly expense."""
    total_reduction = sum(r.reduction_amount for r in reductions)
    share = (
        total_reduction / analysis.avg_monthly_expense * 100
        if analysis.avg_monthly_expense > 0
        else 0.0
    )

    return ScenarioAdjustment(
        id=AGGRESSIVE_SAVING_ID,
        name="Tailored aggressive saving",
        description=(
            f"Your transactions show you could save "
            f"{format_currency(total_reduction)} a month ({share:.1f}%)"
        ),
        monthly_expense_change=-total_reduction,
        category_reductions=list(reductions),
        savings_rationale=rationale,
        ai_generated=False,
    )
