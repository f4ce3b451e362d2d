"""Projection engine and scenario comparison."""

from finplan.simulation.chart import format_projections_for_chart
from finplan.simulation.engine import monthly_rate, run_simulation
from finplan.simulation.scenarios import (
    AGGRESSIVE_SAVING_ID,
    BASELINE_ADJUSTMENT,
    DEFAULT_SCENARIOS,
    ECONOMIC_SCENARIOS,
    apply_adjustment,
    find_goal_achievement_date,
    generate_aggressive_saving_scenario,
    run_full_simulation,
    run_scenario_simulation,
)

__all__ = [
    "AGGRESSIVE_SAVING_ID",
    "BASELINE_ADJUSTMENT",
    "DEFAULT_SCENARIOS",
    "ECONOMIC_SCENARIOS",
    "apply_adjustment",
    "find_goal_achievement_date",
    "format_projections_for_chart",
    "generate_aggressive_saving_scenario",
    "monthly_rate",
    "run_full_simulation",
    "run_scenario_simulation",
    "run_simulation",
]
