"""Planning inputs derived from stored records."""

from finplan.planning.goals import (
    ASSET_KEYWORDS,
    calculate_all_goals_progress,
    calculate_goal_progress,
    goal_progress_percentage,
    goals_to_life_events,
    is_asset_acquisition,
    is_goal_achieved,
)
from finplan.planning.inputs import MonthSummary, assets_to_breakdown, summarize_month

__all__ = [
    "ASSET_KEYWORDS",
    "MonthSummary",
    "assets_to_breakdown",
    "calculate_all_goals_progress",
    "calculate_goal_progress",
    "goal_progress_percentage",
    "goals_to_life_events",
    "is_asset_acquisition",
    "is_goal_achieved",
    "summarize_month",
]
