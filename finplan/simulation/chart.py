"""
Chart Data Formatting

Turns scenario trajectories into flat points for a line/area chart.
Long horizons are downsampled, but a month where any scenario has a life
event is always kept so the chart can mark it.
"""

from typing import Any, Optional, Sequence

from finplan.config import get_settings
from finplan.models.simulation import MonthlyProjection, ScenarioResult


def _value(projection: MonthlyProjection, liquid_only: bool) -> float:
    if liquid_only:
        return projection.assets.liquid_net_worth
    return projection.net_worth


def format_projections_for_chart(
    scenarios: Sequence[ScenarioResult],
    sample_points: int = 12,
    liquid_only: bool = False,
    display_unit: Optional[int] = None,
) -> list[dict[str, Any]]:
    """
    Build chart points across scenarios.

    Args:
        scenarios: Baseline first, then compared scenarios
        sample_points: Rough number of evenly spaced points to keep
        liquid_only: Plot cash + investment - debt instead of net worth
        display_unit: Divisor for values (default from settings, 10,000)

    Returns:
        One dict per kept month: label ("YYYY.MM"), year offset, one value
        per scenario id, and "event_<id>" with the first event label.
    """
    if not scenarios:
        return []

    unit = display_unit or get_settings().app.chart_display_unit
    timeline = scenarios[0].projections
    step = max(1, len(timeline) // max(sample_points, 1))

    points = []
    for i, projection in enumerate(timeline):
        has_event = any(
            i < len(s.projections) and s.projections[i].events for s in scenarios
        )
        if i % step != 0 and not has_event:
            continue

        point: dict[str, Any] = {
            "label": projection.date.strftime("%Y.%m"),
            "year": i // 12,
        }
        for scenario in scenarios:
            if i >= len(scenario.projections):
                continue
            p = scenario.projections[i]
            point[scenario.id] = round(_value(p, liquid_only) / unit)
            if p.events:
                point[f"event_{scenario.id}"] = p.events[0]

        points.append(point)

    return points
