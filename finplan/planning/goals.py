"""
Goals

Goal progress derived from transactions, and goals turned into the life
events the projection engine consumes.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from finplan.models.finance import CategoryId, Goal, Transaction
from finplan.models.simulation import LifeEvent, LifeEventKind
from finplan.utils.dates import start_of_month


# Goal names containing any of these buy property rather than spend money
ASSET_KEYWORDS = (
    "주택", "아파트", "빌라", "부동산", "건물", "토지", "집", "매매",
    "house", "apartment",
)

# Planning targets, not spending
SIMULATION_TARGET_TYPE = "simulation_target"


def is_asset_acquisition(goal_name: str) -> bool:
    return any(keyword in goal_name for keyword in ASSET_KEYWORDS)


def goals_to_life_events(
    goals: Iterable[Goal],
    as_of: Optional[date] = None,
) -> list[LifeEvent]:
    """
    Turn dated, unmet goals into life events of their remaining amount.

    Goals without a target date, already met, of type simulation_target,
    or dated before the as-of month are skipped.
    """
    as_of = as_of or date.today()
    first_month = start_of_month(as_of)

    events = []
    for goal in goals:
        if goal.target_date is None or goal.target_date < first_month:
            continue
        if goal.target_amount <= goal.current_amount:
            continue
        if goal.type == SIMULATION_TARGET_TYPE:
            continue

        events.append(LifeEvent(
            date=goal.target_date,
            amount=float(goal.remaining_amount),
            name=goal.name,
            kind=(
                LifeEventKind.ASSET_ACQUISITION
                if is_asset_acquisition(goal.name)
                else LifeEventKind.EXPENSE
            ),
        ))

    return events


def calculate_goal_progress(goal: Goal, transactions: Iterable[Transaction]) -> Decimal:
    """
    Current amount of a goal, counted from transactions since it was created.

    - savings: deposits into savings or investment
    - emergency / emergency_fund: net cash flow, floored at zero
    - investment: deposits into investment
    - anything else keeps its stored current_amount
    """
    since = goal.created_at.date()
    relevant = [t for t in transactions if t.transaction_date >= since]

    if goal.type == "savings":
        return sum(
            (t.amount for t in relevant
             if t.category_id in (CategoryId.SAVINGS, CategoryId.INVESTMENT) and t.amount > 0),
            Decimal("0"),
        )

    if goal.type in ("emergency", "emergency_fund"):
        income = sum((t.amount for t in relevant if t.amount > 0), Decimal("0"))
        expense = sum((-t.amount for t in relevant if t.amount < 0), Decimal("0"))
        return max(Decimal("0"), income - expense)

    if goal.type == "investment":
        return sum(
            (t.amount for t in relevant
             if t.category_id == CategoryId.INVESTMENT and t.amount > 0),
            Decimal("0"),
        )

    return goal.current_amount


def calculate_all_goals_progress(
    goals: list[Goal],
    transactions: list[Transaction],
) -> list[Goal]:
    """Copies of the goals with current_amount recomputed."""
    if not goals or not transactions:
        return goals

    return [
        goal.model_copy(update={"current_amount": calculate_goal_progress(goal, transactions)})
        for goal in goals
    ]


def is_goal_achieved(goal: Goal) -> bool:
    return goal.current_amount >= goal.target_amount


def goal_progress_percentage(goal: Goal) -> float:
    """Progress in percent, capped at 100 (0 for a zero target)."""
    if goal.target_amount == 0:
        return 0.0
    return min(float(goal.current_amount / goal.target_amount * 100), 100.0)
