"""
Spending Insights

Short observations comparing this month's spending with last month's.
Unlike the analyzer, this looks at raw sign (any negative amount is an
expense) because it summarizes the ledger as the user sees it.
"""

from collections import defaultdict
from typing import Optional

from pydantic import BaseModel

from finplan.models.analysis import Insight, InsightType
from finplan.models.finance import CategoryId, Transaction, category_name
from finplan.utils.formatting import format_currency


class CategoryTotal(BaseModel):
    category_id: CategoryId
    category_name: str
    amount: float
    percentage: float
    transaction_count: int


def group_expenses_by_category(transactions: list[Transaction]) -> list[CategoryTotal]:
    """Expense totals per category, largest first."""
    amounts: dict[CategoryId, float] = defaultdict(float)
    counts: dict[CategoryId, int] = defaultdict(int)

    for t in transactions:
        if t.amount < 0:
            amounts[t.category_id] += abs(float(t.amount))
            counts[t.category_id] += 1

    total = sum(amounts.values())
    breakdown = [
        CategoryTotal(
            category_id=category_id,
            category_name=category_name(category_id),
            amount=amount,
            percentage=amount / total * 100 if total > 0 else 0.0,
            transaction_count=counts[category_id],
        )
        for category_id, amount in amounts.items()
    ]
    return sorted(breakdown, key=lambda c: c.amount, reverse=True)


def _total_expense(transactions: list[Transaction]) -> float:
    return sum(abs(float(t.amount)) for t in transactions if t.amount < 0)


def generate_insights(
    current: list[Transaction],
    previous: list[Transaction],
    monthly_income: float,
) -> list[Insight]:
    """
    Build insights for the current month, most important first.

    Args:
        current: This month's transactions
        previous: Last month's transactions
        monthly_income: Income used for the savings rate
    """
    insights: list[Insight] = []

    def add(type_: InsightType, title: str, description: str, priority: int,
            action_label: Optional[str] = None, action_path: Optional[str] = None) -> None:
        insights.append(Insight(
            id=f"insight-{len(insights) + 1}",
            type=type_,
            title=title,
            description=description,
            priority=priority,
            action_label=action_label,
            action_path=action_path,
        ))

    current_breakdown = group_expenses_by_category(current)
    previous_breakdown = {c.category_id: c for c in group_expenses_by_category(previous)}

    current_total = _total_expense(current)
    previous_total = _total_expense(previous)

    # 1. Month-over-month change
    if previous_total > 0:
        change = (current_total - previous_total) / previous_total * 100
        if change > 20:
            add(
                InsightType.WARNING,
                "Spending is up",
                f"You spent {change:.0f}% more than last month. Take a look at your transactions.",
                8,
                action_label="View transactions",
                action_path="/transactions",
            )
        elif change < -10:
            add(
                InsightType.ACHIEVEMENT,
                "Spending is down",
                f"You spent {abs(change):.0f}% less than last month. Keep it up!",
                6,
            )

    # 2. Savings rate
    if monthly_income > 0:
        savings_rate = (monthly_income - current_total) / monthly_income * 100
        if savings_rate < 10:
            add(
                InsightType.WARNING,
                "Low savings rate",
                f"Your savings rate is {savings_rate:.0f}%. Save more to build an emergency fund.",
                9,
                action_label="Open simulation",
                action_path="/simulation",
            )
        elif savings_rate >= 30:
            add(
                InsightType.ACHIEVEMENT,
                "Great savings rate",
                f"A {savings_rate:.0f}% savings rate puts your finances in great shape.",
                5,
            )

    # 3. Category spikes
    for cat in current_breakdown:
        prev = previous_breakdown.get(cat.category_id)
        if prev is None or prev.amount <= 0:
            continue
        change = (cat.amount - prev.amount) / prev.amount * 100
        if change > 50 and cat.amount > 100_000:
            add(
                InsightType.TIP,
                f"{cat.category_name} spending is up",
                (
                    f"{cat.category_name} is up {change:.0f}% on last month. Bringing it back "
                    f"saves {format_currency(cat.amount - prev.amount)} a month."
                ),
                7,
            )

    # 4. Dominant category
    if current_breakdown and current_breakdown[0].percentage > 40:
        top = current_breakdown[0]
        add(
            InsightType.INFO,
            f"{top.category_name} is your biggest expense",
            f"{top.percentage:.0f}% of your spending goes to {top.category_name}.",
            4,
        )

    # 5. Recurring expenses
    recurring = [t for t in current if t.is_recurring]
    if recurring:
        recurring_total = sum(abs(float(t.amount)) for t in recurring)
        add(
            InsightType.INFO,
            "Recurring expenses",
            f"You have {format_currency(recurring_total)} of recurring expenses every month.",
            3,
        )

    # 6. Nothing logged yet
    if not current:
        add(
            InsightType.TIP,
            "Log your transactions",
            "Spending insights need transactions. Start logging them today!",
            10,
            action_label="Add transaction",
            action_path="/add",
        )

    return sorted(insights, key=lambda i: i.priority, reverse=True)
