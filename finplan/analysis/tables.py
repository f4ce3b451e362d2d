"""
Category Behaviour Tables

Fixed per-category lookups used by the spending analyzer: how much of a
category can realistically be cut, and what to tell the user about it.

Every table is keyed by CategoryId and must cover every member; the check
at the bottom of this module fails the import otherwise.
"""

from finplan.models.analysis import SavingsPotential
from finplan.models.finance import CategoryId


HIGH = SavingsPotential.HIGH
MEDIUM = SavingsPotential.MEDIUM
LOW = SavingsPotential.LOW

_OTHER_RATES = {HIGH: 0.20, MEDIUM: 0.10, LOW: 0.05}

# Largest share of a category's monthly average the plan may cut.
# 0.0 means the category is never proposed for that tier.
MAX_REDUCTION_RATES: dict[CategoryId, dict[SavingsPotential, float]] = {
    CategoryId.FOOD: {HIGH: 0.25, MEDIUM: 0.15, LOW: 0.10},
    CategoryId.TRANSPORT: {HIGH: 0.20, MEDIUM: 0.10, LOW: 0.05},
    CategoryId.SHOPPING: {HIGH: 0.40, MEDIUM: 0.25, LOW: 0.15},
    CategoryId.ENTERTAINMENT: {HIGH: 0.35, MEDIUM: 0.20, LOW: 0.10},
    CategoryId.HEALTH: {HIGH: 0.15, MEDIUM: 0.10, LOW: 0.05},
    CategoryId.EDUCATION: {HIGH: 0.10, MEDIUM: 0.05, LOW: 0.0},
    CategoryId.HOUSING: {HIGH: 0.05, MEDIUM: 0.03, LOW: 0.0},
    CategoryId.UTILITIES: {HIGH: 0.10, MEDIUM: 0.05, LOW: 0.03},
    CategoryId.OTHER: _OTHER_RATES,
    # Never analyzed as spending; present so the table stays exhaustive
    CategoryId.SAVINGS: _OTHER_RATES,
    CategoryId.INVESTMENT: _OTHER_RATES,
    CategoryId.SALARY: _OTHER_RATES,
    CategoryId.INVESTMENT_INCOME: _OTHER_RATES,
    CategoryId.OTHER_INCOME: _OTHER_RATES,
}

_OTHER_TIPS = [
    "Review your spending history on a fixed day every month",
    "Cancel subscriptions and memberships you no longer use",
]

SAVINGS_TIPS: dict[CategoryId, list[str]] = {
    CategoryId.FOOD: [
        "Eat out less often and try simple home cooking",
        "Write a shopping list before going to the market and skip impulse buys",
        "Pick up takeout yourself instead of paying delivery fees",
        "Packing lunch cuts the cost of a meal by half",
    ],
    CategoryId.TRANSPORT: [
        "Walk or cycle for short distances",
        "Use a public transport pass or discount card",
        "Consider carpooling or shared mobility",
        "Take the night bus or last train instead of a taxi",
    ],
    CategoryId.SHOPPING: [
        "Wait 24 hours before any purchase to curb impulse buying",
        "Buy from a list of things you actually need",
        "Make the most of sale seasons and discount coupons",
        "Check second-hand marketplaces first",
    ],
    CategoryId.ENTERTAINMENT: [
        "Cancel paid subscriptions you are not using",
        "Look for free cultural programmes and events",
        "Stream at home instead of going to the cinema",
        "Host friends at home instead of going out",
    ],
    CategoryId.HEALTH: [
        "Swap the gym membership for a home workout app",
        "Only buy the supplements you really need",
        "Check your health insurance benefits before a visit",
    ],
    CategoryId.UTILITIES: [
        "Use energy-efficient appliances",
        "Unplug electronics you are not using",
        "Adjusting heating or cooling by one degree saves about 10%",
        "Take shorter showers and fit a low-flow shower head",
    ],
    CategoryId.HOUSING: [
        "Renegotiate the rent or convert part of it into a deposit",
        "Share housing costs with a roommate",
    ],
    CategoryId.EDUCATION: [
        "Use free online course platforms",
        "Borrow books from the library instead of buying them",
    ],
    CategoryId.OTHER: _OTHER_TIPS,
    CategoryId.SAVINGS: _OTHER_TIPS,
    CategoryId.INVESTMENT: _OTHER_TIPS,
    CategoryId.SALARY: _OTHER_TIPS,
    CategoryId.INVESTMENT_INCOME: _OTHER_TIPS,
    CategoryId.OTHER_INCOME: _OTHER_TIPS,
}

# Savings-potential rule groups
LOW_POTENTIAL_FIXED = frozenset({CategoryId.HOUSING, CategoryId.UTILITIES})
DISCRETIONARY = frozenset({CategoryId.FOOD, CategoryId.ENTERTAINMENT, CategoryId.SHOPPING})
SEMI_ESSENTIAL = frozenset({CategoryId.TRANSPORT, CategoryId.HEALTH, CategoryId.EDUCATION})


def max_reduction_rate(category_id: CategoryId, potential: SavingsPotential) -> float:
    return MAX_REDUCTION_RATES[category_id][potential]


def tips_for(category_id: CategoryId, reduction_percentage: float) -> list[str]:
    """Bigger cuts get more advice: 4 tips above 25%, 3 above 15%, else 2."""
    if reduction_percentage > 25:
        count = 4
    elif reduction_percentage > 15:
        count = 3
    else:
        count = 2
    return list(SAVINGS_TIPS[category_id][:count])


def _check_exhaustive() -> None:
    members = set(CategoryId)
    for table_name, table in (
        ("MAX_REDUCTION_RATES", MAX_REDUCTION_RATES),
        ("SAVINGS_TIPS", SAVINGS_TIPS),
    ):
        missing = members - set(table)
        if missing:
            raise RuntimeError(
                f"{table_name} is missing categories: "
                f"{sorted(m.value for m in missing)}"
            )
    for category_id, rates in MAX_REDUCTION_RATES.items():
        if set(rates) != set(SavingsPotential):
            raise RuntimeError(f"MAX_REDUCTION_RATES[{category_id.value}] must cover every tier")


_check_exhaustive()
