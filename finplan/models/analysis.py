"""
Spending Analysis Models

Computed views over a transaction set. They have no lifecycle of their own:
every analysis call builds them fresh.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from finplan.models.finance import CategoryId


class SavingsPotential(str, Enum):
    """How compressible a category's spending is."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return {"high": 3, "medium": 2, "low": 1}[self.value]


class Difficulty(str, Enum):
    """How hard a proposed reduction is expected to be."""
    EASY = "easy"
    MODERATE = "moderate"
    HARD = "hard"


class CategorySpending(BaseModel):
    """Per-category aggregate over the analyzed window."""

    category_id: CategoryId
    category_name: str
    total_amount: float = Field(ge=0)
    avg_monthly_amount: float = Field(ge=0)
    transaction_count: int = Field(ge=0)
    percentage: float = Field(
        ge=0,
        description="Share of total expense (0-100)"
    )
    is_recurring: bool = Field(
        ...,
        description="Fixed expense: present most months with low variation"
    )
    savings_potential: SavingsPotential


class CategoryReduction(BaseModel):
    """A concrete reduction proposal for one category."""

    category_id: CategoryId
    category_name: str
    current_amount: float
    target_amount: float
    reduction_amount: float = Field(ge=0)
    reduction_percentage: float = Field(ge=0)
    difficulty: Difficulty
    tips: list[str] = Field(default_factory=list)


class SpendingAnalysis(BaseModel):
    """
    Result of analyzing a transaction set.

    All-zero (with no categories) when nothing in the window qualifies.
    """

    total_expense: float = 0.0
    avg_monthly_expense: float = 0.0
    categories: list[CategorySpending] = Field(default_factory=list)
    fixed_expenses: float = 0.0
    variable_expenses: float = 0.0
    analyzed_months: int = Field(
        ...,
        ge=0,
        description="Distinct months with data (the averaging divisor)"
    )
    period_start: date
    period_end: date

    def get_category(self, category_id: CategoryId) -> Optional[CategorySpending]:
        for category in self.categories:
            if category.category_id == category_id:
                return category
        return None


class InsightType(str, Enum):
    WARNING = "warning"
    TIP = "tip"
    ACHIEVEMENT = "achievement"
    INFO = "info"


class Insight(BaseModel):
    """A short observation about recent spending, shown on the dashboard."""

    id: str
    type: InsightType
    title: str
    description: str
    priority: int = Field(
        ...,
        ge=1,
        le=10,
        description="Higher is more important"
    )
    action_label: Optional[str] = None
    action_path: Optional[str] = None
