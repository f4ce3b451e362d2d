"""
Record Models for the Net-Worth Planner

These models define the records read from the external record store:
transactions, assets and goals, plus the static category catalogue.

DESIGN DECISION: Categories are an exhaustive enum rather than free text.
Every behaviour table keyed by category (reduction rates, tips, savings
potential rules) is checked against this enum at import time, so adding a
category forces every table to be updated.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class CategoryId(str, Enum):
    """Transaction categories."""
    # Expense categories
    FOOD = "food"
    TRANSPORT = "transport"
    SHOPPING = "shopping"
    ENTERTAINMENT = "entertainment"
    HEALTH = "health"
    EDUCATION = "education"
    HOUSING = "housing"
    UTILITIES = "utilities"
    SAVINGS = "savings"
    INVESTMENT = "investment"
    OTHER = "other"

    # Income categories
    SALARY = "salary"
    INVESTMENT_INCOME = "investment_income"
    OTHER_INCOME = "other_income"


class CategoryKind(str, Enum):
    EXPENSE = "expense"
    INCOME = "income"


class AssetType(str, Enum):
    """
    Asset record types.

    Anything the planner cannot place in a bucket is treated as cash.
    """
    SAVINGS = "savings"
    INVESTMENT = "investment"
    REAL_ESTATE = "real_estate"
    DEBT = "debt"
    OTHER = "other"


# =============================================================================
# CATEGORY CATALOGUE
# =============================================================================

class Category(BaseModel):
    """Display metadata for a category."""
    model_config = ConfigDict(frozen=True)

    id: CategoryId
    name: str
    kind: CategoryKind


EXPENSE_CATEGORIES: list[Category] = [
    Category(id=CategoryId.FOOD, name="Food", kind=CategoryKind.EXPENSE),
    Category(id=CategoryId.TRANSPORT, name="Transport", kind=CategoryKind.EXPENSE),
    Category(id=CategoryId.SHOPPING, name="Shopping", kind=CategoryKind.EXPENSE),
    Category(id=CategoryId.ENTERTAINMENT, name="Leisure", kind=CategoryKind.EXPENSE),
    Category(id=CategoryId.HEALTH, name="Health", kind=CategoryKind.EXPENSE),
    Category(id=CategoryId.EDUCATION, name="Education", kind=CategoryKind.EXPENSE),
    Category(id=CategoryId.HOUSING, name="Housing", kind=CategoryKind.EXPENSE),
    Category(id=CategoryId.UTILITIES, name="Utilities", kind=CategoryKind.EXPENSE),
    Category(id=CategoryId.SAVINGS, name="Savings", kind=CategoryKind.EXPENSE),
    Category(id=CategoryId.INVESTMENT, name="Investment", kind=CategoryKind.EXPENSE),
    Category(id=CategoryId.OTHER, name="Other", kind=CategoryKind.EXPENSE),
]

INCOME_CATEGORIES: list[Category] = [
    Category(id=CategoryId.SALARY, name="Salary", kind=CategoryKind.INCOME),
    Category(id=CategoryId.INVESTMENT_INCOME, name="Investment income", kind=CategoryKind.INCOME),
    Category(id=CategoryId.OTHER_INCOME, name="Other income", kind=CategoryKind.INCOME),
]

ALL_CATEGORIES: list[Category] = [*EXPENSE_CATEGORIES, *INCOME_CATEGORIES]

_CATEGORIES_BY_ID: dict[CategoryId, Category] = {cat.id: cat for cat in ALL_CATEGORIES}

# Categories that move money around rather than spend it
NON_EXPENSE_CATEGORIES: frozenset[CategoryId] = frozenset({
    CategoryId.SAVINGS,
    CategoryId.INVESTMENT,
    CategoryId.SALARY,
    CategoryId.INVESTMENT_INCOME,
    CategoryId.OTHER_INCOME,
})


def get_category_by_id(category_id: str) -> Optional[Category]:
    """Look up a category; unknown ids return None."""
    try:
        return _CATEGORIES_BY_ID[CategoryId(category_id)]
    except ValueError:
        return None


def category_name(category_id: str) -> str:
    category = get_category_by_id(category_id)
    return category.name if category else "Other"


# =============================================================================
# STORED RECORDS
# =============================================================================

class Transaction(BaseModel):
    """
    A logged income or expense.

    Amounts are signed: expenses are negative, income positive.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique transaction ID"
    )
    category_id: CategoryId = Field(
        ...,
        description="Category of the transaction"
    )
    amount: Decimal = Field(
        ...,
        description="Signed amount (expense negative)"
    )
    memo: Optional[str] = Field(
        default=None,
        max_length=500
    )
    transaction_date: date = Field(
        ...,
        description="Date the money moved (ISO date)"
    )
    is_recurring: bool = False
    recurring_day: Optional[int] = Field(
        default=None,
        ge=1,
        le=31,
        description="Day of month a recurring transaction repeats on"
    )
    created_at: datetime = Field(
        default_factory=datetime.utcnow
    )

    @property
    def is_expense(self) -> bool:
        return self.amount < 0

    @property
    def month_key(self) -> str:
        """Calendar month bucket, YYYY-MM."""
        return self.transaction_date.strftime("%Y-%m")


class Asset(BaseModel):
    """A balance-sheet item entered by the user."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    type: AssetType = Field(
        ...,
        description="Which bucket the asset belongs to"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=200
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Current value (debts are stored as positive balances)"
    )
    interest_rate: Optional[float] = None
    notes: Optional[str] = Field(default=None, max_length=1000)

    @field_validator('type', mode='before')
    @classmethod
    def unknown_type_is_other(cls, v):
        """The record store allows free-form types; map unknown ones to OTHER."""
        if isinstance(v, str) and v not in {t.value for t in AssetType}:
            return AssetType.OTHER
        return v


class Goal(BaseModel):
    """
    A savings goal.

    Goals with a target date and an unmet target become life events in
    the projection.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    type: str = Field(
        default="custom",
        description="savings, emergency_fund, investment, simulation_target, ..."
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=200
    )
    target_amount: Decimal = Field(..., ge=0)
    current_amount: Decimal = Field(default=Decimal("0"), ge=0)
    target_date: Optional[date] = None
    is_completed: bool = False
    created_at: datetime = Field(
        default_factory=datetime.utcnow
    )

    @property
    def remaining_amount(self) -> Decimal:
        return self.target_amount - self.current_amount
