"""
Projection Models

Inputs and outputs of the projection engine and the scenario orchestrator.

DESIGN DECISION: The starting position is an explicit union. Callers give
either a single net-worth figure (treated as all cash) or a full four-bucket
breakdown. The legacy input shape (current_net_worth plus an optional
assets_breakdown) is accepted here and resolved once, so the engine only
ever sees one canonical AssetsBreakdown.
"""

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from finplan.models.analysis import CategoryReduction


# =============================================================================
# BALANCES AND EVENTS
# =============================================================================

class AssetsBreakdown(BaseModel):
    """
    Four mutually exclusive monetary buckets.

    None of them is ever negative: deficits cascade cash -> investment -> debt.
    """

    cash: float = Field(default=0.0, ge=0, description="Liquid deposits")
    investment: float = Field(default=0.0, ge=0, description="Market-exposed assets")
    real_estate: float = Field(default=0.0, ge=0, description="Illiquid property")
    debt: float = Field(default=0.0, ge=0, description="Outstanding borrowing")

    @property
    def net_worth(self) -> float:
        return self.cash + self.investment + self.real_estate - self.debt

    @property
    def liquid_net_worth(self) -> float:
        """Everything except property."""
        return self.cash + self.investment - self.debt


class LifeEventKind(str, Enum):
    EXPENSE = "expense"
    ASSET_ACQUISITION = "asset_acquisition"


class LifeEvent(BaseModel):
    """
    A dated one-time cash requirement.

    Matched to a projection month by calendar year and month.
    """
    model_config = ConfigDict(frozen=True)

    date: date
    amount: float = Field(..., ge=0)
    name: str = Field(..., min_length=1, max_length=200)
    kind: LifeEventKind = LifeEventKind.EXPENSE

    @property
    def label(self) -> str:
        suffix = "asset acquisition" if self.kind == LifeEventKind.ASSET_ACQUISITION else "expense"
        return f"{self.name} ({suffix})"


# =============================================================================
# STARTING POSITION
# =============================================================================

class AllCashPosition(BaseModel):
    """A single net-worth figure, held as cash (or as debt when negative)."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["all_cash"] = "all_cash"
    amount: float

    def to_breakdown(self) -> AssetsBreakdown:
        if self.amount < 0:
            return AssetsBreakdown(debt=-self.amount)
        return AssetsBreakdown(cash=self.amount)


class BreakdownPosition(BaseModel):
    """A full four-bucket breakdown."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["breakdown"] = "breakdown"
    breakdown: AssetsBreakdown

    def to_breakdown(self) -> AssetsBreakdown:
        return self.breakdown.model_copy()


StartingPosition = Annotated[
    Union[AllCashPosition, BreakdownPosition],
    Field(discriminator="kind"),
]


# =============================================================================
# ENGINE INPUT / OUTPUT
# =============================================================================

class SimulationInput(BaseModel):
    """
    Complete parameter set for one engine run.

    Ranges (years, ages, rates) are checked by SimulationInputValidator,
    not here, so bad input surfaces as InvalidSimulationInput with every
    problem listed.
    """

    position: StartingPosition

    monthly_income: float
    monthly_expense: float
    monthly_savings: Optional[float] = Field(
        default=None,
        description=(
            "Explicit monthly savings; defaults to income - expense. Applied as a "
            "fixed nominal offset to income - expense in working months, so it is "
            "not indexed to income growth or inflation"
        )
    )

    life_events: list[LifeEvent] = Field(default_factory=list)

    # Annual assumptions (fractions, 0.02 = 2%)
    annual_inflation_rate: float = 0.02
    annual_investment_return: float = 0.04
    annual_income_growth: float = 0.03
    annual_debt_interest: float = 0.05
    annual_real_estate_growth: float = 0.03

    years: int

    # Retirement planning
    current_age: int = 35
    retirement_age: int = 65
    monthly_pension: float = Field(
        default=0.0,
        description="Pension in present-value terms; indexed to inflation"
    )

    @model_validator(mode='before')
    @classmethod
    def resolve_legacy_position(cls, data: Any) -> Any:
        """Accept current_net_worth / assets_breakdown and build `position`."""
        if not isinstance(data, dict) or "position" in data:
            return data

        data = dict(data)
        breakdown = data.pop("assets_breakdown", None)
        net_worth = data.pop("current_net_worth", None)

        if breakdown is not None:
            data["position"] = {"kind": "breakdown", "breakdown": breakdown}
        elif net_worth is not None:
            data["position"] = {"kind": "all_cash", "amount": net_worth}
        return data

    @property
    def starting_assets(self) -> AssetsBreakdown:
        return self.position.to_breakdown()

    @property
    def current_net_worth(self) -> float:
        return self.starting_assets.net_worth

    @property
    def total_months(self) -> int:
        return self.years * 12

    @property
    def months_to_retirement(self) -> int:
        return (self.retirement_age - self.current_age) * 12


class MonthlyProjection(BaseModel):
    """
    One month of the trajectory.

    Monetary fields are rounded to whole units; the engine carries the
    unrounded values forward.
    """
    model_config = ConfigDict(frozen=True)

    month: int = Field(..., ge=0, description="0 = the as-of month")
    date: date
    age: int
    is_retired: bool
    net_worth: int
    assets: AssetsBreakdown
    monthly_income: int
    monthly_expense: int
    monthly_savings: int
    emergency_fund_months: float = Field(
        ...,
        description="Months of expense covered by cash, one decimal"
    )
    events: tuple[str, ...] = ()


# =============================================================================
# SCENARIOS
# =============================================================================

class ScenarioAdjustment(BaseModel):
    """
    A named bundle of changes applied to the baseline input.

    Multipliers: 1.0 = unchanged, 0.8 = 20% less.
    """

    id: str
    name: str
    description: str = ""

    expense_multiplier: Optional[float] = None
    savings_multiplier: Optional[float] = None
    income_multiplier: Optional[float] = None

    monthly_expense_change: Optional[float] = None
    monthly_savings_change: Optional[float] = None

    # Only set for plans derived from the spending analyzer
    category_reductions: list[CategoryReduction] = Field(default_factory=list)
    savings_rationale: Optional[str] = None
    ai_generated: bool = False


class ScenarioResult(BaseModel):
    """Outcome of one scenario run."""

    id: str
    name: str
    description: str
    adjustment: ScenarioAdjustment

    final_net_worth: int
    net_worth_change: int = Field(
        default=0,
        description="Versus the baseline; filled in by run_full_simulation"
    )
    goal_achievement_date: Optional[date] = None
    emergency_fund_months: float

    projections: list[MonthlyProjection]


class SimulationResult(BaseModel):
    """Baseline plus compared scenarios."""

    input: SimulationInput
    baseline: ScenarioResult
    scenarios: list[ScenarioResult] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)


class EconomicParams(BaseModel):
    """Annual rates in percent (2.5 = 2.5%)."""
    model_config = ConfigDict(frozen=True)

    inflation_rate: float
    investment_return: float
    income_growth: float
    debt_interest: float
    real_estate_growth: float


class EconomicScenario(BaseModel):
    """A market-conditions preset for the five annual assumptions."""
    model_config = ConfigDict(frozen=True)

    id: Literal["neutral", "bull", "bear"]
    name: str
    description: str
    params: EconomicParams

    def apply_to(self, simulation_input: SimulationInput) -> SimulationInput:
        p = self.params
        return simulation_input.model_copy(update={
            "annual_inflation_rate": p.inflation_rate / 100,
            "annual_investment_return": p.investment_return / 100,
            "annual_income_growth": p.income_growth / 100,
            "annual_debt_interest": p.debt_interest / 100,
            "annual_real_estate_growth": p.real_estate_growth / 100,
        })
