"""
Data Models Package

This package contains all Pydantic models used by the planner.
All data flowing through the system must conform to these schemas.
"""

from finplan.models.analysis import (
    CategoryReduction,
    CategorySpending,
    Difficulty,
    Insight,
    InsightType,
    SavingsPotential,
    SpendingAnalysis,
)
from finplan.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from finplan.models.finance import (
    ALL_CATEGORIES,
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    NON_EXPENSE_CATEGORIES,
    Asset,
    AssetType,
    Category,
    CategoryId,
    CategoryKind,
    Goal,
    Transaction,
    category_name,
    get_category_by_id,
)
from finplan.models.simulation import (
    AllCashPosition,
    AssetsBreakdown,
    BreakdownPosition,
    EconomicParams,
    EconomicScenario,
    LifeEvent,
    LifeEventKind,
    MonthlyProjection,
    ScenarioAdjustment,
    ScenarioResult,
    SimulationInput,
    SimulationResult,
    StartingPosition,
)
from finplan.models.validation import ValidationIssue, ValidationResult

__all__ = [
    # Records
    "ALL_CATEGORIES",
    "EXPENSE_CATEGORIES",
    "INCOME_CATEGORIES",
    "NON_EXPENSE_CATEGORIES",
    "Asset",
    "AssetType",
    "Category",
    "CategoryId",
    "CategoryKind",
    "Goal",
    "Transaction",
    "category_name",
    "get_category_by_id",
    # Analysis
    "CategoryReduction",
    "CategorySpending",
    "Difficulty",
    "Insight",
    "InsightType",
    "SavingsPotential",
    "SpendingAnalysis",
    # Projection
    "AllCashPosition",
    "AssetsBreakdown",
    "BreakdownPosition",
    "EconomicParams",
    "EconomicScenario",
    "LifeEvent",
    "LifeEventKind",
    "MonthlyProjection",
    "ScenarioAdjustment",
    "ScenarioResult",
    "SimulationInput",
    "SimulationResult",
    "StartingPosition",
    # Validation
    "ValidationIssue",
    "ValidationResult",
    # Audit
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
