"""
Main Orchestrator for the Net-Worth Planner

This module ties the record store to the analyzer and the projection
engine and defines the end-to-end planning flow:

    stored records -> SimulationInput
    transactions   -> SpendingAnalysis -> reduction plan -> scenario
    SimulationInput + scenarios -> SimulationResult

DESIGN DECISION: The orchestrator enforces the boundaries:
- The analyzer and the engine never touch storage; only this module does
- Input is validated before any projection runs
- Every step is audited under one correlation ID
"""

from datetime import date
from typing import Optional, Sequence
from uuid import UUID, uuid4

import structlog

from finplan.analysis import (
    analyze_spending,
    generate_analysis_summary,
    generate_category_reductions,
)
from finplan.audit import AuditLogger, create_correlation_id
from finplan.config import get_settings
from finplan.models.analysis import SpendingAnalysis
from finplan.models.finance import Transaction
from finplan.models.simulation import (
    BreakdownPosition,
    ScenarioAdjustment,
    SimulationInput,
    SimulationResult,
)
from finplan.planning import assets_to_breakdown, goals_to_life_events, summarize_month
from finplan.services.storage import (
    FinanceStorageInterface,
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsFinanceStorage,
    InMemoryFinanceStorage,
    StorageError,
)
from finplan.simulation import (
    DEFAULT_SCENARIOS,
    ECONOMIC_SCENARIOS,
    generate_aggressive_saving_scenario,
    run_full_simulation,
)
from finplan.utils.dates import end_of_month, shift_month, start_of_month
from finplan.validation import InvalidSimulationInput, SimulationInputValidator


logger = structlog.get_logger(__name__)


class InsufficientDataError(Exception):
    """The stored records cannot support the requested plan."""
    pass


class PlanningFlow:
    """
    Orchestrates a planning session.

    Flow:
    1. Load    → this month's transactions, assets, goals
    2. Analyze → spending over the lookback window
    3. Plan    → reduction plan packaged as a scenario
    4. Project → baseline plus scenarios
    5. Audit   → every step under one correlation ID
    """

    def __init__(
        self,
        storage: FinanceStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[SimulationInputValidator] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger
        self._validator = validator or SimulationInputValidator()
        self._simulation_settings = get_settings().simulation
        self._analyzer_settings = get_settings().analyzer

    async def _load_transactions(
        self,
        date_from: date,
        date_to: date,
        correlation_id: UUID,
    ) -> list[Transaction]:
        try:
            return await self._storage.list_transactions(date_from=date_from, date_to=date_to)
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_storage_error(
                    operation="list_transactions",
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

    async def record_transaction(
        self,
        transaction: Transaction,
        correlation_id: Optional[UUID] = None,
    ) -> Transaction:
        """Save a transaction and audit it."""
        correlation_id = correlation_id or create_correlation_id()

        await self._storage.save_transaction(transaction)

        if self._audit_logger:
            await self._audit_logger.log_transaction_saved(
                transaction_id=transaction.id,
                category=transaction.category_id.value,
                amount=str(transaction.amount),
                correlation_id=correlation_id,
            )

        return transaction

    async def load_simulation_input(
        self,
        years: int,
        as_of: Optional[date] = None,
        current_age: Optional[int] = None,
        retirement_age: Optional[int] = None,
        monthly_pension: Optional[float] = None,
        fallback_monthly_income: Optional[float] = None,
        economic_scenario: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> SimulationInput:
        """
        Build a SimulationInput from the stored records.

        Args:
            years: Horizon
            as_of: Reference date. Defaults to today.
            current_age / retirement_age / monthly_pension: Override the configured defaults
            fallback_monthly_income: Income to use when this month has none logged
            economic_scenario: Preset id (neutral, bull, bear) for the five rates
            correlation_id: For audit tracing
        """
        correlation_id = correlation_id or create_correlation_id()
        as_of = as_of or date.today()
        settings = self._simulation_settings

        transactions = await self._load_transactions(
            start_of_month(as_of), end_of_month(as_of), correlation_id
        )
        summary = summarize_month(transactions)

        income = summary.income
        if income == 0 and fallback_monthly_income:
            income = fallback_monthly_income

        try:
            assets = await self._storage.list_assets()
            goals = await self._storage.list_goals()
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_storage_error(
                    operation="list_assets_and_goals",
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        breakdown = assets_to_breakdown(assets, current_balance=income - summary.expense)

        simulation_input = SimulationInput(
            position=BreakdownPosition(breakdown=breakdown),
            monthly_income=income,
            monthly_expense=summary.expense,
            life_events=goals_to_life_events(goals, as_of=as_of),
            years=years,
            current_age=settings.default_current_age if current_age is None else current_age,
            retirement_age=settings.default_retirement_age if retirement_age is None else retirement_age,
            monthly_pension=settings.default_monthly_pension if monthly_pension is None else monthly_pension,
        )

        preset = ECONOMIC_SCENARIOS[economic_scenario or settings.default_economic_scenario]
        return preset.apply_to(simulation_input)

    async def analyze_spending(
        self,
        as_of: Optional[date] = None,
        months: Optional[int] = None,
        correlation_id: Optional[UUID] = None,
    ) -> SpendingAnalysis:
        """Load the lookback window and analyze it."""
        correlation_id = correlation_id or create_correlation_id()
        as_of = as_of or date.today()
        if months is None:
            months = self._analyzer_settings.default_lookback_months

        transactions = await self._load_transactions(
            shift_month(as_of, -months), end_of_month(as_of), correlation_id
        )
        analysis = analyze_spending(transactions, months=months, as_of=as_of)

        if self._audit_logger:
            await self._audit_logger.log_spending_analyzed(
                analyzed_months=analysis.analyzed_months,
                total_expense=analysis.total_expense,
                category_count=len(analysis.categories),
                correlation_id=correlation_id,
            )

        return analysis

    async def build_aggressive_scenario(
        self,
        monthly_expense: float,
        as_of: Optional[date] = None,
        months: Optional[int] = None,
        correlation_id: Optional[UUID] = None,
    ) -> ScenarioAdjustment:
        """
        Derive a tailored saving scenario from recent spending.

        The plan targets a fixed share (20% by default) of monthly expense.

        Raises:
            InsufficientDataError: No transactions, no expense, nothing to
                analyze, or no category can contribute
        """
        correlation_id = correlation_id or create_correlation_id()
        as_of = as_of or date.today()
        if months is None:
            months = self._analyzer_settings.default_lookback_months

        transactions = await self._load_transactions(
            shift_month(as_of, -months), end_of_month(as_of), correlation_id
        )
        if not transactions:
            raise InsufficientDataError(
                f"No transactions in the last {months} month(s); log some spending first"
            )

        if monthly_expense <= 0:
            raise InsufficientDataError("No expense recorded; log some spending first")

        analysis = analyze_spending(transactions, months=months, as_of=as_of)

        if self._audit_logger:
            await self._audit_logger.log_spending_analyzed(
                analyzed_months=analysis.analyzed_months,
                total_expense=analysis.total_expense,
                category_count=len(analysis.categories),
                correlation_id=correlation_id,
            )

        if not analysis.categories:
            raise InsufficientDataError("No expense transactions to analyze")

        target = monthly_expense * self._analyzer_settings.aggressive_target_ratio
        reductions = generate_category_reductions(analysis, target)

        if self._audit_logger:
            await self._audit_logger.log_reduction_plan(
                target=target,
                total_reduction=sum(r.reduction_amount for r in reductions),
                categories=[r.category_id.value for r in reductions],
                correlation_id=correlation_id,
            )

        if not reductions:
            raise InsufficientDataError(
                "No category has room to cut; record a wider range of spending"
            )

        rationale = generate_analysis_summary(analysis, reductions)
        scenario = generate_aggressive_saving_scenario(analysis, reductions, rationale)

        if self._audit_logger:
            await self._audit_logger.log_scenario_generated(
                scenario_id=scenario.id,
                monthly_expense_change=scenario.monthly_expense_change or 0.0,
                correlation_id=correlation_id,
            )

        return scenario

    async def run(
        self,
        years: int,
        adjustments: Optional[Sequence[ScenarioAdjustment]] = None,
        as_of: Optional[date] = None,
        include_aggressive: bool = False,
        target_net_worth: Optional[float] = None,
        economic_scenario: Optional[str] = None,
        current_age: Optional[int] = None,
        retirement_age: Optional[int] = None,
        monthly_pension: Optional[float] = None,
        fallback_monthly_income: Optional[float] = None,
        correlation_id: Optional[UUID] = None,
    ) -> SimulationResult:
        """
        Run a full planning session.

        Args:
            years: Horizon
            adjustments: Scenarios to compare (default: the preset scenarios)
            include_aggressive: Also try a tailored saving scenario; skipped
                                with a warning when the data cannot support one
            target_net_worth: Report when each scenario first reaches it

        Raises:
            InsufficientDataError: If there is no income to project from
            InvalidSimulationInput: If the assembled input fails validation
        """
        correlation_id = correlation_id or create_correlation_id()
        as_of = as_of or date.today()

        simulation_input = await self.load_simulation_input(
            years=years,
            as_of=as_of,
            current_age=current_age,
            retirement_age=retirement_age,
            monthly_pension=monthly_pension,
            fallback_monthly_income=fallback_monthly_income,
            economic_scenario=economic_scenario,
            correlation_id=correlation_id,
        )

        if simulation_input.monthly_income <= 0:
            raise InsufficientDataError("No monthly income recorded or configured")

        scenarios = list(DEFAULT_SCENARIOS if adjustments is None else adjustments)

        if include_aggressive:
            try:
                scenarios.append(await self.build_aggressive_scenario(
                    simulation_input.monthly_expense,
                    as_of=as_of,
                    correlation_id=correlation_id,
                ))
            except InsufficientDataError as e:
                logger.warning("aggressive_scenario_skipped", reason=str(e))

        try:
            result = run_full_simulation(
                simulation_input,
                scenarios,
                as_of=as_of,
                target_net_worth=target_net_worth,
                validator=self._validator,
            )
        except InvalidSimulationInput as e:
            if self._audit_logger:
                await self._audit_logger.log_input_rejected(e.issues, correlation_id)
            raise

        if self._audit_logger:
            await self._audit_logger.log_simulation_completed(
                simulation_id=uuid4(),
                years=years,
                baseline_final_net_worth=result.baseline.final_net_worth,
                scenario_count=len(result.scenarios),
                correlation_id=correlation_id,
            )

        return result


def create_planning_flow(
    use_storage: bool = True,
) -> tuple[PlanningFlow, Optional[GoogleSheetsClient]]:
    """
    Factory function to create the planning flow.

    Args:
        use_storage: Whether to initialize Google Sheets storage.
                    Set to False for testing without storage.

    Returns:
        (planning_flow, sheets_client)
    """
    sheets_client = None

    if use_storage:
        try:
            sheets_client = GoogleSheetsClient()
            storage = GoogleSheetsFinanceStorage(sheets_client)
            audit_logger = AuditLogger(GoogleSheetsAuditStorage(sheets_client))
        except Exception as e:
            # Storage not configured - continue in memory
            logger.warning("storage_not_configured", error=str(e))
            sheets_client = None
            storage = InMemoryFinanceStorage()
            audit_logger = AuditLogger()  # Local-only logging
    else:
        storage = InMemoryFinanceStorage()
        audit_logger = AuditLogger()  # Local-only logging

    return PlanningFlow(storage=storage, audit_logger=audit_logger), sheets_client
