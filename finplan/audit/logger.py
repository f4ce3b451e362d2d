"""
Audit Logger

DESIGN DECISION: Every planning run is logged.
This provides:
1. Traceability from a projection back to the assumptions behind it
2. Debugging capability
3. A history the user can look back on

The audit logger:
- Is async to not block main flow
- Gracefully handles failures (doesn't crash the planner if logging fails)
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from finplan.config import get_settings
from finplan.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from finplan.models.validation import ValidationIssue
from finplan.services.storage import AuditStorageInterface


def configure_logging(level: Optional[str] = None) -> None:
    """Configure stdlib logging and structlog for JSON output."""
    level = level or get_settings().app.log_level
    logging.basicConfig(format="%(message)s", level=getattr(logging, level))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence and user visibility)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_spending_analyzed(
        self,
        analyzed_months: int,
        total_expense: float,
        category_count: int,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.spending_analyzed(
            analyzed_months=analyzed_months,
            total_expense=total_expense,
            category_count=category_count,
            correlation_id=correlation_id,
        ))

    async def log_reduction_plan(
        self,
        target: float,
        total_reduction: float,
        categories: list[str],
        correlation_id: UUID,
    ) -> None:
        """Log a reduction plan (or the lack of one)."""
        await self.log(AuditEventBuilder.reduction_plan_generated(
            target=target,
            total_reduction=total_reduction,
            categories=categories,
            correlation_id=correlation_id,
        ))

    async def log_scenario_generated(
        self,
        scenario_id: str,
        monthly_expense_change: float,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.scenario_generated(
            scenario_id=scenario_id,
            monthly_expense_change=monthly_expense_change,
            correlation_id=correlation_id,
        ))

    async def log_simulation_completed(
        self,
        simulation_id: UUID,
        years: int,
        baseline_final_net_worth: int,
        scenario_count: int,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.simulation_completed(
            simulation_id=simulation_id,
            years=years,
            baseline_final_net_worth=baseline_final_net_worth,
            scenario_count=scenario_count,
            correlation_id=correlation_id,
        ))

    async def log_input_rejected(
        self,
        issues: list[ValidationIssue],
        correlation_id: UUID,
    ) -> None:
        """Log a simulation input that failed validation."""
        await self.log(AuditEventBuilder.input_validation_failed(
            issues=[issue.model_dump() for issue in issues],
            correlation_id=correlation_id,
        ))

    async def log_transaction_saved(
        self,
        transaction_id: UUID,
        category: str,
        amount: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.transaction_saved(
            transaction_id=transaction_id,
            category=category,
            amount=amount,
            correlation_id=correlation_id,
        ))

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))

    async def log_storage_error(
        self,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a planning session.
    Pass it through all subsequent operations.
    """
    return uuid4()
