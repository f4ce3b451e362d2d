"""
Audit Models for the Net-Worth Planner

Every planning run (analysis, reduction plan, projection) leaves an audit
event, so a user can see which assumptions produced which projection.

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Spending analysis
    SPENDING_ANALYZED = "spending_analyzed"
    REDUCTION_PLAN_GENERATED = "reduction_plan_generated"
    REDUCTION_PLAN_EMPTY = "reduction_plan_empty"

    # Projection
    SIMULATION_COMPLETED = "simulation_completed"
    SCENARIO_GENERATED = "scenario_generated"
    INPUT_VALIDATION_FAILED = "input_validation_failed"

    # Records
    TRANSACTION_SAVED = "transaction_saved"

    # System events
    SYSTEM_ERROR = "system_error"
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant planning action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'analysis', 'simulation', 'transaction')"
    )
    entity_id: Optional[UUID] = None

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one planning session)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_sheets_row(self) -> list:
        """
        Convert to a row suitable for Google Sheets storage.

        Returns columns in order:
        [event_id, timestamp, event_type, severity, entity_type, entity_id,
         correlation_id, description, details_json, error_message, is_user_action]
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.entity_type or "",
            str(self.entity_id) if self.entity_id else "",
            str(self.correlation_id) if self.correlation_id else "",
            self.description,
            json.dumps(self.details) if self.details else "",
            self.error_message or "",
            str(self.is_user_action),
        ]


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.spending_analyzed(months, total, count, correlation_id)
    """

    @staticmethod
    def spending_analyzed(
        analyzed_months: int,
        total_expense: float,
        category_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPENDING_ANALYZED,
            entity_type="analysis",
            correlation_id=correlation_id,
            description=(
                f"Spending analyzed over {analyzed_months} month(s): "
                f"{category_count} categories"
            ),
            details={
                "analyzed_months": analyzed_months,
                "total_expense": round(total_expense),
                "category_count": category_count,
            },
        )

    @staticmethod
    def reduction_plan_generated(
        target: float,
        total_reduction: float,
        categories: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        if not categories:
            return AuditEvent(
                event_type=AuditEventType.REDUCTION_PLAN_EMPTY,
                severity=AuditSeverity.WARNING,
                entity_type="analysis",
                correlation_id=correlation_id,
                description="No category could contribute to the savings target",
                details={"target": round(target)},
            )
        return AuditEvent(
            event_type=AuditEventType.REDUCTION_PLAN_GENERATED,
            entity_type="analysis",
            correlation_id=correlation_id,
            description=f"Reduction plan covers {round(total_reduction)} of {round(target)}",
            details={
                "target": round(target),
                "total_reduction": round(total_reduction),
                "categories": categories,
            },
        )

    @staticmethod
    def simulation_completed(
        simulation_id: UUID,
        years: int,
        baseline_final_net_worth: int,
        scenario_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SIMULATION_COMPLETED,
            entity_type="simulation",
            entity_id=simulation_id,
            correlation_id=correlation_id,
            description=f"{years}-year projection completed with {scenario_count} scenario(s)",
            details={
                "years": years,
                "baseline_final_net_worth": baseline_final_net_worth,
                "scenario_count": scenario_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def scenario_generated(
        scenario_id: str,
        monthly_expense_change: float,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SCENARIO_GENERATED,
            entity_type="scenario",
            correlation_id=correlation_id,
            description=f"Scenario generated: {scenario_id}",
            details={
                "scenario_id": scenario_id,
                "monthly_expense_change": round(monthly_expense_change),
            },
            is_user_action=True,
        )

    @staticmethod
    def input_validation_failed(
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INPUT_VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="simulation",
            correlation_id=correlation_id,
            description=f"Simulation input rejected with {len(issues)} issue(s)",
            details={"issues": issues},
        )

    @staticmethod
    def transaction_saved(
        transaction_id: UUID,
        category: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_SAVED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction saved: {category} {amount}",
            details={
                "category": category,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={"operation": operation},
            correlation_id=correlation_id,
        )
