"""
Simulation Input Validation

DESIGN DECISION: Validation happens at the engine boundary, once.

Two classes of problems:

HARD ERRORS (always rejected):
- Negative horizon, or a horizon longer than the configured maximum
- Annual rates at or below -100% (no monthly equivalent exists)
- Negative ages

SOFT PROBLEMS (rejected in strict mode, logged otherwise):
- Retirement age below current age (every month is then a retired month)
- Negative income, expense or pension

IMPORTANT: Validation NEVER silently fixes issues.
Lenient mode runs the input exactly as given and leaves a warning in the log.
"""

from typing import Optional

import structlog

from finplan.config import get_settings
from finplan.models.simulation import SimulationInput
from finplan.models.validation import ValidationIssue, ValidationResult


logger = structlog.get_logger(__name__)


RATE_FIELDS = (
    "annual_inflation_rate",
    "annual_investment_return",
    "annual_income_growth",
    "annual_debt_interest",
    "annual_real_estate_growth",
)

CASH_FLOW_FIELDS = (
    "monthly_income",
    "monthly_expense",
    "monthly_pension",
)


class InvalidSimulationInput(ValueError):
    """Raised when a SimulationInput cannot be projected."""

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        summary = "; ".join(f"{i.field}: {i.message}" for i in issues)
        super().__init__(f"Invalid simulation input: {summary}")


class SimulationInputValidator:
    """
    Checks a SimulationInput before the engine runs it.

    Usage:
        validator = SimulationInputValidator(strict=True)
        validator.validate_or_raise(simulation_input)
    """

    def __init__(
        self,
        strict: Optional[bool] = None,
        max_years: Optional[int] = None,
    ):
        """
        Initialize validator.

        Args:
            strict: Reject soft problems instead of logging them.
                    Defaults to SIMULATION_STRICT_VALIDATION.
            max_years: Longest accepted horizon. Defaults to SIMULATION_MAX_YEARS.
        """
        settings = get_settings().simulation
        self.strict = settings.strict_validation if strict is None else strict
        self.max_years = settings.max_years if max_years is None else max_years

    @property
    def _soft_severity(self) -> str:
        return "error" if self.strict else "warning"

    def _check_horizon(self, simulation_input: SimulationInput) -> list[ValidationIssue]:
        issues = []

        if simulation_input.years < 0:
            issues.append(ValidationIssue(
                field="years",
                issue_type="out_of_range",
                message=f"Horizon must not be negative (got {simulation_input.years})",
                severity="error",
                suggested_fix="Use 0 for a single snapshot of the current month",
            ))
        elif simulation_input.years > self.max_years:
            issues.append(ValidationIssue(
                field="years",
                issue_type="out_of_range",
                message=f"Horizon of {simulation_input.years} years exceeds the maximum of {self.max_years}",
                severity="error",
                suggested_fix=f"Project at most {self.max_years} years",
            ))

        return issues

    def _check_rates(self, simulation_input: SimulationInput) -> list[ValidationIssue]:
        issues = []

        for name in RATE_FIELDS:
            rate = getattr(simulation_input, name)
            if rate <= -1:
                issues.append(ValidationIssue(
                    field=name,
                    issue_type="out_of_range",
                    message=f"Annual rate {rate:.2%} is at or below -100%",
                    severity="error",
                    suggested_fix="Rates are fractions: 0.02 means 2%",
                ))

        return issues

    def _check_ages(self, simulation_input: SimulationInput) -> list[ValidationIssue]:
        issues = []

        for name in ("current_age", "retirement_age"):
            if getattr(simulation_input, name) < 0:
                issues.append(ValidationIssue(
                    field=name,
                    issue_type="negative",
                    message=f"{name} must not be negative",
                    severity="error",
                ))

        if issues:
            return issues

        if simulation_input.retirement_age < simulation_input.current_age:
            issues.append(ValidationIssue(
                field="retirement_age",
                issue_type="inconsistent",
                message=(
                    f"Retirement age ({simulation_input.retirement_age}) is below "
                    f"current age ({simulation_input.current_age}); every month is retired"
                ),
                severity=self._soft_severity,
                suggested_fix="Set retirement_age to current_age or later",
            ))

        return issues

    def _check_cash_flows(self, simulation_input: SimulationInput) -> list[ValidationIssue]:
        issues = []

        for name in CASH_FLOW_FIELDS:
            value = getattr(simulation_input, name)
            if value < 0:
                issues.append(ValidationIssue(
                    field=name,
                    issue_type="negative",
                    message=f"{name} is negative ({value:,.0f})",
                    severity=self._soft_severity,
                    suggested_fix="Cash flows are magnitudes; use a positive amount",
                ))

        return issues

    def validate(self, simulation_input: SimulationInput) -> ValidationResult:
        """
        Run every check and collect the issues.

        Returns:
            ValidationResult; is_valid is False when any issue is an error.
        """
        issues = [
            *self._check_horizon(simulation_input),
            *self._check_rates(simulation_input),
            *self._check_ages(simulation_input),
            *self._check_cash_flows(simulation_input),
        ]

        for issue in issues:
            if issue.severity == "warning":
                logger.warning(
                    "simulation_input_warning",
                    field=issue.field,
                    issue_type=issue.issue_type,
                    message=issue.message,
                )

        return ValidationResult(
            strict=self.strict,
            is_valid=not any(issue.severity == "error" for issue in issues),
            issues=issues,
        )

    def validate_or_raise(self, simulation_input: SimulationInput) -> ValidationResult:
        """Like validate(), but raise InvalidSimulationInput on any error."""
        result = self.validate(simulation_input)
        if not result.is_valid:
            raise InvalidSimulationInput(result.errors)
        return result
