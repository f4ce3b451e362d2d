"""Input validation for the projection engine."""

from finplan.validation.validator import InvalidSimulationInput, SimulationInputValidator

__all__ = [
    "InvalidSimulationInput",
    "SimulationInputValidator",
]
