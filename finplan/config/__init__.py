"""Configuration package."""

from finplan.config.settings import (
    AnalyzerSettings,
    AppSettings,
    GoogleSheetsSettings,
    Settings,
    SimulationSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AnalyzerSettings",
    "AppSettings",
    "GoogleSheetsSettings",
    "Settings",
    "SimulationSettings",
    "get_settings",
    "validate_all_settings",
]
