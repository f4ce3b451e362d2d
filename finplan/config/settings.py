"""
Configuration Management for the Net-Worth Planner

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The algorithm constants of the analyzer and the engine (70% presence,
CV 0.3, 1,000 minimum reduction) are part of the model and live beside the
code. Only operational knobs are configurable.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SimulationSettings(BaseSettings):
    """Projection engine limits and validation mode."""

    model_config = SettingsConfigDict(
        env_prefix="SIMULATION_",
        extra="ignore"
    )

    max_years: int = Field(
        default=100,
        ge=1,
        le=200,
        description="Longest horizon accepted (years); bounds the emitted sequence"
    )
    strict_validation: bool = Field(
        default=False,
        description="Reject retirement_age < current_age and negative cash flows"
    )
    default_current_age: int = Field(
        default=35,
        ge=0,
        description="Age used when the profile has none"
    )
    default_retirement_age: int = Field(
        default=65,
        ge=0,
        description="Retirement age used when the profile has none"
    )
    default_monthly_pension: float = Field(
        default=1_000_000.0,
        ge=0,
        description="Monthly pension (present value) used by the planning flow"
    )
    default_economic_scenario: str = Field(
        default="neutral",
        pattern="^(neutral|bull|bear)$",
        description="Economic preset applied when none is chosen"
    )


class AnalyzerSettings(BaseSettings):
    """Spending analyzer defaults."""

    model_config = SettingsConfigDict(
        env_prefix="ANALYZER_",
        extra="ignore"
    )

    default_lookback_months: int = Field(
        default=3,
        ge=0,
        le=24,
        description="Months to look back (0 = this calendar month only)"
    )
    aggressive_target_ratio: float = Field(
        default=0.20,
        gt=0.0,
        le=1.0,
        description="Share of monthly expense the aggressive plan tries to cut"
    )


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to use"
    )

    # Sheet names within the spreadsheet
    transactions_sheet_name: str = Field(
        default="Transactions",
        description="Name of the sheet for transactions"
    )
    assets_sheet_name: str = Field(
        default="Assets",
        description="Name of the sheet for assets"
    )
    goals_sheet_name: str = Field(
        default="Goals",
        description="Name of the sheet for goals"
    )
    audit_sheet_name: str = Field(
        default="AuditLog",
        description="Name of the sheet for audit logs"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Root log level"
    )

    # Presentation
    currency_symbol: str = Field(
        default="₩",
        max_length=3,
        description="Symbol used by the formatting helpers"
    )
    chart_display_unit: int = Field(
        default=10_000,
        ge=1,
        description="Divisor applied to amounts in chart points"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Note: These are loaded lazily to allow partial configuration

    @property
    def simulation(self) -> SimulationSettings:
        return SimulationSettings()

    @property
    def analyzer(self) -> AnalyzerSettings:
        return AnalyzerSettings()

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, object]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    settings = get_settings()
    results = {}

    # google_sheets is optional: the planner falls back to in-memory storage
    for name in ("simulation", "analyzer", "google_sheets", "app"):
        try:
            _ = getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
