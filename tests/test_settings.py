"""Tests for configuration and the audit logger."""

import asyncio
import pytest
from uuid import uuid4

from pydantic import ValidationError

from finplan.audit import AuditLogger, create_correlation_id
from finplan.config import get_settings, validate_all_settings
from finplan.models import AuditEvent, AuditEventType, AuditSeverity
from finplan.services.storage import InMemoryAuditStorage


class TestSettings:
    """Tests for the environment-driven settings."""

    def test_defaults(self):
        """Test settings defaults."""
        settings = get_settings()
        assert settings.simulation.max_years == 100
        assert settings.simulation.strict_validation is False
        assert settings.simulation.default_monthly_pension == 1_000_000
        assert settings.analyzer.default_lookback_months == 3
        assert settings.analyzer.aggressive_target_ratio == 0.20
        assert settings.app.chart_display_unit == 10_000

    def test_environment_overrides(self, monkeypatch):
        """Test environment variable overrides."""
        monkeypatch.setenv("SIMULATION_MAX_YEARS", "50")
        monkeypatch.setenv("ANALYZER_DEFAULT_LOOKBACK_MONTHS", "6")
        settings = get_settings()
        assert settings.simulation.max_years == 50
        assert settings.analyzer.default_lookback_months == 6

    def test_unknown_economic_preset_is_rejected(self, monkeypatch):
        """Test an unknown economic preset is rejected."""
        monkeypatch.setenv("SIMULATION_DEFAULT_ECONOMIC_SCENARIO", "boom")
        with pytest.raises(ValidationError):
            get_settings().simulation

    def test_sheets_settings_are_optional(self, monkeypatch):
        """Test Google Sheets settings are optional."""
        monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
        monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)
        results = validate_all_settings()
        assert results["simulation"] is True
        assert results["analyzer"] is True
        assert results["google_sheets"] is False
        assert "google_sheets_error" in results


class FailingAuditStorage(InMemoryAuditStorage):
    async def append_event(self, event):
        raise RuntimeError("disk full")


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_local_only(self):
        """Test logging without storage."""
        event = AuditEvent(event_type=AuditEventType.SYSTEM_ERROR, description="x")
        assert asyncio.run(AuditLogger().log(event)) is True

    def test_persists_events(self):
        """Test events are persisted to storage."""
        storage = InMemoryAuditStorage()
        correlation_id = create_correlation_id()
        asyncio.run(AuditLogger(storage).log_error(
            "ValueError", "bad", details={"step": "load"}, correlation_id=correlation_id
        ))

        [event] = storage.events
        assert event.event_type == AuditEventType.SYSTEM_ERROR
        assert event.severity == AuditSeverity.ERROR
        assert event.correlation_id == correlation_id

    def test_storage_failure_is_swallowed(self):
        """Test storage failures do not break logging."""
        event = AuditEvent(event_type=AuditEventType.SPENDING_ANALYZED, description="x")
        assert asyncio.run(AuditLogger(FailingAuditStorage()).log(event)) is False

    def test_correlation_ids_are_unique(self):
        """Test correlation ids are unique."""
        assert create_correlation_id() != create_correlation_id()

    def test_reduction_plan_event(self):
        """Test the reduction plan event."""
        storage = InMemoryAuditStorage()
        asyncio.run(AuditLogger(storage).log_reduction_plan(100_000, 90_000, ["food"], uuid4()))
        assert storage.events[0].event_type == AuditEventType.REDUCTION_PLAN_GENERATED
