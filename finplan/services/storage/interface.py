"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap Google Sheets for a real database later
2. Use in-memory storage for testing
3. Keep planning logic decoupled from storage implementation

The interface is intentionally simple - we're not building a full ORM.
Just the operations the planner needs: transactions, assets and goals.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional
from uuid import UUID

from finplan.models.audit import AuditEvent
from finplan.models.finance import Asset, CategoryId, Goal, Transaction


class FinanceStorageInterface(ABC):
    """
    Abstract interface for the record store.

    Any storage implementation (Google Sheets, PostgreSQL, etc.)
    must implement these methods.
    """

    @abstractmethod
    async def save_transaction(self, transaction: Transaction) -> bool:
        """
        Save a transaction.

        Returns:
            True if saved successfully

        Raises:
            DuplicateError: If a transaction with the same ID exists
            StorageError: If save fails
        """
        pass

    @abstractmethod
    async def get_transaction_by_id(self, transaction_id: UUID) -> Optional[Transaction]:
        pass

    @abstractmethod
    async def delete_transaction(self, transaction_id: UUID) -> bool:
        """
        Delete a transaction by ID.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        pass

    @abstractmethod
    async def list_transactions(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        category: Optional[CategoryId] = None,
        limit: Optional[int] = None,
    ) -> list[Transaction]:
        """
        List transactions with optional filters, oldest first.

        Args:
            date_from: Transactions on or after this date
            date_to: Transactions on or before this date
            category: Only this category
            limit: Maximum number of results
        """
        pass

    @abstractmethod
    async def save_asset(self, asset: Asset) -> bool:
        """Insert or replace an asset by ID."""
        pass

    @abstractmethod
    async def list_assets(self) -> list[Asset]:
        pass

    @abstractmethod
    async def save_goal(self, goal: Goal) -> bool:
        """Insert or replace a goal by ID."""
        pass

    @abstractmethod
    async def list_goals(self, include_completed: bool = False) -> list[Goal]:
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one planning session).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
