"""
In-Memory Storage

Dict-backed implementations of the storage interfaces. Used by tests and
as the fallback when Google Sheets is not configured. Nothing survives
the process.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from finplan.models.audit import AuditEvent
from finplan.models.finance import Asset, CategoryId, Goal, Transaction
from finplan.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    FinanceStorageInterface,
    NotFoundError,
)


class InMemoryFinanceStorage(FinanceStorageInterface):

    def __init__(
        self,
        transactions: Optional[list[Transaction]] = None,
        assets: Optional[list[Asset]] = None,
        goals: Optional[list[Goal]] = None,
    ):
        self._transactions: dict[UUID, Transaction] = {t.id: t for t in transactions or []}
        self._assets: dict[UUID, Asset] = {a.id: a for a in assets or []}
        self._goals: dict[UUID, Goal] = {g.id: g for g in goals or []}

    async def save_transaction(self, transaction: Transaction) -> bool:
        if transaction.id in self._transactions:
            raise DuplicateError(f"Transaction already exists: {transaction.id}")
        self._transactions[transaction.id] = transaction
        return True

    async def get_transaction_by_id(self, transaction_id: UUID) -> Optional[Transaction]:
        return self._transactions.get(transaction_id)

    async def delete_transaction(self, transaction_id: UUID) -> bool:
        if transaction_id not in self._transactions:
            raise NotFoundError(f"Transaction not found: {transaction_id}")
        del self._transactions[transaction_id]
        return True

    async def list_transactions(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        category: Optional[CategoryId] = None,
        limit: Optional[int] = None,
    ) -> list[Transaction]:
        transactions = sorted(
            (
                t for t in self._transactions.values()
                if (date_from is None or t.transaction_date >= date_from)
                and (date_to is None or t.transaction_date <= date_to)
                and (category is None or t.category_id == category)
            ),
            key=lambda t: t.transaction_date,
        )
        return transactions[:limit] if limit is not None else transactions

    async def save_asset(self, asset: Asset) -> bool:
        self._assets[asset.id] = asset
        return True

    async def list_assets(self) -> list[Asset]:
        return list(self._assets.values())

    async def save_goal(self, goal: Goal) -> bool:
        self._goals[goal.id] = goal
        return True

    async def list_goals(self, include_completed: bool = False) -> list[Goal]:
        return [g for g in self._goals.values() if include_completed or not g.is_completed]


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of events."""

    def __init__(self):
        self.events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return sorted(
            (e for e in self.events if e.correlation_id == correlation_id),
            key=lambda e: e.timestamp,
        )

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return sorted(self.events, key=lambda e: e.timestamp, reverse=True)[:limit]
