"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is used as the record store because:
1. Users can view and edit their ledger directly in Sheets
2. No database setup required
3. Easy to export/migrate later

TRADEOFFS:
- Not suitable for high-volume data (we're fine for a personal ledger)
- No transactions (we handle this with careful ordering)
- Limited query capabilities (we filter in Python)

One worksheet per record type. Amounts are written as decimal strings so
the round trip through Sheets never goes via float.
"""

import json
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional, TypeVar
from uuid import UUID

import gspread
import structlog
from google.oauth2.service_account import Credentials
from tenacity import retry, retry_if_not_exception_type, stop_after_attempt, wait_exponential

from finplan.config import get_settings
from finplan.models.audit import AuditEvent, AuditEventType, AuditSeverity
from finplan.models.finance import Asset, AssetType, CategoryId, Goal, Transaction
from finplan.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    DuplicateError,
    FinanceStorageInterface,
    NotFoundError,
    StorageError,
)


logger = structlog.get_logger(__name__)

T = TypeVar("T")


TRANSACTION_COLUMNS = [
    "id",
    "transaction_date",
    "category_id",
    "amount",
    "memo",
    "is_recurring",
    "recurring_day",
    "created_at",
]

ASSET_COLUMNS = [
    "id",
    "type",
    "name",
    "amount",
    "interest_rate",
    "notes",
]

GOAL_COLUMNS = [
    "id",
    "type",
    "name",
    "target_amount",
    "current_amount",
    "target_date",
    "is_completed",
    "created_at",
]

AUDIT_COLUMNS = [
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "entity_type",
    "entity_id",
    "correlation_id",
    "description",
    "details_json",
    "error_message",
    "is_user_action",
]


def _cell(row: list, index: int, default: str = "") -> str:
    """Read a cell, tolerating short rows and blanks."""
    try:
        return row[index] if row[index] else default
    except IndexError:
        return default


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(self._settings.spreadsheet_id)
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_worksheet(self, title: str, columns: list[str], rows: int = 1000) -> gspread.Worksheet:
        """Get a worksheet, creating it with a header row if missing."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(title=title, rows=rows, cols=len(columns))
            sheet.append_row(columns)
        return sheet

    def get_transactions_sheet(self) -> gspread.Worksheet:
        return self.get_worksheet(self._settings.transactions_sheet_name, TRANSACTION_COLUMNS)

    def get_assets_sheet(self) -> gspread.Worksheet:
        return self.get_worksheet(self._settings.assets_sheet_name, ASSET_COLUMNS)

    def get_goals_sheet(self) -> gspread.Worksheet:
        return self.get_worksheet(self._settings.goals_sheet_name, GOAL_COLUMNS)

    def get_audit_sheet(self) -> gspread.Worksheet:
        # More rows for the audit log
        return self.get_worksheet(self._settings.audit_sheet_name, AUDIT_COLUMNS, rows=5000)


# =============================================================================
# ROW CONVERSION
# =============================================================================

def transaction_to_row(transaction: Transaction) -> list:
    return [
        str(transaction.id),
        transaction.transaction_date.isoformat(),
        transaction.category_id.value,
        str(transaction.amount),
        transaction.memo or "",
        str(transaction.is_recurring),
        str(transaction.recurring_day) if transaction.recurring_day else "",
        transaction.created_at.isoformat(),
    ]


def row_to_transaction(row: list) -> Transaction:
    return Transaction(
        id=UUID(_cell(row, 0)),
        transaction_date=date.fromisoformat(_cell(row, 1)),
        category_id=CategoryId(_cell(row, 2)),
        amount=Decimal(_cell(row, 3)),
        memo=_cell(row, 4) or None,
        is_recurring=_cell(row, 5).lower() == "true",
        recurring_day=int(_cell(row, 6)) if _cell(row, 6) else None,
        created_at=datetime.fromisoformat(_cell(row, 7)) if _cell(row, 7) else datetime.utcnow(),
    )


def asset_to_row(asset: Asset) -> list:
    return [
        str(asset.id),
        asset.type.value,
        asset.name,
        str(asset.amount),
        str(asset.interest_rate) if asset.interest_rate is not None else "",
        asset.notes or "",
    ]


def row_to_asset(row: list) -> Asset:
    return Asset(
        id=UUID(_cell(row, 0)),
        type=_cell(row, 1, AssetType.OTHER.value),
        name=_cell(row, 2),
        amount=Decimal(_cell(row, 3, "0")),
        interest_rate=float(_cell(row, 4)) if _cell(row, 4) else None,
        notes=_cell(row, 5) or None,
    )


def goal_to_row(goal: Goal) -> list:
    return [
        str(goal.id),
        goal.type,
        goal.name,
        str(goal.target_amount),
        str(goal.current_amount),
        goal.target_date.isoformat() if goal.target_date else "",
        str(goal.is_completed),
        goal.created_at.isoformat(),
    ]


def row_to_goal(row: list) -> Goal:
    return Goal(
        id=UUID(_cell(row, 0)),
        type=_cell(row, 1, "custom"),
        name=_cell(row, 2),
        target_amount=Decimal(_cell(row, 3, "0")),
        current_amount=Decimal(_cell(row, 4, "0")),
        target_date=date.fromisoformat(_cell(row, 5)) if _cell(row, 5) else None,
        is_completed=_cell(row, 6).lower() == "true",
        created_at=datetime.fromisoformat(_cell(row, 7)) if _cell(row, 7) else datetime.utcnow(),
    )


def row_to_event(row: list) -> AuditEvent:
    return AuditEvent(
        event_id=UUID(_cell(row, 0)),
        timestamp=datetime.fromisoformat(_cell(row, 1)),
        event_type=AuditEventType(_cell(row, 2)),
        severity=AuditSeverity(_cell(row, 3)),
        entity_type=_cell(row, 4) or None,
        entity_id=UUID(_cell(row, 5)) if _cell(row, 5) else None,
        correlation_id=UUID(_cell(row, 6)) if _cell(row, 6) else None,
        description=_cell(row, 7),
        details=json.loads(_cell(row, 8)) if _cell(row, 8) else {},
        error_message=_cell(row, 9) or None,
        is_user_action=_cell(row, 10).lower() == "true",
    )


def _parse_rows(rows: list[list], parse: Callable[[list], T], sheet_name: str) -> list[T]:
    """Parse data rows, skipping blanks and logging malformed ones."""
    records = []
    for index, row in enumerate(rows, start=2):
        if not row or not row[0]:
            continue
        try:
            records.append(parse(row))
        except (ValueError, KeyError, InvalidOperation) as e:
            logger.warning("malformed_row_skipped", sheet=sheet_name, row=index, error=str(e))
    return records


# =============================================================================
# STORAGE
# =============================================================================

class GoogleSheetsFinanceStorage(FinanceStorageInterface):
    """
    Google Sheets implementation of the record store.

    One row per transaction, asset or goal. Assets and goals are upserted
    by ID; transactions are append-only apart from deletion.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _upsert(self, sheet: gspread.Worksheet, row: list) -> None:
        all_rows = sheet.get_all_values()
        for idx, existing in enumerate(all_rows[1:], start=2):  # Row 1 is the header
            if existing and existing[0] == row[0]:
                sheet.update(range_name=f"A{idx}", values=[row])
                return
        sheet.append_row(row, value_input_option="RAW")

    @retry(
        retry=retry_if_not_exception_type(DuplicateError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def save_transaction(self, transaction: Transaction) -> bool:
        """Append a transaction to the Transactions sheet."""
        try:
            sheet = self._client.get_transactions_sheet()
            ids = sheet.col_values(1)[1:]
            if str(transaction.id) in ids:
                raise DuplicateError(f"Transaction already exists: {transaction.id}")
            sheet.append_row(transaction_to_row(transaction), value_input_option="RAW")
            return True
        except DuplicateError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save transaction: {e}")

    async def get_transaction_by_id(self, transaction_id: UUID) -> Optional[Transaction]:
        try:
            sheet = self._client.get_transactions_sheet()
            for row in sheet.get_all_values()[1:]:
                if row and row[0] == str(transaction_id):
                    return row_to_transaction(row)
            return None
        except Exception as e:
            raise StorageError(f"Failed to get transaction: {e}")

    async def delete_transaction(self, transaction_id: UUID) -> bool:
        try:
            sheet = self._client.get_transactions_sheet()
            all_rows = sheet.get_all_values()

            for idx, row in enumerate(all_rows[1:], start=2):
                if row and row[0] == str(transaction_id):
                    sheet.delete_rows(idx)
                    return True

            raise NotFoundError(f"Transaction not found: {transaction_id}")
        except NotFoundError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to delete transaction: {e}")

    async def list_transactions(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        category: Optional[CategoryId] = None,
        limit: Optional[int] = None,
    ) -> list[Transaction]:
        try:
            sheet = self._client.get_transactions_sheet()
            rows = sheet.get_all_values()[1:]
        except Exception as e:
            raise StorageError(f"Failed to list transactions: {e}")

        transactions = [
            t for t in _parse_rows(rows, row_to_transaction, "transactions")
            if (date_from is None or t.transaction_date >= date_from)
            and (date_to is None or t.transaction_date <= date_to)
            and (category is None or t.category_id == category)
        ]
        transactions.sort(key=lambda t: t.transaction_date)

        return transactions[:limit] if limit is not None else transactions

    async def save_asset(self, asset: Asset) -> bool:
        try:
            self._upsert(self._client.get_assets_sheet(), asset_to_row(asset))
            return True
        except Exception as e:
            raise StorageError(f"Failed to save asset: {e}")

    async def list_assets(self) -> list[Asset]:
        try:
            rows = self._client.get_assets_sheet().get_all_values()[1:]
        except Exception as e:
            raise StorageError(f"Failed to list assets: {e}")
        return _parse_rows(rows, row_to_asset, "assets")

    async def save_goal(self, goal: Goal) -> bool:
        try:
            self._upsert(self._client.get_goals_sheet(), goal_to_row(goal))
            return True
        except Exception as e:
            raise StorageError(f"Failed to save goal: {e}")

    async def list_goals(self, include_completed: bool = False) -> list[Goal]:
        try:
            rows = self._client.get_goals_sheet().get_all_values()[1:]
        except Exception as e:
            raise StorageError(f"Failed to list goals: {e}")

        goals = _parse_rows(rows, row_to_goal, "goals")
        if include_completed:
            return goals
        return [g for g in goals if not g.is_completed]


class GoogleSheetsAuditStorage(AuditStorageInterface):
    """
    Google Sheets implementation of audit log storage.

    Audit events are append-only.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event; failures are logged, never raised."""
        try:
            sheet = self._client.get_audit_sheet()
            sheet.append_row(event.to_sheets_row(), value_input_option="RAW")
            return True
        except Exception as e:
            # Audit logging should not break the main flow
            logger.warning("audit_write_failed", event_id=str(event.event_id), error=str(e))
            return False

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        try:
            rows = self._client.get_audit_sheet().get_all_values()[1:]
        except Exception as e:
            raise StorageError(f"Failed to get audit events: {e}")

        matching = [row for row in rows if len(row) > 6 and row[6] == str(correlation_id)]
        events = _parse_rows(matching, row_to_event, "audit")
        events.sort(key=lambda e: e.timestamp)
        return events

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        try:
            rows = self._client.get_audit_sheet().get_all_values()[1:]
        except Exception as e:
            raise StorageError(f"Failed to get audit events: {e}")

        events = _parse_rows(rows, row_to_event, "audit")
        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
