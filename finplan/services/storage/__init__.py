"""
Storage Services Package

Provides abstract interfaces and concrete implementations for the record
store and the audit log. Google Sheets is the persistent backend; the
in-memory implementations serve tests and offline use.
"""

from finplan.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    DuplicateError,
    FinanceStorageInterface,
    NotFoundError,
    StorageError,
)
from finplan.services.storage.google_sheets import (
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsFinanceStorage,
)
from finplan.services.storage.memory import InMemoryAuditStorage, InMemoryFinanceStorage

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "FinanceStorageInterface",
    # Exceptions
    "ConnectionError",
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # Google Sheets implementation
    "GoogleSheetsAuditStorage",
    "GoogleSheetsClient",
    "GoogleSheetsFinanceStorage",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryFinanceStorage",
]
