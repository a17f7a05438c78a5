"""
Student Records Manager - a small records store for student entries.

This package keeps an ordered collection of student records (name, registration
number, department, year, marks) and provides:

- Uniqueness-constrained add/update/remove addressed by position
- Case-insensitive search over names and registration numbers
- Durable JSON slots for the records and the theme preference
- A two-step delete confirmation and a session object for front ends
- A typer CLI with rich table output
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from student_records.config import Settings, get_settings
from student_records.confirmation import DeleteConfirmation
from student_records.domain.models import ListedRecord, StudentRecord, Theme
from student_records.errors import (
    DuplicateKeyError,
    InvalidTransitionError,
    NotFoundError,
    RecordStoreError,
    StorageError,
    ValidationError,
)
from student_records.infrastructure.storage import InMemoryStorage, JsonFileStorage, KeyValueStorage
from student_records.session import Notice, StudentSession
from student_records.store import RecordListing, RecordStore
from student_records.theme import ThemePreference
from student_records.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "ListedRecord",
    "StudentRecord",
    "Theme",
    # Store
    "RecordListing",
    "RecordStore",
    # Storage
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorage",
    # Interaction
    "DeleteConfirmation",
    "Notice",
    "StudentSession",
    "ThemePreference",
    # Errors
    "RecordStoreError",
    "ValidationError",
    "DuplicateKeyError",
    "NotFoundError",
    "StorageError",
    "InvalidTransitionError",
    # Logging
    "configure_logging",
    "get_logger",
]
