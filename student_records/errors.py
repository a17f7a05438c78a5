"""
Error hierarchy for the student records store.

Every expected failure of a store operation is a subclass of RecordStoreError so
callers (the session, the CLI) can turn it into a user-facing message. Storage
failures are the exception: they are fatal to the mutation and are never retried.
"""

from __future__ import annotations

from typing import Optional


class RecordStoreError(Exception):
    """Base class for all record store errors."""


class ValidationError(RecordStoreError):
    """A mandatory field is empty or marks are not an integer in [0, 100]."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class DuplicateKeyError(RecordStoreError):
    """The registration number collides with another record."""

    def __init__(self, reg: str) -> None:
        super().__init__(f'The Registration Number "{reg}" already exists!')
        self.reg = reg


class NotFoundError(RecordStoreError, IndexError):
    """The position does not address a record (any more)."""

    def __init__(self, position: int, size: int) -> None:
        super().__init__(f"No record at position {position} (store holds {size}).")
        self.position = position
        self.size = size


class StorageError(RecordStoreError):
    """The durable slot could not be read or written."""


class InvalidTransitionError(RecordStoreError):
    """A confirmation step was requested from the wrong state."""


__all__ = [
    "RecordStoreError",
    "ValidationError",
    "DuplicateKeyError",
    "NotFoundError",
    "StorageError",
    "InvalidTransitionError",
]
