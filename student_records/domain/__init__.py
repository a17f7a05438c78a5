"""
Domain package for the student records manager.

Exports the core domain models used by the store, the session and the CLI.
Keep this package focused on data definitions and validation concerns.
"""

from student_records.domain.models import (
    MAX_MARKS,
    MIN_MARKS,
    ListedRecord,
    StudentRecord,
    Theme,
    normalize_registration,
)

__all__ = [
    "ListedRecord",
    "StudentRecord",
    "Theme",
    "normalize_registration",
    "MIN_MARKS",
    "MAX_MARKS",
]
