"""
Infrastructure package for the student records manager.

Exports the durable slot backends used by the store and the theme preference.
"""

from student_records.infrastructure.storage import (
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorage,
)

__all__ = [
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorage",
]
