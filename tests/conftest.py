"""
Pytest configuration for the student records manager.

Provides fixtures for:
- Settings pointing at a temporary data directory
- In-memory and file-backed slot storage
- Empty and seeded record stores, and a session around them
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Generator, List

import pytest

from student_records.config import Settings, get_settings
from student_records.errors import StorageError
from student_records.infrastructure.storage import InMemoryStorage, JsonFileStorage
from student_records.session import StudentSession
from student_records.store import RecordStore

SAMPLE_STUDENTS: List[Dict[str, Any]] = [
    {"name": "Alice Kumar", "reg": "CSE001", "dept": "CSE", "year": "2", "marks": 90},
    {"name": "Bala Novak", "reg": "ECE002", "dept": "ECE", "year": "1", "marks": 72},
    {"name": "Chen Alison", "reg": "MECH003", "dept": "MECH", "year": "3", "marks": 55},
]


class FailingStorage(InMemoryStorage):
    """Slot storage whose writes fail once `fail_writes` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_writes = False

    def set(self, key: str, value: Any) -> None:
        if self.fail_writes:
            raise StorageError("quota exceeded")
        super().set(key, value)


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Generator[None, None, None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings fixture with the data directory under pytest's tmp_path.
    """
    return Settings(data_dir=tmp_path / "data", log_level="DEBUG")


@pytest.fixture
def memory_storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def file_storage(test_settings: Settings) -> JsonFileStorage:
    return JsonFileStorage(test_settings.data_dir)


@pytest.fixture
def failing_storage() -> FailingStorage:
    return FailingStorage()


@pytest.fixture
def store(memory_storage: InMemoryStorage) -> RecordStore:
    return RecordStore.open(memory_storage)


@pytest.fixture
def seeded_store(store: RecordStore) -> RecordStore:
    """
    Store holding SAMPLE_STUDENTS in order (positions 0, 1, 2).
    """
    for student in SAMPLE_STUDENTS:
        store.add(student)
    return store


@pytest.fixture
def session(seeded_store: RecordStore) -> StudentSession:
    return StudentSession(seeded_store)
