"""
Record store for the student records manager.

Owns the ordered sequence of student records, enforces the uniqueness of
registration numbers (case-insensitive, whitespace-trimmed) and writes the whole
sequence to its durable slot after every mutation.

Usage:
    from student_records.infrastructure import JsonFileStorage
    from student_records.store import RecordStore

    store = RecordStore.open(JsonFileStorage(".student_records"))
    store.add({"name": "Alice", "reg": "R1", "dept": "CS", "year": "2", "marks": 90})
    for record, position in store.list_records("alice"):
        print(position, record.name)

Positions are indexes into the sequence at the moment of listing. They are not
stable identifiers: after `remove(p)` every record past `p` moves down by one,
so callers holding positions must list again.
"""

from __future__ import annotations

from typing import Any, Iterator, List, Mapping, Optional, Union

from student_records.domain.models import ListedRecord, StudentRecord, normalize_registration
from student_records.errors import DuplicateKeyError, NotFoundError, StorageError, ValidationError
from student_records.infrastructure.storage import KeyValueStorage
from student_records.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_SLOT = "students"

RecordInput = Union[StudentRecord, Mapping[str, Any]]


class RecordListing:
    """
    Lazy, restartable view over the store.

    Nothing is evaluated until iteration, and every new iteration scans the
    store's current contents again.
    """

    def __init__(self, store: "RecordStore", filter_text: Optional[str] = None) -> None:
        self._store = store
        self.filter_text = (filter_text or "").strip().lower()

    def _matches(self, record: StudentRecord) -> bool:
        if not self.filter_text:
            return True
        return self.filter_text in record.name.lower() or self.filter_text in record.reg.lower()

    def __iter__(self) -> Iterator[ListedRecord]:
        for position, record in enumerate(self._store.records):
            if self._matches(record):
                yield ListedRecord(record, position)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        return f"RecordListing(filter_text={self.filter_text!r})"


class RecordStore:
    """
    Ordered, uniqueness-constrained collection of student records.

    Every mutation either fully succeeds (sequence changed and persisted) or
    fully fails (nothing changed in memory or in the slot).

    Parameters
    ----------
    storage : KeyValueStorage
        Backend holding the durable slot.
    slot : str
        Name of the slot holding the serialized sequence.
    records : list[StudentRecord] | None
        Initial contents; use `RecordStore.open` to load them from the slot.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        slot: str = DEFAULT_SLOT,
        records: Optional[List[StudentRecord]] = None,
    ) -> None:
        self.storage = storage
        self.slot = slot
        self._records: List[StudentRecord] = list(records or [])

    @classmethod
    def open(cls, storage: KeyValueStorage, slot: str = DEFAULT_SLOT) -> "RecordStore":
        """
        Load the store from its slot. An absent slot yields an empty store.

        Raises
        ------
        StorageError
            When the slot holds something other than a list of valid records
            with distinct registration numbers.
        """
        payload = storage.get(slot)
        if payload is None:
            log.info("Records slot absent, starting empty", extra={"slot": slot})
            return cls(storage, slot)
        if not isinstance(payload, list):
            raise StorageError(f"Slot '{slot}' does not hold a list of records")

        records: List[StudentRecord] = []
        seen: set[str] = set()
        for index, item in enumerate(payload):
            if not isinstance(item, Mapping):
                raise StorageError(f"Slot '{slot}' entry {index} is not an object")
            try:
                record = StudentRecord.parse(item)
            except ValidationError as exc:
                raise StorageError(f"Slot '{slot}' entry {index} is invalid: {exc}") from exc
            if record.registration_key in seen:
                raise StorageError(
                    f"Slot '{slot}' entry {index} repeats registration number '{record.reg}'"
                )
            seen.add(record.registration_key)
            records.append(record)

        log.info("Records loaded", extra={"slot": slot, "count": len(records)})
        return cls(storage, slot, records)

    # ------------------------------------------------------------------ reads

    @property
    def records(self) -> List[StudentRecord]:
        """Snapshot copy of the current sequence."""
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[StudentRecord]:
        return iter(self.records)

    def get(self, position: int) -> StudentRecord:
        self._check_position(position)
        return self._records[position]

    def list_records(self, filter_text: Optional[str] = None) -> RecordListing:
        """
        Records whose name or registration number contains `filter_text`
        (case-insensitive), each paired with its position in the full sequence.
        An empty or missing filter lists everything.
        """
        return RecordListing(self, filter_text)

    def is_duplicate_registration(self, reg: str, exclude_position: Optional[int] = None) -> bool:
        """
        True when a record other than the one at `exclude_position` has the same
        registration number under trimmed, case-insensitive comparison.
        """
        key = normalize_registration(reg)
        return any(
            record.registration_key == key and position != exclude_position
            for position, record in enumerate(self._records)
        )

    # -------------------------------------------------------------- mutations

    def add(self, record: RecordInput) -> StudentRecord:
        """
        Validate and append a record, then persist.

        Raises
        ------
        ValidationError
            Empty name/registration number, or marks outside [0, 100].
        DuplicateKeyError
            The registration number is already taken.
        StorageError
            The slot could not be written; the record is not saved.
        """
        validated = StudentRecord.parse(record)
        if self.is_duplicate_registration(validated.reg):
            log.warning("Duplicate registration rejected", extra={"reg": validated.reg})
            raise DuplicateKeyError(validated.reg)

        self._commit(self._records + [validated])
        log.info(
            "Record added",
            extra={"reg": validated.reg, "position": len(self._records) - 1},
        )
        return validated

    def update(self, position: int, record: RecordInput) -> StudentRecord:
        """
        Replace the record at `position` in place, then persist.

        The uniqueness check ignores the record being replaced, so resubmitting
        its own registration number is accepted.

        Raises
        ------
        NotFoundError
            `position` does not address a record.
        ValidationError, DuplicateKeyError, StorageError
            As for `add`.
        """
        self._check_position(position)
        validated = StudentRecord.parse(record)
        if self.is_duplicate_registration(validated.reg, exclude_position=position):
            log.warning(
                "Duplicate registration rejected",
                extra={"reg": validated.reg, "position": position},
            )
            raise DuplicateKeyError(validated.reg)

        updated = list(self._records)
        updated[position] = validated
        self._commit(updated)
        log.info("Record updated", extra={"reg": validated.reg, "position": position})
        return validated

    def remove(self, position: int) -> StudentRecord:
        """
        Remove the record at `position`, then persist. Records after it shift
        down by one position.

        Raises
        ------
        NotFoundError
            `position` does not address a record.
        StorageError
            The slot could not be written; nothing is removed.
        """
        self._check_position(position)
        updated = list(self._records)
        removed = updated.pop(position)
        self._commit(updated)
        log.info("Record removed", extra={"reg": removed.reg, "position": position})
        return removed

    # ---------------------------------------------------------------- helpers

    def _check_position(self, position: int) -> None:
        if isinstance(position, bool) or not isinstance(position, int):
            raise NotFoundError(position, len(self._records))
        if not 0 <= position < len(self._records):
            raise NotFoundError(position, len(self._records))

    def _commit(self, records: List[StudentRecord]) -> None:
        # Persist first; memory only changes once the slot holds the new sequence.
        self.storage.set(self.slot, [record.model_dump() for record in records])
        self._records = records


__all__ = ["RecordStore", "RecordListing", "RecordInput", "DEFAULT_SLOT"]
