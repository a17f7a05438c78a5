from __future__ import annotations

import pytest

from student_records.domain.models import ListedRecord, StudentRecord
from student_records.errors import DuplicateKeyError, NotFoundError, StorageError, ValidationError
from student_records.infrastructure.storage import InMemoryStorage
from student_records.store import DEFAULT_SLOT, RecordStore
from tests.conftest import SAMPLE_STUDENTS

ALICE = {"name": "Alice", "reg": "R1", "dept": "CS", "year": "2", "marks": 90}
BOB = {"name": "Bob", "reg": "r1", "dept": "EE", "year": "1", "marks": 70}


def _regs(store: RecordStore) -> list[str]:
    return [record.reg for record, _ in store.list_records("")]


def test_example_walkthrough(store: RecordStore) -> None:
    store.add(ALICE)

    with pytest.raises(DuplicateKeyError):
        store.add(BOB)

    listed = list(store.list_records("alice"))
    assert len(listed) == 1
    assert listed[0].record.name == "Alice"
    assert listed[0].position == 0

    store.remove(0)
    assert list(store.list_records("")) == []


def test_list_returns_records_in_insertion_order(seeded_store: RecordStore) -> None:
    listed = list(seeded_store.list_records(""))
    assert [item.record.reg for item in listed] == [s["reg"] for s in SAMPLE_STUDENTS]
    assert [item.position for item in listed] == [0, 1, 2]
    assert all(isinstance(item, ListedRecord) for item in listed)


def test_list_filter_matches_name_or_reg_case_insensitively(seeded_store: RecordStore) -> None:
    by_name = [item.record.reg for item in seeded_store.list_records("ALI")]
    assert by_name == ["CSE001", "MECH003"]

    by_reg = list(seeded_store.list_records("ece"))
    assert [(item.record.reg, item.position) for item in by_reg] == [("ECE002", 1)]


def test_list_filter_keeps_original_positions(seeded_store: RecordStore) -> None:
    listed = list(seeded_store.list_records("mech"))
    assert listed == [ListedRecord(seeded_store.get(2), 2)]


def test_list_filter_is_trimmed_and_none_lists_all(seeded_store: RecordStore) -> None:
    assert len(seeded_store.list_records("  bala  ")) == 1
    assert len(seeded_store.list_records(None)) == 3
    assert len(seeded_store.list_records("   ")) == 3


def test_listing_is_lazy_and_restartable(store: RecordStore) -> None:
    listing = store.list_records("")
    store.add(ALICE)

    assert [item.record.reg for item in listing] == ["R1"]
    assert [item.record.reg for item in listing] == ["R1"]

    store.add({**BOB, "reg": "R2"})
    assert [item.record.reg for item in listing] == ["R1", "R2"]


@pytest.mark.parametrize("reg", ["r1", " R1 ", "R1", "  r1"])
def test_add_rejects_duplicate_registration(store: RecordStore, reg: str) -> None:
    store.add(ALICE)

    with pytest.raises(DuplicateKeyError) as excinfo:
        store.add({**BOB, "reg": reg})

    assert excinfo.value.reg == reg.strip()
    assert _regs(store) == ["R1"]


@pytest.mark.parametrize("marks", [101, -1, "abc", "", "12.5", 50.5, None, True])
def test_add_rejects_invalid_marks(store: RecordStore, marks: object) -> None:
    with pytest.raises(ValidationError) as excinfo:
        store.add({**ALICE, "marks": marks})

    assert excinfo.value.field == "marks"
    assert len(store) == 0
    assert store.storage.get(DEFAULT_SLOT) is None


@pytest.mark.parametrize("field", ["name", "reg"])
def test_add_rejects_blank_mandatory_fields(store: RecordStore, field: str) -> None:
    with pytest.raises(ValidationError) as excinfo:
        store.add({**ALICE, field: "   "})

    assert excinfo.value.field == field
    assert len(store) == 0


def test_add_trims_fields_and_stores_integer_marks(store: RecordStore) -> None:
    record = store.add({"name": "  Alice ", "reg": " R1", "dept": " CS ", "year": "2 ", "marks": " 090 "})

    assert record == StudentRecord(name="Alice", reg="R1", dept="CS", year="2", marks=90)
    assert store.storage.get(DEFAULT_SLOT) == [
        {"name": "Alice", "reg": "R1", "dept": "CS", "year": "2", "marks": 90}
    ]


def test_add_accepts_boundary_marks(store: RecordStore) -> None:
    store.add({**ALICE, "marks": 0})
    store.add({**ALICE, "reg": "R2", "marks": "100"})
    assert [record.marks for record in store] == [0, 100]


def test_add_persists_before_returning(memory_storage: InMemoryStorage) -> None:
    store = RecordStore.open(memory_storage)
    store.add(ALICE)

    reopened = RecordStore.open(memory_storage)
    assert reopened.records == store.records


def test_update_accepts_own_registration_number(seeded_store: RecordStore) -> None:
    current = seeded_store.get(1)

    updated = seeded_store.update(1, {**current.model_dump(), "marks": 99})

    assert updated.marks == 99
    assert seeded_store.get(1).marks == 99
    assert len(seeded_store) == 3


def test_update_accepts_own_registration_in_other_case(seeded_store: RecordStore) -> None:
    updated = seeded_store.update(0, {**SAMPLE_STUDENTS[0], "reg": "cse001"})
    assert updated.reg == "cse001"


def test_update_rejects_registration_of_another_record(seeded_store: RecordStore) -> None:
    before = seeded_store.records

    with pytest.raises(DuplicateKeyError):
        seeded_store.update(0, {**SAMPLE_STUDENTS[0], "reg": "ece002"})

    assert seeded_store.records == before


def test_update_keeps_position(seeded_store: RecordStore) -> None:
    seeded_store.update(1, {**SAMPLE_STUDENTS[1], "name": "Bala N."})
    assert [item.record.name for item in seeded_store.list_records("")] == [
        "Alice Kumar",
        "Bala N.",
        "Chen Alison",
    ]


@pytest.mark.parametrize("position", [3, 10, -1])
def test_update_out_of_range_raises_not_found(seeded_store: RecordStore, position: int) -> None:
    with pytest.raises(NotFoundError) as excinfo:
        seeded_store.update(position, ALICE)
    assert excinfo.value.position == position


def test_update_validates_like_add(seeded_store: RecordStore) -> None:
    with pytest.raises(ValidationError):
        seeded_store.update(0, {**SAMPLE_STUDENTS[0], "marks": 101})
    assert seeded_store.get(0).marks == SAMPLE_STUDENTS[0]["marks"]


def test_remove_shifts_later_positions_down(seeded_store: RecordStore) -> None:
    removed = seeded_store.remove(0)

    assert removed.reg == "CSE001"
    listed = list(seeded_store.list_records(""))
    assert [(item.record.reg, item.position) for item in listed] == [("ECE002", 0), ("MECH003", 1)]


def test_remove_at_stale_position_raises_not_found(seeded_store: RecordStore) -> None:
    seeded_store.remove(2)

    with pytest.raises(NotFoundError):
        seeded_store.remove(2)
    assert len(seeded_store) == 2


def test_remove_rejects_negative_position(seeded_store: RecordStore) -> None:
    with pytest.raises(NotFoundError):
        seeded_store.remove(-1)
    assert len(seeded_store) == 3


def test_not_found_is_an_index_error(store: RecordStore) -> None:
    with pytest.raises(IndexError):
        store.get(0)


def test_is_duplicate_registration_respects_exclusion(seeded_store: RecordStore) -> None:
    assert seeded_store.is_duplicate_registration(" cse001 ")
    assert not seeded_store.is_duplicate_registration("cse001", exclude_position=0)
    assert seeded_store.is_duplicate_registration("cse001", exclude_position=1)
    assert not seeded_store.is_duplicate_registration("NEW")


def test_failed_write_leaves_store_unchanged(failing_storage) -> None:
    store = RecordStore.open(failing_storage)
    store.add(ALICE)
    failing_storage.fail_writes = True

    with pytest.raises(StorageError):
        store.add({**BOB, "reg": "R2"})
    with pytest.raises(StorageError):
        store.update(0, {**ALICE, "marks": 10})
    with pytest.raises(StorageError):
        store.remove(0)

    assert store.records == [StudentRecord(**ALICE)]
    assert failing_storage.get(DEFAULT_SLOT) == [ALICE]


def test_open_absent_slot_is_empty(memory_storage: InMemoryStorage) -> None:
    assert len(RecordStore.open(memory_storage)) == 0


def test_open_normalizes_text_marks() -> None:
    storage = InMemoryStorage(
        {DEFAULT_SLOT: [{"name": "Alice", "reg": "R1", "dept": "CS", "year": "2", "marks": "090"}]}
    )

    store = RecordStore.open(storage)

    assert store.get(0).marks == 90


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "not a list"},
        ["not an object"],
        [{**ALICE, "marks": 150}],
        [ALICE, {**BOB}],
    ],
)
def test_open_rejects_corrupt_slot(payload: object) -> None:
    storage = InMemoryStorage({DEFAULT_SLOT: payload})

    with pytest.raises(StorageError):
        RecordStore.open(storage)


def test_custom_slot_name(memory_storage: InMemoryStorage) -> None:
    store = RecordStore.open(memory_storage, slot="class_2024")
    store.add(ALICE)

    assert memory_storage.get("class_2024") == [ALICE]
    assert memory_storage.get(DEFAULT_SLOT) is None
