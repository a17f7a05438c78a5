"""
Sample data script for the student records manager.

Generates deterministic pseudo-random student records and writes them through
the record store, so every seeded record passes the same validation and
uniqueness checks as a record typed in by a user.
"""

from __future__ import annotations

import random
from pathlib import Path
from typing import List

import typer

from student_records.config import get_settings
from student_records.domain.models import StudentRecord
from student_records.errors import DuplicateKeyError
from student_records.infrastructure.storage import JsonFileStorage
from student_records.store import RecordStore
from student_records.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Seed the records slot with sample students.")
log = get_logger(__name__)

FIRST_NAMES = ["Alice", "Bala", "Chen", "Divya", "Emeka", "Farah", "Goran", "Hana", "Ivan", "Jaya"]
LAST_NAMES = ["Kumar", "Lopez", "Mensah", "Novak", "Okafor", "Patel", "Quinn", "Rossi", "Sato"]
DEPARTMENTS = ["CSE", "ECE", "EEE", "MECH", "CIVIL", "IT"]


def _generate_records(rows: int, seed: int) -> List[StudentRecord]:
    rng = random.Random(seed)
    records: List[StudentRecord] = []
    for i in range(rows):
        dept = rng.choice(DEPARTMENTS)
        records.append(
            StudentRecord(
                name=f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}",
                reg=f"{dept}{2020 + rng.randint(0, 5)}{i + 1:04d}",
                dept=dept,
                year=str(rng.randint(1, 4)),
                marks=rng.randint(0, 100),
            )
        )
    return records


def _seed_store(store: RecordStore, records: List[StudentRecord]) -> int:
    added = 0
    for record in records:
        try:
            store.add(record)
        except DuplicateKeyError:
            log.warning("Skipping existing registration", extra={"reg": record.reg})
            continue
        added += 1
    return added


@app.command()
def main(
    rows: int = typer.Option(
        25,
        "--rows",
        "-r",
        help="Number of students to generate.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    data_dir: Path | None = typer.Option(
        None,
        "--data-dir",
        help="Directory holding the slot files (defaults to DATA_DIR).",
    ),
) -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    storage = JsonFileStorage(data_dir or settings.data_dir)
    store = RecordStore.open(storage, settings.records_slot)

    added = _seed_store(store, _generate_records(rows, seed))
    typer.echo(f"Seeded {added} of {rows} students into {storage.path_for(settings.records_slot)}.")


if __name__ == "__main__":
    app()
