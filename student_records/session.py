"""
Application session for the student records manager.

The session is the single owner of the record store for one run of the
application. It holds the interaction state the store deliberately does not
track: which record is being edited and which delete is awaiting confirmation.
Front ends (the CLI) construct one session and pass it around instead of
reaching for module-level state.

Expected store errors are turned into `Notice` objects carrying the text shown
to the user. StorageError is not: a failed write is fatal to the operation and
propagates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from student_records.config import Settings, get_settings
from student_records.confirmation import DeleteConfirmation
from student_records.domain.models import StudentRecord
from student_records.errors import (
    DuplicateKeyError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from student_records.infrastructure.storage import JsonFileStorage, KeyValueStorage
from student_records.store import RecordListing, RecordStore
from student_records.theme import ThemePreference
from student_records.utils.logging import get_logger

log = get_logger(__name__)

FORM_FIELDS = ("name", "reg", "dept", "year", "marks")


@dataclass(frozen=True)
class Notice:
    """Outcome of a user action, as shown in a dialog."""

    title: str
    message: str
    ok: bool = True


def _error_notice(exc: Exception) -> Notice:
    if isinstance(exc, ValidationError):
        return Notice("Validation Error", str(exc), ok=False)
    if isinstance(exc, DuplicateKeyError):
        return Notice(
            "Uniqueness Error",
            f'The Registration Number "{exc.reg}" already exists! '
            "Please enter a unique Reg No.",
            ok=False,
        )
    if isinstance(exc, NotFoundError):
        return Notice("Not Found", str(exc), ok=False)
    return Notice("Error", str(exc), ok=False)


def _clean_form(form: Mapping[str, Any]) -> Dict[str, Any]:
    cleaned: Dict[str, Any] = {}
    for field in FORM_FIELDS:
        value = form.get(field, "")
        cleaned[field] = value.strip() if isinstance(value, str) else value
    return cleaned


class StudentSession:
    """
    Parameters
    ----------
    store : RecordStore
        The store this session owns.
    theme : ThemePreference | None
        Theme slot accessor; defaults to the `theme` slot of the store's backend.
    """

    def __init__(self, store: RecordStore, theme: Optional[ThemePreference] = None) -> None:
        self.store = store
        self.theme = theme or ThemePreference(store.storage)
        self.edit_position: Optional[int] = None
        self.confirmation = DeleteConfirmation()

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        storage: Optional[KeyValueStorage] = None,
    ) -> "StudentSession":
        settings = settings or get_settings()
        storage = storage or JsonFileStorage(settings.data_dir)
        store = RecordStore.open(storage, settings.records_slot)
        return cls(store, ThemePreference(storage, settings.theme_slot))

    @property
    def is_editing(self) -> bool:
        return self.edit_position is not None

    def search(self, text: Optional[str] = None) -> RecordListing:
        return self.store.list_records(text)

    def begin_edit(self, position: int) -> StudentRecord:
        """Select the record at `position` for editing and return it."""
        record = self.store.get(position)
        self.edit_position = position
        return record

    def reset_form(self) -> None:
        self.edit_position = None

    def submit(self, form: Mapping[str, Any]) -> Notice:
        """
        Add a new record, or update the one being edited.

        While editing, the registration number is locked to the stored value.
        """
        data = _clean_form(form)
        if self.edit_position is not None:
            try:
                data["reg"] = self.store.get(self.edit_position).reg
            except NotFoundError as exc:
                self.reset_form()
                return _error_notice(exc)

        if not data["name"] or not data["reg"]:
            return Notice(
                "Validation Error", "Name and Registration Number are required!", ok=False
            )

        try:
            if self.edit_position is None:
                record = self.store.add(data)
                notice = Notice("Success", f"Student {record.name} added successfully!")
            else:
                record = self.store.update(self.edit_position, data)
                notice = Notice("Success", f"Student {record.name} updated successfully!")
        except (ValidationError, DuplicateKeyError, NotFoundError) as exc:
            log.warning("Submission rejected", extra={"reason": type(exc).__name__})
            return _error_notice(exc)

        self.reset_form()
        return notice

    def request_delete(self, position: int) -> Notice:
        try:
            record = self.store.get(position)
        except NotFoundError as exc:
            return _error_notice(exc)
        self.confirmation.request(position)
        return Notice(
            "Confirm Deletion",
            "Are you sure you want to permanently delete the record for "
            f"{record.name} ({record.reg})?",
        )

    def confirm_delete(self) -> Notice:
        position = self.confirmation.pending_position
        try:
            self.confirmation.confirm(self.store)
        except InvalidTransitionError as exc:
            return Notice("Nothing to Delete", str(exc), ok=False)
        except NotFoundError as exc:
            return _error_notice(exc)

        if self.edit_position is not None and position is not None:
            if self.edit_position == position:
                self.reset_form()
            elif self.edit_position > position:
                self.edit_position -= 1
        return Notice("Success", "Record deleted successfully.")

    def cancel_delete(self) -> None:
        self.confirmation.cancel()


__all__ = ["StudentSession", "Notice", "FORM_FIELDS"]
