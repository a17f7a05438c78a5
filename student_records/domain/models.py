"""
Domain models for the student records manager.

Defines the student record schema stored in the records slot, the listing item
that carries a record together with its position in the unfiltered sequence,
and the theme preference values. Pydantic validation errors are translated into
the store's own ValidationError at this boundary.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, NamedTuple, Union

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from student_records.errors import ValidationError

MIN_MARKS = 0
MAX_MARKS = 100

_MESSAGES = {
    "name": "Name and Registration Number are required!",
    "reg": "Name and Registration Number are required!",
    "marks": f"Marks must be a number between {MIN_MARKS} and {MAX_MARKS}.",
}


class StudentRecord(BaseModel):
    """
    A single student entry as held by the store and persisted to the slot.
    """

    name: str = Field(..., description="Student name, never empty.")
    reg: str = Field(..., description="Registration number, unique case-insensitively.")
    dept: str = Field("", description="Department.")
    year: str = Field("", description="Year of study.")
    marks: int = Field(..., description="Marks, an integer in [0, 100].")

    model_config = {
        "frozen": True,
        "extra": "ignore",
    }

    @field_validator("name", "reg", "dept", "year", mode="before")
    @classmethod
    def _strip_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = str(value)
        return value.strip() if isinstance(value, str) else value

    @field_validator("name", "reg")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("marks", mode="before")
    @classmethod
    def _parse_marks(cls, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError("marks must be a number")
        if isinstance(value, str):
            text = value.strip()
            digits = text[1:] if text[:1] in "+-" else text
            if not digits.isdigit():
                raise ValueError("marks must be a number")
            value = int(text)
        elif isinstance(value, float):
            if not value.is_integer():
                raise ValueError("marks must be a whole number")
            value = int(value)
        elif not isinstance(value, int):
            raise ValueError("marks must be a number")
        if not MIN_MARKS <= value <= MAX_MARKS:
            raise ValueError(f"marks must be between {MIN_MARKS} and {MAX_MARKS}")
        return value

    @property
    def registration_key(self) -> str:
        """Normalized registration number used for uniqueness checks."""
        return normalize_registration(self.reg)

    @classmethod
    def parse(cls, data: Union["StudentRecord", Mapping[str, Any]]) -> "StudentRecord":
        """
        Build a validated record from a form payload or an existing record.

        Raises
        ------
        ValidationError
            When a mandatory field is empty or marks are invalid.
        """
        if isinstance(data, StudentRecord):
            data = data.model_dump()
        try:
            return cls.model_validate(dict(data))
        except PydanticValidationError as exc:
            first = exc.errors()[0]
            field = str(first["loc"][0]) if first.get("loc") else None
            message = _MESSAGES.get(field or "", f"Invalid value for {field}: {first['msg']}")
            raise ValidationError(message, field=field) from exc


def normalize_registration(reg: str) -> str:
    """Trim and upper-case a registration number for comparison."""
    return reg.strip().upper()


class ListedRecord(NamedTuple):
    """A record paired with its position in the unfiltered sequence."""

    record: StudentRecord
    position: int


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"

    def toggled(self) -> "Theme":
        return Theme.LIGHT if self is Theme.DARK else Theme.DARK


__all__ = [
    "StudentRecord",
    "ListedRecord",
    "Theme",
    "normalize_registration",
    "MIN_MARKS",
    "MAX_MARKS",
]
