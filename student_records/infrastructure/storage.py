"""
Durable key-value slots for the student records manager.

A slot is a named location holding one JSON-serialisable value across sessions,
such as the `students` and `theme` slots.
`JsonFileStorage` keeps one JSON file per slot inside a data directory and
replaces it atomically on every write; `InMemoryStorage` backs tests and
throwaway sessions.

Absence of a slot is not an error: `get` returns None and callers fall back to
their defaults. Any other I/O or decoding failure is raised as StorageError.
"""

from __future__ import annotations

import contextlib
import json
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from student_records.errors import StorageError
from student_records.utils.logging import get_logger

log = get_logger(__name__)

_SLOT_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


@runtime_checkable
class KeyValueStorage(Protocol):
    """
    Common interface of every slot backend.
    """

    def get(self, key: str) -> Optional[Any]:
        """Return the decoded value held in `key`, or None when the slot is absent."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Persist `value` into `key`, replacing any previous value."""
        ...

    def delete(self, key: str) -> None:
        """Remove the slot; a missing slot is ignored."""
        ...


def _check_key(key: str) -> str:
    if not _SLOT_KEY.match(key) or key in (".", ".."):
        raise ValueError(f"Invalid slot key '{key}'")
    return key


class InMemoryStorage:
    """Slot storage held in a dict. Values are stored as encoded JSON text."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._slots: Dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str) -> Optional[Any]:
        raw = self._slots.get(_check_key(key))
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        try:
            self._slots[_check_key(key)] = json.dumps(value)
        except (TypeError, ValueError) as exc:
            raise StorageError(f"Cannot encode slot '{key}': {exc}") from exc

    def delete(self, key: str) -> None:
        self._slots.pop(_check_key(key), None)


class JsonFileStorage:
    """
    One `<key>.json` file per slot under `data_dir`.

    Parameters
    ----------
    data_dir : Path | str
        Directory holding the slot files. Created lazily on the first write.
    """

    def __init__(self, data_dir: Path | str) -> None:
        self.data_dir = Path(data_dir)

    def path_for(self, key: str) -> Path:
        return self.data_dir / f"{_check_key(key)}.json"

    def get(self, key: str) -> Optional[Any]:
        path = self.path_for(key)
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            return None
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise StorageError(f"Slot '{key}' at {path} is not valid JSON: {exc}") from exc
        except OSError as exc:
            raise StorageError(f"Cannot read slot '{key}' at {path}: {exc}") from exc

    def set(self, key: str, value: Any) -> None:
        path = self.path_for(key)
        try:
            encoded = json.dumps(value, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise StorageError(f"Cannot encode slot '{key}': {exc}") from exc

        tmp_name: Optional[str] = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(encoded)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as exc:
            raise StorageError(f"Cannot write slot '{key}' at {path}: {exc}") from exc
        finally:
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)

        log.debug("Slot written", extra={"slot": key, "path": str(path)})

    def delete(self, key: str) -> None:
        try:
            self.path_for(key).unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            raise StorageError(f"Cannot delete slot '{key}': {exc}") from exc


__all__ = ["KeyValueStorage", "InMemoryStorage", "JsonFileStorage"]
