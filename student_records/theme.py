"""
Dark/light theme preference kept in its own durable slot.
"""

from __future__ import annotations

from student_records.domain.models import Theme
from student_records.errors import StorageError
from student_records.infrastructure.storage import KeyValueStorage
from student_records.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_THEME_SLOT = "theme"


class ThemePreference:
    def __init__(self, storage: KeyValueStorage, slot: str = DEFAULT_THEME_SLOT) -> None:
        self.storage = storage
        self.slot = slot

    def load(self) -> Theme:
        """
        Stored theme; anything but the literal "dark" means light, including a
        slot that cannot be read.
        """
        try:
            value = self.storage.get(self.slot)
        except StorageError as exc:
            log.warning(
                "Unreadable theme slot, using light",
                extra={"slot": self.slot, "error": str(exc)},
            )
            return Theme.LIGHT
        return Theme.DARK if value == Theme.DARK.value else Theme.LIGHT

    def set(self, theme: Theme | str) -> Theme:
        theme = Theme(theme)
        self.storage.set(self.slot, theme.value)
        log.info("Theme saved", extra={"theme": theme.value})
        return theme

    def toggle(self) -> Theme:
        return self.set(self.load().toggled())

    def reset(self) -> Theme:
        """Forget the stored preference; the default theme applies again."""
        self.storage.delete(self.slot)
        log.info("Theme reset", extra={"slot": self.slot})
        return Theme.LIGHT


__all__ = ["ThemePreference", "DEFAULT_THEME_SLOT"]
