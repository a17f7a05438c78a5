"""
Two-step delete confirmation.

A delete is first requested for a position and only carried out when the user
confirms it. The state is explicit: either idle, or pending confirmation for
exactly one position.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from student_records.domain.models import StudentRecord
from student_records.errors import InvalidTransitionError
from student_records.store import RecordStore
from student_records.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class PendingConfirmation:
    position: int


ConfirmationState = Union[Idle, PendingConfirmation]


class DeleteConfirmation:
    """
    State machine with the transitions

        request(p): Idle -> PendingConfirmation(p)
        confirm:    PendingConfirmation(p) -> Idle, removing p from the store
        cancel:     PendingConfirmation -> Idle

    A new request while pending replaces the pending position.
    """

    def __init__(self) -> None:
        self.state: ConfirmationState = Idle()

    @property
    def is_pending(self) -> bool:
        return isinstance(self.state, PendingConfirmation)

    @property
    def pending_position(self) -> Optional[int]:
        if isinstance(self.state, PendingConfirmation):
            return self.state.position
        return None

    def request(self, position: int) -> None:
        self.state = PendingConfirmation(position)
        log.debug("Delete requested", extra={"position": position})

    def confirm(self, store: RecordStore) -> StudentRecord:
        """
        Remove the pending position from `store`.

        The machine is back to Idle afterwards whether or not the removal
        succeeded; store errors propagate to the caller.
        """
        if not isinstance(self.state, PendingConfirmation):
            raise InvalidTransitionError("No delete is pending confirmation")
        position = self.state.position
        self.state = Idle()
        return store.remove(position)

    def cancel(self) -> None:
        if self.is_pending:
            log.debug("Delete cancelled", extra={"position": self.pending_position})
        self.state = Idle()


__all__ = ["DeleteConfirmation", "Idle", "PendingConfirmation", "ConfirmationState"]
