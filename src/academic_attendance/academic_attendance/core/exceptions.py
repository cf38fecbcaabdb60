from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..timetable.model import SlotConflict


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class ConflictError(DomainError):
    """Raised by services when a time slot write overlaps a committed slot."""

    def __init__(self, conflict: "SlotConflict"):
        super().__init__(conflict.message)
        self.conflict = conflict


class DuplicateAttendanceError(DomainError):
    """Raised when attendance for a session has already been recorded."""
