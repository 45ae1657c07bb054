"""Timesheet entry state machine with transition validation."""

from __future__ import annotations

from enum import Enum

from timesheet_tracker.exceptions import ConflictError


class EntryStatus(str, Enum):
    """Timesheet entry status values."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class InvalidTransitionError(ConflictError):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class EntryStateMachine:
    """State machine for timesheet entry review.

    Allowed transitions:
    - pending → approved
    - pending → rejected

    Approved and rejected are terminal.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        EntryStatus.PENDING: [EntryStatus.APPROVED, EntryStatus.REJECTED],
        EntryStatus.APPROVED: [],
        EntryStatus.REJECTED: [],
    }

    # Statuses a manager may submit as a decision
    DECISIONS = frozenset({EntryStatus.APPROVED, EntryStatus.REJECTED})

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(from_status, [])
        return to_status in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            if cls.is_terminal(from_status):
                reason = f"entry is already {from_status}"
            else:
                allowed = ", ".join(s.value for s in cls.get_next_statuses(from_status))
                reason = f"allowed: {allowed}" if allowed else None
            raise InvalidTransitionError(from_status, to_status, reason)

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        """Check if no transition leaves this status."""
        return status in cls.VALID_TRANSITIONS and not cls.get_next_statuses(status)

    @classmethod
    def is_decision(cls, status: str) -> bool:
        """Check if a status is a valid manager decision."""
        return status in cls.DECISIONS

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get list of valid next statuses from current status."""
        return cls.VALID_TRANSITIONS.get(current_status, [])
