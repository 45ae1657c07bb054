"""Timesheet tracker services."""

from timesheet_tracker.services.approval_service import ApprovalService, ReviewItem
from timesheet_tracker.services.auth_service import AuthResult, AuthService
from timesheet_tracker.services.entry_service import EntryDraft, EntryService
from timesheet_tracker.services.state_machine import (
    EntryStateMachine,
    EntryStatus,
    InvalidTransitionError,
)

__all__ = [
    "ApprovalService",
    "ReviewItem",
    "AuthResult",
    "AuthService",
    "EntryDraft",
    "EntryService",
    "EntryStateMachine",
    "EntryStatus",
    "InvalidTransitionError",
]
