"""ORM models."""

from timesheet_tracker.models.base import MAX_ROW_ID, Base, TimestampMixin
from timesheet_tracker.models.timesheet import TimesheetEntry
from timesheet_tracker.models.user import Role, User

__all__ = [
    "MAX_ROW_ID",
    "Base",
    "TimestampMixin",
    "Role",
    "User",
    "TimesheetEntry",
]
