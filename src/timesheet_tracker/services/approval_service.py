"""Manager review of subordinates' timesheet entries.

Visibility and authority follow the reporting tree: a manager sees and
decides only entries whose owner has ``manager_id`` equal to the manager's
id. Employees without a manager are invisible to every manager.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from timesheet_tracker.exceptions import AuthorizationError, NotFoundError, ValidationError
from timesheet_tracker.models import MAX_ROW_ID, TimesheetEntry, User
from timesheet_tracker.security import Identity
from timesheet_tracker.services.state_machine import (
    EntryStateMachine,
    EntryStatus,
    InvalidTransitionError,
)

logger = logging.getLogger(__name__)

ALL_STATUSES = "all"


@dataclass(frozen=True)
class ReviewItem:
    """An entry as seen by its owner's manager."""

    entry: TimesheetEntry
    employee_name: str


def _require_manager(identity: Identity) -> None:
    if not identity.is_manager:
        raise AuthorizationError("Access denied. Managers only.")


class ApprovalService:
    """Service for the manager approval workflow."""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _team_query(self, manager_id: int):
        return (
            select(TimesheetEntry, User.full_name)
            .join(User, TimesheetEntry.user_id == User.id)
            .where(User.manager_id == manager_id)
        )

    async def list_pending_for_manager(self, identity: Identity) -> list[ReviewItem]:
        """Pending entries of the manager's reports, oldest day first."""
        _require_manager(identity)

        query = (
            self._team_query(identity.user_id)
            .where(TimesheetEntry.status == EntryStatus.PENDING.value)
            .order_by(
                TimesheetEntry.entry_date.asc(),
                TimesheetEntry.start_time.asc(),
                TimesheetEntry.id.asc(),
            )
        )
        result = await self.session.execute(query)
        return [ReviewItem(entry=entry, employee_name=name) for entry, name in result.all()]

    async def list_team_entries(
        self, identity: Identity, status: str = ALL_STATUSES
    ) -> list[ReviewItem]:
        """Entries of the manager's reports, optionally filtered by status."""
        _require_manager(identity)

        query = self._team_query(identity.user_id)
        if status != ALL_STATUSES:
            if status not in EntryStateMachine.VALID_TRANSITIONS:
                raise ValidationError(f"Invalid status filter '{status}'", fields=["status"])
            query = query.where(TimesheetEntry.status == status)

        query = query.order_by(
            TimesheetEntry.entry_date.desc(),
            TimesheetEntry.start_time.desc(),
            TimesheetEntry.id.desc(),
        )
        result = await self.session.execute(query)
        return [ReviewItem(entry=entry, employee_name=name) for entry, name in result.all()]

    async def set_status(
        self, identity: Identity, entry_id: int, new_status: str
    ) -> ReviewItem:
        """Approve or reject a pending entry of one of the manager's reports.

        Raises:
            AuthorizationError: caller is not a manager, or the entry's owner
                does not report to the caller.
            ValidationError: new_status is not approved or rejected.
            NotFoundError: no entry with this id.
            InvalidTransitionError: the entry has already been decided.
        """
        _require_manager(identity)
        if not EntryStateMachine.is_decision(new_status):
            raise ValidationError("Invalid status.", fields=["status"])
        if not 0 < entry_id <= MAX_ROW_ID:
            raise NotFoundError("Entry not found.")

        result = await self.session.execute(
            select(TimesheetEntry, User.manager_id, User.full_name)
            .join(User, TimesheetEntry.user_id == User.id)
            .where(TimesheetEntry.id == entry_id)
        )
        row = result.one_or_none()
        if row is None:
            raise NotFoundError("Entry not found.")
        entry, owner_manager_id, employee_name = row

        if owner_manager_id != identity.user_id:
            logger.warning(
                "Manager %s tried to review entry %s outside their team",
                identity.user_id,
                entry_id,
            )
            raise AuthorizationError("Entry does not belong to one of your reports.")

        EntryStateMachine.validate_transition(entry.status, new_status)

        # Guard on the current status so two concurrent decisions cannot both win
        updated = await self.session.execute(
            update(TimesheetEntry)
            .where(
                TimesheetEntry.id == entry_id,
                TimesheetEntry.status == EntryStatus.PENDING.value,
            )
            .values(status=new_status)
            .execution_options(synchronize_session=False)
        )
        if updated.rowcount == 0:
            await self.session.rollback()
            raise InvalidTransitionError(
                entry.status, new_status, "entry was reviewed concurrently"
            )
        await self.session.commit()
        await self.session.refresh(entry)

        logger.info("Manager %s set entry %s to %s", identity.user_id, entry_id, new_status)
        return ReviewItem(entry=entry, employee_name=employee_name)
