"""Timesheet entries owned by the authenticated user."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, time

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from timesheet_tracker.exceptions import ValidationError
from timesheet_tracker.models import TimesheetEntry
from timesheet_tracker.security import Identity
from timesheet_tracker.services.state_machine import EntryStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntryDraft:
    """Unvalidated input for a new entry."""

    project: str | None = None
    entry_date: date | None = None
    start_time: time | None = None
    end_time: time | None = None
    task_description: str | None = None

    def missing_fields(self) -> list[str]:
        """Names of required fields that are absent or blank."""
        project = self.project.strip() if self.project else ""
        required = (
            ("project", project),
            ("entry_date", self.entry_date),
            ("start_time", self.start_time),
            ("end_time", self.end_time),
        )
        return [name for name, value in required if value is None or value == ""]


class EntryService:
    """Service for listing and creating a user's own entries."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_own_entries(self, identity: Identity) -> list[TimesheetEntry]:
        """All entries of the caller, newest day first, latest start first."""
        result = await self.session.execute(
            select(TimesheetEntry)
            .where(TimesheetEntry.user_id == identity.user_id)
            .order_by(
                TimesheetEntry.entry_date.desc(),
                TimesheetEntry.start_time.desc(),
                TimesheetEntry.id.desc(),
            )
        )
        return list(result.scalars().all())

    async def create_entry(self, identity: Identity, draft: EntryDraft) -> TimesheetEntry:
        """Validate a draft and persist it as a pending entry of the caller."""
        missing = draft.missing_fields()
        if missing:
            raise ValidationError(
                f"Please enter all required fields: {', '.join(missing)}",
                fields=missing,
            )
        aware = [
            name
            for name, value in (("start_time", draft.start_time), ("end_time", draft.end_time))
            if value.tzinfo is not None
        ]
        if aware:
            raise ValidationError("Times must not carry a timezone", fields=aware)
        if draft.end_time < draft.start_time:
            raise ValidationError(
                "end_time must not be earlier than start_time",
                fields=["start_time", "end_time"],
            )

        task_description = draft.task_description.strip() if draft.task_description else None
        entry = TimesheetEntry(
            user_id=identity.user_id,
            project=draft.project.strip(),
            task_description=task_description or None,
            entry_date=draft.entry_date,
            start_time=draft.start_time,
            end_time=draft.end_time,
            status=EntryStatus.PENDING.value,
        )
        self.session.add(entry)
        await self.session.commit()
        await self.session.refresh(entry)

        logger.info(
            "User %s logged entry %s (%s, %.2fh)",
            identity.user_id,
            entry.id,
            entry.entry_date,
            entry.duration_hours,
        )
        return entry
