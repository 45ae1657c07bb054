"""Tests for the approval workflow and team visibility."""

from datetime import date, time

import pytest
from sqlalchemy import update

from tests.factories import add_entry, identity_of
from timesheet_tracker.exceptions import AuthorizationError, NotFoundError, ValidationError
from timesheet_tracker.models import TimesheetEntry
from timesheet_tracker.services.approval_service import ApprovalService
from timesheet_tracker.services.state_machine import InvalidTransitionError

pytestmark = pytest.mark.asyncio


class TestListPending:
    async def test_only_pending_entries_of_direct_reports(self, session, team):
        bob, alice, carol, dave = team["bob"], team["alice"], team["carol"], team["dave"]
        late = await add_entry(session, bob, date(2024, 1, 12))
        early = await add_entry(session, alice, date(2024, 1, 8))
        await add_entry(session, bob, date(2024, 1, 9), status="approved")
        await add_entry(session, carol, date(2024, 1, 7))
        await add_entry(session, dave, date(2024, 1, 7))

        items = await ApprovalService(session).list_pending_for_manager(
            identity_of(team["sarah"])
        )

        assert [i.entry.id for i in items] == [early.id, late.id]
        assert [i.employee_name for i in items] == ["Alice Employee", "Bob Employee"]

    async def test_other_manager_sees_own_team_only(self, session, team):
        await add_entry(session, team["bob"], date(2024, 1, 12))
        carol_entry = await add_entry(session, team["carol"], date(2024, 1, 7))

        items = await ApprovalService(session).list_pending_for_manager(
            identity_of(team["mike"])
        )

        assert [i.entry.id for i in items] == [carol_entry.id]
        assert items[0].employee_name == "Carol Employee"

    async def test_orphaned_entries_visible_to_nobody(self, session, team):
        await add_entry(session, team["dave"], date(2024, 1, 7))
        service = ApprovalService(session)

        assert await service.list_pending_for_manager(identity_of(team["sarah"])) == []
        assert await service.list_pending_for_manager(identity_of(team["mike"])) == []

    async def test_employee_cannot_list(self, session, team):
        with pytest.raises(AuthorizationError):
            await ApprovalService(session).list_pending_for_manager(identity_of(team["bob"]))


class TestListTeamEntries:
    async def test_filter_by_status(self, session, team):
        bob = team["bob"]
        pending = await add_entry(session, bob, date(2024, 1, 10))
        approved = await add_entry(session, bob, date(2024, 1, 11), status="approved")
        rejected = await add_entry(session, bob, date(2024, 1, 12), status="rejected")
        service = ApprovalService(session)
        sarah = identity_of(team["sarah"])

        everything = await service.list_team_entries(sarah)
        assert [i.entry.id for i in everything] == [rejected.id, approved.id, pending.id]

        only_approved = await service.list_team_entries(sarah, "approved")
        assert [i.entry.id for i in only_approved] == [approved.id]

    async def test_invalid_filter_rejected(self, session, team):
        with pytest.raises(ValidationError):
            await ApprovalService(session).list_team_entries(identity_of(team["sarah"]), "done")


class TestSetStatus:
    async def test_approve_pending_entry(self, session, team):
        entry = await add_entry(session, team["bob"], date(2024, 1, 10))
        service = ApprovalService(session)
        sarah = identity_of(team["sarah"])

        item = await service.set_status(sarah, entry.id, "approved")

        assert item.entry.status == "approved"
        assert item.employee_name == "Bob Employee"
        stored = await session.get(TimesheetEntry, entry.id, populate_existing=True)
        assert stored.status == "approved"
        assert await service.list_pending_for_manager(sarah) == []

    async def test_reject_pending_entry(self, session, team):
        entry = await add_entry(session, team["alice"], date(2024, 1, 10))

        item = await ApprovalService(session).set_status(
            identity_of(team["sarah"]), entry.id, "rejected"
        )
        assert item.entry.status == "rejected"

    @pytest.mark.parametrize("status", ["pending", "APPROVED", "done", "", None])
    async def test_invalid_status_leaves_row_unchanged(self, session, team, status):
        entry = await add_entry(session, team["bob"], date(2024, 1, 10))

        with pytest.raises(ValidationError):
            await ApprovalService(session).set_status(
                identity_of(team["sarah"]), entry.id, status
            )

        stored = await session.get(TimesheetEntry, entry.id, populate_existing=True)
        assert stored.status == "pending"

    async def test_unknown_entry(self, session, team):
        with pytest.raises(NotFoundError):
            await ApprovalService(session).set_status(identity_of(team["sarah"]), 9999, "approved")

    @pytest.mark.parametrize("entry_id", [0, -1, 2**31, 2**63])
    async def test_out_of_range_entry_id_not_found(self, session, team, entry_id):
        with pytest.raises(NotFoundError):
            await ApprovalService(session).set_status(
                identity_of(team["sarah"]), entry_id, "approved"
            )

    async def test_manager_of_other_team_forbidden(self, session, team):
        entry = await add_entry(session, team["bob"], date(2024, 1, 10))

        with pytest.raises(AuthorizationError):
            await ApprovalService(session).set_status(
                identity_of(team["mike"]), entry.id, "approved"
            )

        stored = await session.get(TimesheetEntry, entry.id, populate_existing=True)
        assert stored.status == "pending"

    async def test_orphan_entry_forbidden(self, session, team):
        entry = await add_entry(session, team["dave"], date(2024, 1, 10))

        with pytest.raises(AuthorizationError):
            await ApprovalService(session).set_status(
                identity_of(team["sarah"]), entry.id, "approved"
            )

    async def test_employee_cannot_decide(self, session, team):
        entry = await add_entry(session, team["alice"], date(2024, 1, 10))

        with pytest.raises(AuthorizationError):
            await ApprovalService(session).set_status(
                identity_of(team["bob"]), entry.id, "approved"
            )

    async def test_decided_entry_is_terminal(self, session, team):
        entry = await add_entry(session, team["bob"], date(2024, 1, 10))
        service = ApprovalService(session)
        sarah = identity_of(team["sarah"])
        await service.set_status(sarah, entry.id, "rejected")

        with pytest.raises(InvalidTransitionError) as exc_info:
            await service.set_status(sarah, entry.id, "approved")
        assert exc_info.value.from_status == "rejected"

        with pytest.raises(InvalidTransitionError):
            await service.set_status(sarah, entry.id, "rejected")

        stored = await session.get(TimesheetEntry, entry.id, populate_existing=True)
        assert stored.status == "rejected"

    async def test_duration_preserved_after_decision(self, session, team):
        entry = await add_entry(
            session, team["bob"], date(2024, 1, 10), start=time(8, 30), end=time(12, 0)
        )
        item = await ApprovalService(session).set_status(
            identity_of(team["sarah"]), entry.id, "approved"
        )
        assert item.entry.duration_hours == 3.5

    async def test_decision_made_elsewhere_wins(self, session_factory, session, team):
        entry = await add_entry(session, team["bob"], date(2024, 1, 10))
        # Another manager session approves while this one still holds the row as pending
        async with session_factory() as other:
            await other.execute(
                update(TimesheetEntry)
                .where(TimesheetEntry.id == entry.id)
                .values(status="approved")
            )
            await other.commit()

        with pytest.raises(InvalidTransitionError) as exc_info:
            await ApprovalService(session).set_status(
                identity_of(team["sarah"]), entry.id, "rejected"
            )
        assert "reviewed concurrently" in str(exc_info.value)

        stored = await session.get(TimesheetEntry, entry.id, populate_existing=True)
        assert stored.status == "approved"
