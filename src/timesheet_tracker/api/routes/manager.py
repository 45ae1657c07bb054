"""Manager approval endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Query

from timesheet_tracker.api.dependencies import DbSession, ManagerIdentity
from timesheet_tracker.api.schemas import (
    EntryResponse,
    ErrorResponse,
    ReviewEntryResponse,
    StatusUpdate,
)
from timesheet_tracker.services.approval_service import (
    ALL_STATUSES,
    ApprovalService,
    ReviewItem,
)

router = APIRouter(prefix="/manager", tags=["manager"])

_AUTH_ERRORS = {401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}}


def _review_response(item: ReviewItem) -> ReviewEntryResponse:
    base = EntryResponse.model_validate(item.entry)
    return ReviewEntryResponse(**base.model_dump(), employee_name=item.employee_name)


@router.get(
    "/approvals",
    response_model=list[ReviewEntryResponse],
    responses=_AUTH_ERRORS,
)
async def list_pending_approvals(
    db: DbSession,
    identity: ManagerIdentity,
) -> list[ReviewEntryResponse]:
    """Pending entries of the caller's reports."""
    items = await ApprovalService(db).list_pending_for_manager(identity)
    return [_review_response(item) for item in items]


@router.get(
    "/entries",
    response_model=list[ReviewEntryResponse],
    responses={400: {"model": ErrorResponse}, **_AUTH_ERRORS},
)
async def list_team_entries(
    db: DbSession,
    identity: ManagerIdentity,
    status_filter: Annotated[str, Query(alias="status")] = ALL_STATUSES,
) -> list[ReviewEntryResponse]:
    """Entries of the caller's reports, filtered by status."""
    items = await ApprovalService(db).list_team_entries(identity, status_filter)
    return [_review_response(item) for item in items]


@router.put(
    "/approve/{entry_id}",
    response_model=ReviewEntryResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        **_AUTH_ERRORS,
    },
)
async def set_entry_status(
    db: DbSession,
    identity: ManagerIdentity,
    entry_id: Annotated[int, Path()],
    payload: StatusUpdate,
) -> ReviewEntryResponse:
    """Approve or reject a pending entry."""
    item = await ApprovalService(db).set_status(identity, entry_id, payload.status)
    return _review_response(item)
