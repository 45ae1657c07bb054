"""Timesheet entry endpoints for the authenticated user."""

from fastapi import APIRouter, status

from timesheet_tracker.api.dependencies import CurrentIdentity, DbSession
from timesheet_tracker.api.schemas import EntryCreate, EntryResponse, ErrorResponse
from timesheet_tracker.services.entry_service import EntryDraft, EntryService

router = APIRouter(prefix="/entries", tags=["entries"])


@router.get(
    "",
    response_model=list[EntryResponse],
    responses={401: {"model": ErrorResponse}},
)
async def list_entries(db: DbSession, identity: CurrentIdentity) -> list[EntryResponse]:
    """Get all of the caller's entries."""
    entries = await EntryService(db).list_own_entries(identity)
    return [EntryResponse.model_validate(e) for e in entries]


@router.post(
    "",
    response_model=EntryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
async def create_entry(
    db: DbSession,
    identity: CurrentIdentity,
    payload: EntryCreate,
) -> EntryResponse:
    """Log a new entry for the caller. It starts out pending."""
    draft = EntryDraft(
        project=payload.project,
        entry_date=payload.entry_date,
        start_time=payload.start_time,
        end_time=payload.end_time,
        task_description=payload.task_description,
    )
    entry = await EntryService(db).create_entry(identity, draft)
    return EntryResponse.model_validate(entry)
