from fastapi import APIRouter
from pydantic import BaseModel, Field

from moodmate.core.modules.journal.models import JournalEntry, JournalList
from moodmate.web.deps import AppDep, SessionTokenDep
from moodmate.web.openapi import ApiResponse, ErrorResponse

router = APIRouter(prefix="/journal", tags=["journal"])


class CreateJournalRequest(BaseModel):
    """Request to create a journal entry."""

    note: str | None = Field(None, description="Journal text")
    mood: str | None = Field(None, description="Mood label")
    activities: list[str] | None = Field(None, description="Activities done that day")
    activity_details: dict[str, str] | None = Field(None, description="Free-form details per activity")


@router.post(
    "",
    summary="Create journal entry",
    operation_id="createJournalEntry",
    status_code=201,
    responses={
        201: {"description": "Entry created"},
        400: {"model": ErrorResponse, "description": "Note or mood missing"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def create_entry(request: CreateJournalRequest, app: AppDep, token: SessionTokenDep) -> ApiResponse[JournalEntry]:
    entry = await app.create_journal_entry(token, request.note, request.mood, request.activities, request.activity_details)
    return ApiResponse(message="Journal entry created", data=entry)


@router.get(
    "",
    summary="List journal entries",
    description="List the current user's entries, newest first.",
    operation_id="listJournalEntries",
    responses={
        200: {"description": "Entries of the current user"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def list_entries(app: AppDep, token: SessionTokenDep) -> ApiResponse[JournalList]:
    entries = await app.list_journal_entries(token)
    return ApiResponse(message="Journal entries retrieved", data=entries)


@router.get(
    "/{entry_id}",
    summary="Get journal entry",
    operation_id="getJournalEntry",
    responses={
        200: {"description": "The entry"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Entry belongs to another user"},
        404: {"model": ErrorResponse, "description": "Entry not found"},
    },
)
async def get_entry(entry_id: str, app: AppDep, token: SessionTokenDep) -> ApiResponse[JournalEntry]:
    entry = await app.get_journal_entry(token, entry_id)
    return ApiResponse(message="Journal entry retrieved", data=entry)


@router.delete(
    "/{entry_id}",
    summary="Delete journal entry",
    operation_id="deleteJournalEntry",
    responses={
        200: {"description": "Entry deleted"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Entry belongs to another user"},
        404: {"model": ErrorResponse, "description": "Entry not found"},
    },
)
async def delete_entry(entry_id: str, app: AppDep, token: SessionTokenDep) -> ApiResponse[None]:
    await app.delete_journal_entry(token, entry_id)
    return ApiResponse(message="Journal entry deleted")
