# mood entries router — morning/evening check-ins for the current user
# supports exact-date and date-range listing for trend charts

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.dependencies import RecordId, get_current_user, get_storage
from app.errors import ApiError
from app.models.common import DATE_PATTERN, MessageResponse, check_calendar_date
from app.models.mood import MoodEntryCreate, MoodEntryResponse, MoodEntryUpdate
from app.services import records
from app.services.storage import RecordKind, RecordQuery, Storage

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/mood-entries", tags=["mood-entries"])

KIND = RecordKind.MOOD_ENTRIES


def _query_date(name: str, value: Optional[str]) -> Optional[str]:
    try:
        return check_calendar_date(value)
    except ValueError as e:
        raise ApiError.validation(name, str(e))


@router.get("", response_model=list[MoodEntryResponse])
async def list_mood_entries(
    date: Optional[str] = Query(None, pattern=DATE_PATTERN, description="exact calendar date"),
    start_date: Optional[str] = Query(None, alias="startDate", pattern=DATE_PATTERN),
    end_date: Optional[str] = Query(None, alias="endDate", pattern=DATE_PATTERN),
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """list the caller's mood entries. newest first, or oldest first by date
    when a startDate/endDate range is given."""

    query = RecordQuery(
        date=_query_date("date", date),
        start_date=_query_date("startDate", start_date),
        end_date=_query_date("endDate", end_date),
    )
    if query.start_date and query.end_date and query.start_date > query.end_date:
        raise ApiError.validation("endDate", "endDate must be on or after startDate")

    return await records.list_owned(storage, KIND, current_user["id"], query)


@router.get("/{entry_id}", response_model=MoodEntryResponse)
async def get_mood_entry(
    entry_id: RecordId,
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return await records.get_owned_record(storage, KIND, entry_id, current_user["id"])


@router.post("", response_model=MoodEntryResponse)
async def create_mood_entry(
    body: MoodEntryCreate,
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """record a mood check-in owned by the caller"""
    return await records.create_owned(storage, KIND, current_user["id"], body.model_dump())


@router.put("/{entry_id}", response_model=MoodEntryResponse)
@router.patch("/{entry_id}", response_model=MoodEntryResponse)
async def update_mood_entry(
    entry_id: RecordId,
    body: MoodEntryUpdate,
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """partially update one of the caller's mood entries"""
    return await records.update_owned(
        storage, KIND, entry_id, current_user["id"], body.model_dump(exclude_unset=True)
    )


@router.delete("/{entry_id}", response_model=MessageResponse)
async def delete_mood_entry(
    entry_id: RecordId,
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    await records.delete_owned(storage, KIND, entry_id, current_user["id"])
    return MessageResponse(message="Mood entry deleted successfully")
