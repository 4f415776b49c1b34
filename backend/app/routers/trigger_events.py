# trigger events router — logged situations with emotions, action and consequences

import logging

from fastapi import APIRouter, Depends

from app.dependencies import RecordId, get_current_user, get_storage
from app.errors import ApiError
from app.models.common import MessageResponse
from app.models.trigger import (
    TriggerEventCreate,
    TriggerEventResponse,
    TriggerEventUpdate,
    check_date_order,
    duration_days,
)
from app.services import records
from app.services.storage import RecordKind, Storage

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/trigger-events", tags=["trigger-events"])

KIND = RecordKind.TRIGGER_EVENTS


def _doc_to_trigger(doc: dict) -> TriggerEventResponse:
    """convert a stored trigger event to the response model, deriving durationDays"""
    return TriggerEventResponse(
        **doc,
        duration_days=duration_days(doc.get("start_date"), doc.get("end_date")),
    )


def _check_merged_dates(merged: dict) -> None:
    problem = check_date_order(merged.get("start_date"), merged.get("end_date"))
    if problem:
        raise ApiError.validation("endDate", problem)


@router.get("", response_model=list[TriggerEventResponse])
async def list_trigger_events(
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """list the caller's trigger events, newest first"""
    docs = await records.list_owned(storage, KIND, current_user["id"])
    return [_doc_to_trigger(doc) for doc in docs]


@router.get("/{event_id}", response_model=TriggerEventResponse)
async def get_trigger_event(
    event_id: RecordId,
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    doc = await records.get_owned_record(storage, KIND, event_id, current_user["id"])
    return _doc_to_trigger(doc)


@router.post("", response_model=TriggerEventResponse)
async def create_trigger_event(
    body: TriggerEventCreate,
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    doc = await records.create_owned(storage, KIND, current_user["id"], body.model_dump())
    return _doc_to_trigger(doc)


@router.put("/{event_id}", response_model=TriggerEventResponse)
@router.patch("/{event_id}", response_model=TriggerEventResponse)
async def update_trigger_event(
    event_id: RecordId,
    body: TriggerEventUpdate,
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """partial update. the end date is re-checked against the stored start date"""
    doc = await records.update_owned(
        storage,
        KIND,
        event_id,
        current_user["id"],
        body.model_dump(exclude_unset=True),
        check_merged=_check_merged_dates,
    )
    return _doc_to_trigger(doc)


@router.delete("/{event_id}", response_model=MessageResponse)
async def delete_trigger_event(
    event_id: RecordId,
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    await records.delete_owned(storage, KIND, event_id, current_user["id"])
    return MessageResponse(message="Trigger event deleted successfully")
