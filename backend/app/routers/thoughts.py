# thoughts router — free-form notes tagged with moods

import logging

from fastapi import APIRouter, Depends

from app.dependencies import RecordId, get_current_user, get_storage
from app.models.common import MessageResponse
from app.models.thought import ThoughtCreate, ThoughtResponse, ThoughtUpdate
from app.services import records
from app.services.storage import RecordKind, Storage

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/thoughts", tags=["thoughts"])

KIND = RecordKind.THOUGHTS


@router.get("", response_model=list[ThoughtResponse])
async def list_thoughts(
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return await records.list_owned(storage, KIND, current_user["id"])


@router.get("/{thought_id}", response_model=ThoughtResponse)
async def get_thought(
    thought_id: RecordId,
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return await records.get_owned_record(storage, KIND, thought_id, current_user["id"])


@router.post("", response_model=ThoughtResponse)
async def create_thought(
    body: ThoughtCreate,
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return await records.create_owned(storage, KIND, current_user["id"], body.model_dump())


@router.put("/{thought_id}", response_model=ThoughtResponse)
@router.patch("/{thought_id}", response_model=ThoughtResponse)
async def update_thought(
    thought_id: RecordId,
    body: ThoughtUpdate,
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return await records.update_owned(
        storage, KIND, thought_id, current_user["id"], body.model_dump(exclude_unset=True)
    )


@router.delete("/{thought_id}", response_model=MessageResponse)
async def delete_thought(
    thought_id: RecordId,
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    await records.delete_owned(storage, KIND, thought_id, current_user["id"])
    return MessageResponse(message="Thought deleted successfully")
