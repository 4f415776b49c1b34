# medications router — the caller's medication list

import logging

from fastapi import APIRouter, Depends

from app.dependencies import RecordId, get_current_user, get_storage
from app.models.common import MessageResponse
from app.models.medication import MedicationCreate, MedicationResponse, MedicationUpdate
from app.services import records
from app.services.storage import RecordKind, Storage

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/medications", tags=["medications"])

KIND = RecordKind.MEDICATIONS


@router.get("", response_model=list[MedicationResponse])
async def list_medications(
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return await records.list_owned(storage, KIND, current_user["id"])


@router.get("/{medication_id}", response_model=MedicationResponse)
async def get_medication(
    medication_id: RecordId,
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return await records.get_owned_record(storage, KIND, medication_id, current_user["id"])


@router.post("", response_model=MedicationResponse)
async def create_medication(
    body: MedicationCreate,
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return await records.create_owned(storage, KIND, current_user["id"], body.model_dump())


@router.put("/{medication_id}", response_model=MedicationResponse)
@router.patch("/{medication_id}", response_model=MedicationResponse)
async def update_medication(
    medication_id: RecordId,
    body: MedicationUpdate,
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return await records.update_owned(
        storage, KIND, medication_id, current_user["id"], body.model_dump(exclude_unset=True)
    )


@router.delete("/{medication_id}", response_model=MessageResponse)
async def delete_medication(
    medication_id: RecordId,
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    await records.delete_owned(storage, KIND, medication_id, current_user["id"])
    return MessageResponse(message="Medication deleted successfully")
