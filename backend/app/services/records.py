# owner-scoped record operations shared by every resource router
# a record the caller does not own is reported exactly like a missing one

import logging
from typing import Callable, Optional

from app.errors import ApiError
from app.services.storage import RecordKind, RecordQuery, Storage

logger = logging.getLogger(__name__)


async def get_owned_record(storage: Storage, kind: RecordKind, record_id: int, owner_id: int) -> dict:
    """return the record if owner_id owns it, else raise not found"""
    record = await storage.get_record(kind, record_id)
    if record is None or record.get("user_id") != owner_id:
        raise ApiError.not_found(f"{kind.label} not found")
    return record


async def list_owned(
    storage: Storage, kind: RecordKind, owner_id: int, query: Optional[RecordQuery] = None
) -> list[dict]:
    return await storage.list_records(kind, owner_id, query)


async def create_owned(storage: Storage, kind: RecordKind, owner_id: int, fields: dict) -> dict:
    record = await storage.create_record(kind, owner_id, fields)
    logger.info(f"{kind.label} created: {record['id']} by user {owner_id}")
    return record


async def update_owned(
    storage: Storage,
    kind: RecordKind,
    record_id: int,
    owner_id: int,
    fields: dict,
    check_merged: Optional[Callable[[dict], None]] = None,
) -> dict:
    """apply a validated partial update to a record owned by owner_id.
    check_merged sees the record as it would look after the update and
    raises to reject cross-field violations."""
    existing = await get_owned_record(storage, kind, record_id, owner_id)
    if check_merged is not None:
        check_merged({**existing, **fields})

    updated = await storage.update_record(kind, record_id, owner_id, fields)
    if updated is None:
        # deleted between the ownership check and the write
        raise ApiError.not_found(f"{kind.label} not found")

    logger.info(f"{kind.label} updated: {record_id} by user {owner_id}")
    return updated


async def delete_owned(storage: Storage, kind: RecordKind, record_id: int, owner_id: int) -> None:
    await get_owned_record(storage, kind, record_id, owner_id)

    if not await storage.delete_record(kind, record_id, owner_id):
        raise ApiError.not_found(f"{kind.label} not found")

    logger.info(f"{kind.label} deleted: {record_id} by user {owner_id}")
