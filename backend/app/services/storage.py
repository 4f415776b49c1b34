# storage layer — one interface, two backends
# MemoryStorage for tests and local runs, MongoStorage (motor) for production.
# the backend is picked once at startup by build_storage()

import copy
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.config import Settings
from app.services.db import Database

logger = logging.getLogger(__name__)


class RecordKind(str, Enum):
    """user-owned record tables"""

    MOOD_ENTRIES = "mood_entries"
    TRIGGER_EVENTS = "trigger_events"
    THOUGHTS = "thoughts"
    MEDICATIONS = "medications"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    RecordKind.MOOD_ENTRIES: "Mood entry",
    RecordKind.TRIGGER_EVENTS: "Trigger event",
    RecordKind.THOUGHTS: "Thought",
    RecordKind.MEDICATIONS: "Medication",
}


# ids are stored as bson int64
MAX_RECORD_ID = 2**63 - 1


class StorageError(Exception):
    """base class for storage failures the api maps to a client error"""


class EmailAlreadyRegistered(StorageError):
    pass


@dataclass
class RecordQuery:
    """listing filters. any range bound switches to oldest-first by date
    and takes precedence over an exact date."""

    date: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    @property
    def is_range(self) -> bool:
        return self.start_date is not None or self.end_date is not None


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class Storage(ABC):
    """persistence contract used by the routers"""

    async def connect(self):
        pass

    async def close(self):
        pass

    # users

    @abstractmethod
    async def get_user(self, user_id: int) -> Optional[dict]: ...

    @abstractmethod
    async def get_user_by_email(self, email: str) -> Optional[dict]: ...

    @abstractmethod
    async def create_user(self, name: str, email: str, hashed_password: str) -> dict: ...

    # user-owned records

    @abstractmethod
    async def list_records(self, kind: RecordKind, user_id: int, query: Optional[RecordQuery] = None) -> list[dict]: ...

    @abstractmethod
    async def get_record(self, kind: RecordKind, record_id: int) -> Optional[dict]: ...

    @abstractmethod
    async def create_record(self, kind: RecordKind, user_id: int, fields: dict) -> dict: ...

    @abstractmethod
    async def update_record(self, kind: RecordKind, record_id: int, user_id: int, fields: dict) -> Optional[dict]:
        """apply fields to the record if user_id owns it, returns none otherwise"""

    @abstractmethod
    async def delete_record(self, kind: RecordKind, record_id: int, user_id: int) -> bool:
        """delete the record if user_id owns it"""


class MemoryStorage(Storage):
    """dict-backed store. state lives on the instance, never at module level."""

    def __init__(self):
        self._users: dict[int, dict] = {}
        self._records: dict[RecordKind, dict[int, dict]] = {kind: {} for kind in RecordKind}
        self._counters: dict[str, int] = {}

    def _next_id(self, table: str) -> int:
        self._counters[table] = self._counters.get(table, 0) + 1
        return self._counters[table]

    async def get_user(self, user_id: int) -> Optional[dict]:
        user = self._users.get(user_id)
        return copy.deepcopy(user) if user else None

    async def get_user_by_email(self, email: str) -> Optional[dict]:
        email = email.lower()
        for user in self._users.values():
            if user["email"] == email:
                return copy.deepcopy(user)
        return None

    async def create_user(self, name: str, email: str, hashed_password: str) -> dict:
        email = email.lower()
        if await self.get_user_by_email(email):
            raise EmailAlreadyRegistered(email)

        user = {
            "id": self._next_id("users"),
            "name": name,
            "email": email,
            "hashed_password": hashed_password,
            "created_at": _now_iso(),
        }
        self._users[user["id"]] = user
        return copy.deepcopy(user)

    async def list_records(self, kind: RecordKind, user_id: int, query: Optional[RecordQuery] = None) -> list[dict]:
        query = query or RecordQuery()
        records = [r for r in self._records[kind].values() if r["user_id"] == user_id]

        if query.is_range:
            if query.start_date is not None:
                records = [r for r in records if r.get("date", "") >= query.start_date]
            if query.end_date is not None:
                records = [r for r in records if r.get("date", "") <= query.end_date]
            records.sort(key=lambda r: (r.get("date", ""), r["created_at"], r["id"]))
        else:
            if query.date is not None:
                records = [r for r in records if r.get("date") == query.date]
            records.sort(key=lambda r: (r["created_at"], r["id"]), reverse=True)
        return copy.deepcopy(records)

    async def get_record(self, kind: RecordKind, record_id: int) -> Optional[dict]:
        record = self._records[kind].get(record_id)
        return copy.deepcopy(record) if record else None

    async def create_record(self, kind: RecordKind, user_id: int, fields: dict) -> dict:
        record = {
            **copy.deepcopy(fields),
            "id": self._next_id(kind.value),
            "user_id": user_id,
            "created_at": _now_iso(),
        }
        self._records[kind][record["id"]] = record
        return copy.deepcopy(record)

    async def update_record(self, kind: RecordKind, record_id: int, user_id: int, fields: dict) -> Optional[dict]:
        record = self._records[kind].get(record_id)
        if record is None or record["user_id"] != user_id:
            return None
        record.update(copy.deepcopy(fields))
        return copy.deepcopy(record)

    async def delete_record(self, kind: RecordKind, record_id: int, user_id: int) -> bool:
        record = self._records[kind].get(record_id)
        if record is None or record["user_id"] != user_id:
            return False
        del self._records[kind][record_id]
        return True


# projection that keeps mongo's internal _id out of api documents
_NO_OID = {"_id": 0}


def _storable_id(value: int) -> bool:
    """bson cannot encode ints outside int64; such ids can never exist"""
    return -MAX_RECORD_ID - 1 <= value <= MAX_RECORD_ID


class MongoStorage(Storage):
    """motor-backed store with integer ids from a counters collection"""

    def __init__(self, db: Database):
        self.db = db

    async def connect(self):
        await self.db.connect()
        await self.db.ensure_indexes()

    async def close(self):
        await self.db.close()

    async def _next_id(self, table: str) -> int:
        counter = await self.db.counters.find_one_and_update(
            {"_id": table},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return counter["seq"]

    async def get_user(self, user_id: int) -> Optional[dict]:
        if not _storable_id(user_id):
            return None
        return await self.db.users.find_one({"id": user_id}, _NO_OID)

    async def get_user_by_email(self, email: str) -> Optional[dict]:
        return await self.db.users.find_one({"email": email.lower()}, _NO_OID)

    async def create_user(self, name: str, email: str, hashed_password: str) -> dict:
        email = email.lower()
        if await self.get_user_by_email(email):
            raise EmailAlreadyRegistered(email)

        user = {
            "id": await self._next_id("users"),
            "name": name,
            "email": email,
            "hashed_password": hashed_password,
            "created_at": _now_iso(),
        }
        try:
            await self.db.users.insert_one(user)
        except DuplicateKeyError as e:
            # lost a race with a concurrent signup for the same email
            raise EmailAlreadyRegistered(email) from e
        user.pop("_id", None)
        return user

    async def list_records(self, kind: RecordKind, user_id: int, query: Optional[RecordQuery] = None) -> list[dict]:
        query = query or RecordQuery()
        filters: dict = {"user_id": user_id}

        if query.is_range:
            date_range = {}
            if query.start_date is not None:
                date_range["$gte"] = query.start_date
            if query.end_date is not None:
                date_range["$lte"] = query.end_date
            filters["date"] = date_range
        elif query.date is not None:
            filters["date"] = query.date

        if query.is_range:
            order = [("date", ASCENDING), ("created_at", ASCENDING), ("id", ASCENDING)]
        else:
            order = [("created_at", DESCENDING), ("id", DESCENDING)]

        cursor = self.db.collection(kind.value).find(filters, _NO_OID).sort(order)
        records = []
        async for doc in cursor:
            records.append(doc)
        return records

    async def get_record(self, kind: RecordKind, record_id: int) -> Optional[dict]:
        if not _storable_id(record_id):
            return None
        return await self.db.collection(kind.value).find_one({"id": record_id}, _NO_OID)

    async def create_record(self, kind: RecordKind, user_id: int, fields: dict) -> dict:
        record = {
            **fields,
            "id": await self._next_id(kind.value),
            "user_id": user_id,
            "created_at": _now_iso(),
        }
        await self.db.collection(kind.value).insert_one(record)
        record.pop("_id", None)
        return record

    async def update_record(self, kind: RecordKind, record_id: int, user_id: int, fields: dict) -> Optional[dict]:
        if not _storable_id(record_id):
            return None
        owned = {"id": record_id, "user_id": user_id}
        coll = self.db.collection(kind.value)
        if not fields:
            return await coll.find_one(owned, _NO_OID)
        return await coll.find_one_and_update(
            owned,
            {"$set": fields},
            projection=_NO_OID,
            return_document=ReturnDocument.AFTER,
        )

    async def delete_record(self, kind: RecordKind, record_id: int, user_id: int) -> bool:
        if not _storable_id(record_id):
            return False
        result = await self.db.collection(kind.value).delete_one({"id": record_id, "user_id": user_id})
        return result.deleted_count == 1


def build_storage(settings: Settings) -> Storage:
    """select the storage backend for this process"""
    if settings.STORAGE_BACKEND == "memory":
        logger.info("Using in-memory storage")
        return MemoryStorage()
    logger.info("Using MongoDB storage")
    return MongoStorage(Database(settings.MONGODB_URI, settings.MONGODB_DATABASE))
