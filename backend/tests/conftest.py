# shared fixtures for backend api tests
# provides in-memory storage, a mock motor database, test users, tokens, and httpx clients

import copy
import os

# keep bcrypt cheap in tests; must be set before app.config is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
import pytest_asyncio
from unittest.mock import MagicMock

from httpx import AsyncClient, ASGITransport
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.main import create_app
from app.dependencies import BearerIdentityProvider
from app.services.auth_service import hash_password, issue_token
from app.services.storage import MemoryStorage


# test users

ANN_PASSWORD = "secret1"
BOB_PASSWORD = "hunter22"

SAMPLE_MOOD = {
    "date": "2024-01-01",
    "timeOfDay": "morning",
    "mood": "happy",
    "intensity": 3,
}

SAMPLE_TRIGGER = {
    "eventSituation": "Argument with a coworker",
    "emotions": ["anger", "frustration"],
    "actionTaken": "Went for a walk",
    "consequences": ["Calmed down"],
    "startDate": "2024-03-01",
    "endDate": "2024-03-04",
}

SAMPLE_THOUGHT = {
    "content": "Grateful for a quiet morning.",
    "moodTags": ["grateful", "calm"],
}

SAMPLE_MEDICATION = {
    "name": "Lithium",
    "dosage": "300mg",
    "schedule": "twice daily",
}


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


# mock motor collections, used to exercise MongoStorage without a server

class AsyncCursorMock:
    """mock for motor's async cursor — supports async for and sort"""

    def __init__(self, data=None):
        self._data = data or []
        self._index = 0

    def sort(self, keys, direction=None):
        if isinstance(keys, str):
            keys = [(keys, direction or 1)]
        # stable sorts applied from the least significant key
        for key, order in reversed(keys):
            self._data.sort(key=lambda d: d.get(key), reverse=order == -1)
        return self

    def __aiter__(self):
        self._index = 0
        return self

    async def __anext__(self):
        if self._index >= len(self._data):
            raise StopAsyncIteration
        item = self._data[self._index]
        self._index += 1
        return item


class MockCollection:
    """mock for a motor collection with async methods"""

    def __init__(self, data=None, unique=()):
        self._data = data or []
        self._unique = unique
        self.indexes = []

    @staticmethod
    def _project(doc, projection):
        out = copy.deepcopy(doc)
        if projection and projection.get("_id") == 0:
            out.pop("_id", None)
        return out

    @staticmethod
    def _encode(query):
        """mimic bson encoding, which rejects ints outside int64"""
        for value in (query or {}).values():
            if isinstance(value, int) and not -2**63 <= value < 2**63:
                raise OverflowError("MongoDB can only handle up to 8-byte ints")

    def find(self, query=None, projection=None):
        self._encode(query)
        results = [self._project(d, projection) for d in self._data if self._matches(d, query or {})]
        return AsyncCursorMock(results)

    async def find_one(self, query=None, projection=None):
        self._encode(query)
        for doc in self._data:
            if self._matches(doc, query or {}):
                return self._project(doc, projection)
        return None

    async def insert_one(self, doc):
        for field in self._unique:
            if any(d.get(field) == doc.get(field) for d in self._data):
                raise DuplicateKeyError(f"duplicate {field}")
        doc.setdefault("_id", f"oid-{len(self._data) + 1}")
        self._data.append(copy.deepcopy(doc))
        result = MagicMock()
        result.inserted_id = doc["_id"]
        return result

    async def find_one_and_update(self, query, update, projection=None, upsert=False, return_document=ReturnDocument.BEFORE):
        self._encode(query)
        target = next((d for d in self._data if self._matches(d, query)), None)
        if target is None:
            if not upsert:
                return None
            target = {k: v for k, v in query.items() if not isinstance(v, dict)}
            self._data.append(target)
        before = self._project(target, projection)
        for key, val in update.get("$set", {}).items():
            target[key] = copy.deepcopy(val)
        for key, val in update.get("$inc", {}).items():
            target[key] = target.get(key, 0) + val
        if return_document == ReturnDocument.AFTER:
            return self._project(target, projection)
        return before

    async def delete_one(self, query):
        self._encode(query)
        result = MagicMock()
        result.deleted_count = 0
        for i, doc in enumerate(self._data):
            if self._matches(doc, query):
                del self._data[i]
                result.deleted_count = 1
                break
        return result

    async def create_index(self, keys, **kwargs):
        self.indexes.append((keys, kwargs))
        return "mock_index"

    def _matches(self, doc, query):
        """basic mongodb query matching for tests"""
        for key, value in query.items():
            doc_val = doc.get(key)
            if isinstance(value, dict):
                if "$gte" in value and (doc_val is None or doc_val < value["$gte"]):
                    return False
                if "$lte" in value and (doc_val is None or doc_val > value["$lte"]):
                    return False
            elif doc_val != value:
                return False
        return True


class MockDatabase:
    """mock database that mimics app.services.db.Database"""

    def __init__(self):
        self.connected = False
        self.users = MockCollection(unique=("email", "id"))
        self.counters = MockCollection()
        self._collections = {
            "mood_entries": MockCollection(unique=("id",)),
            "trigger_events": MockCollection(unique=("id",)),
            "thoughts": MockCollection(unique=("id",)),
            "medications": MockCollection(unique=("id",)),
        }

    def collection(self, name):
        return self._collections[name]

    @property
    def mood_entries(self):
        return self._collections["mood_entries"]

    async def connect(self):
        self.connected = True

    async def close(self):
        self.connected = False

    async def ensure_indexes(self):
        await self.users.create_index("email", unique=True)


@pytest.fixture
def storage():
    """fresh in-memory store for each test"""
    return MemoryStorage()


@pytest.fixture
def mock_db():
    return MockDatabase()


@pytest.fixture
def app(storage):
    return create_app(storage=storage, identity_provider=BearerIdentityProvider())


@pytest_asyncio.fixture
async def ann(storage):
    """registered user ann with a valid token"""
    user = await storage.create_user("Ann", "ann@x.com", hash_password(ANN_PASSWORD))
    user["token"] = issue_token(user["id"])
    return user


@pytest_asyncio.fixture
async def bob(storage):
    """second registered user, used for cross-user isolation checks"""
    user = await storage.create_user("Bob", "bob@x.com", hash_password(BOB_PASSWORD))
    user["token"] = issue_token(user["id"])
    return user


@pytest_asyncio.fixture
async def client(app):
    """unauthenticated httpx async test client"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def ann_client(app, ann):
    """client authenticated as ann"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", headers=bearer(ann["token"])) as ac:
        yield ac


@pytest_asyncio.fixture
async def bob_client(app, bob):
    """client authenticated as bob"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", headers=bearer(bob["token"])) as ac:
        yield ac
