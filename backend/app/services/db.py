# async mongodb client for the backend api
# uses motor for non-blocking operations

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

logger = logging.getLogger(__name__)

# collections holding user-owned records
RECORD_COLLECTIONS = ("mood_entries", "trigger_events", "thoughts", "medications")


class Database:
    """async mongodb connection manager"""

    def __init__(self, uri: str, database: str):
        self.uri = uri
        self.database = database
        self.client: Optional[AsyncIOMotorClient] = None
        self.db: Optional[AsyncIOMotorDatabase] = None

    async def connect(self):
        """establish connection to mongodb"""
        if self.client is not None:
            return

        logger.info(f"Connecting to MongoDB database: {self.database}")
        self.client = AsyncIOMotorClient(self.uri)
        self.db = self.client[self.database]

        # verify connection
        await self.client.admin.command("ping")
        logger.info("MongoDB connection established")

    async def close(self):
        """close mongodb connection"""
        if self.client:
            self.client.close()
            self.client = None
            self.db = None
            logger.info("MongoDB connection closed")

    async def ensure_indexes(self):
        """unique ids per collection, unique emails, owner-scoped listing"""
        await self.users.create_index("id", unique=True)
        await self.users.create_index("email", unique=True)
        for name in RECORD_COLLECTIONS:
            coll = self.collection(name)
            await coll.create_index("id", unique=True)
            await coll.create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])
        await self.mood_entries.create_index([("user_id", ASCENDING), ("date", ASCENDING)])

    # collection accessors

    def collection(self, name: str):
        return self.db[name]

    @property
    def users(self):
        return self.db["users"]

    @property
    def mood_entries(self):
        return self.db["mood_entries"]

    @property
    def counters(self):
        return self.db["counters"]
