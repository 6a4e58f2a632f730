# async mongodb client for the journaling api
# every per-user collection is keyed by a string `id` and filtered by `user_id`

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from journaling_app.config import settings

logger = logging.getLogger(__name__)

# collections listed newest-first by owner
USER_TIMELINES = (
    "journal_entries",
    "check_ins",
    "finance_entries",
    "tasks",
    "goals",
    "recaps",
    "nudge_interactions",
)


class Database:
    """motor connection for the journaling collections"""

    def __init__(self):
        self.client: Optional[AsyncIOMotorClient] = None
        self.db: Optional[AsyncIOMotorDatabase] = None

    async def connect(self):
        if self.client is not None:
            return

        logger.info(f"Connecting to MongoDB database: {settings.MONGODB_DATABASE}")
        self.client = AsyncIOMotorClient(settings.MONGODB_URI)
        self.db = self.client[settings.MONGODB_DATABASE]
        await self.client.admin.command("ping")
        await self.ensure_indexes()
        logger.info("MongoDB connection established")

    async def ensure_indexes(self):
        """unique ids, unique emails, per-owner timelines; safe to rerun"""
        await self.users.create_index("email", unique=True)
        await self.analysis_results.create_index("journal_entry_id")
        await self.soul_matrix.create_index("user_id", unique=True)
        await self.wheel_of_life.create_index("user_id", unique=True)
        await self.people.create_index([("user_id", ASCENDING), ("name", ASCENDING)])
        for name in USER_TIMELINES:
            await self.db[name].create_index("id", unique=True)
            await self.db[name].create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])
        logger.info(f"Indexes ready on {len(USER_TIMELINES) + 5} collections")

    async def close(self):
        if self.client:
            self.client.close()
            self.client = None
            self.db = None
            logger.info("MongoDB connection closed")

    # collection accessors

    @property
    def users(self):
        return self.db["users"]

    @property
    def journal_entries(self):
        return self.db["journal_entries"]

    @property
    def analysis_results(self):
        return self.db["analysis_results"]

    @property
    def check_ins(self):
        return self.db["check_ins"]

    @property
    def people(self):
        return self.db["people"]

    @property
    def finance_entries(self):
        return self.db["finance_entries"]

    @property
    def tasks(self):
        return self.db["tasks"]

    @property
    def goals(self):
        return self.db["goals"]

    @property
    def soul_matrix(self):
        return self.db["soul_matrix"]

    @property
    def wheel_of_life(self):
        return self.db["wheel_of_life"]

    @property
    def recaps(self):
        return self.db["recaps"]

    @property
    def nudge_interactions(self):
        return self.db["nudge_interactions"]


# singleton instance
db = Database()


async def get_db() -> Database:
    """dependency injection for database access"""
    return db
