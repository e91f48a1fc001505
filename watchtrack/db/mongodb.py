import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from ..core.config import settings
from ..core.errors import DependencyError

logger = logging.getLogger(__name__)

USERS = "users"
MOVIES = "movies"
SERIES = "series"
PLAYBACK_SESSIONS = "playback_sessions"


class MongoDB:
    client: AsyncIOMotorClient = None

    def __init__(self):
        self.client = None
        self.db = None

    async def connect(self):
        try:
            self.client = AsyncIOMotorClient(
                settings.MONGODB_URI,
                maxPoolSize=settings.MONGODB_POOL_SIZE,
                connectTimeoutMS=settings.MONGODB_CONNECT_TIMEOUT_MS,
                socketTimeoutMS=settings.MONGODB_SOCKET_TIMEOUT_MS,
                retryWrites=True,
                retryReads=True,
                appname="watchtrack-api",
                tz_aware=True,
            )
            self.db = self.client[settings.MONGODB_DB_NAME]
            logger.info("Connected to MongoDB.")
        except Exception as e:
            logger.error(f"Could not connect to MongoDB: {e}")
            raise

    async def ensure_indexes(self):
        db = self.get_db()
        await db[PLAYBACK_SESSIONS].create_index("session_id", unique=True)
        await db[PLAYBACK_SESSIONS].create_index([("profile_id", ASCENDING), ("title_id", ASCENDING)])
        await db[PLAYBACK_SESSIONS].create_index([("created_at", DESCENDING)])
        await db[PLAYBACK_SESSIONS].create_index("is_completed")
        await db[USERS].create_index("profiles._id")
        await db[USERS].create_index("profiles.watch_history.content_id")
        for collection in (MOVIES, SERIES):
            await db[collection].create_index("genres")
            await db[collection].create_index([("views", DESCENDING)])
            await db[collection].create_index("is_published")
        logger.info("MongoDB indexes ensured.")

    async def ping(self) -> bool:
        if self.client is None:
            return False
        try:
            await self.client.admin.command("ping")
            return True
        except Exception as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False

    async def close(self):
        if self.client:
            self.client.close()
            logger.info("MongoDB connection closed.")

    def get_db(self) -> AsyncIOMotorDatabase:
        if self.db is None:
            raise DependencyError("MongoDB", "Database not initialized")
        return self.db


mongodb = MongoDB()


async def get_mongodb() -> AsyncIOMotorDatabase:
    if not mongodb.client:
        await mongodb.connect()
    return mongodb.get_db()
