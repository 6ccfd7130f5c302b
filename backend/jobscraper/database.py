import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from jobscraper.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

client: AsyncIOMotorClient | None = None
db: AsyncIOMotorDatabase | None = None


async def connect_to_mongo() -> None:
    global client, db
    client = AsyncIOMotorClient(settings.mongodb_url, tz_aware=True)
    db = client[settings.mongodb_db_name]
    logger.info(f"MongoDB connected to database {settings.mongodb_db_name}")


async def close_mongo_connection() -> None:
    global client
    if client:
        client.close()
        logger.info("MongoDB connection closed")


def get_database() -> AsyncIOMotorDatabase:
    if db is None:
        raise RuntimeError("Database not initialized. Call connect_to_mongo first.")
    return db


async def ensure_indexes(database: AsyncIOMotorDatabase) -> None:
    """Create the indexes the search history queries rely on."""
    collection = database["search_requests"]
    await collection.create_index([("createdAt", DESCENDING)])
    await collection.create_index([("status", ASCENDING)])
