import logging

from motor.motor_asyncio import AsyncIOMotorClient
from college_portal.core.config import settings

logger = logging.getLogger("database")

client = AsyncIOMotorClient(
    settings.MONGO_URI,
    serverSelectionTimeoutMS=settings.MONGO_SERVER_SELECTION_TIMEOUT_MS,
    socketTimeoutMS=settings.MONGO_SOCKET_TIMEOUT_MS,
)
db = client[settings.DATABASE_NAME]

USERS = "users"
STUDENT_PROFILES = "student_profiles"


async def connect_to_mongo():
    # fail fast at startup if the server is unreachable
    await client.admin.command("ping")
    logger.info(f"MongoDB connected: {settings.DATABASE_NAME}")


async def close_mongo_connection():
    client.close()
    logger.info("MongoDB connection closed")


# dependency injected into routes and overridden in tests
async def get_database():
    return db
