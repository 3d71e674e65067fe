#!/usr/bin/env python3
"""
API server entry point.

Checks that MongoDB is reachable, then serves the FastAPI app with uvicorn.
"""

import asyncio
import logging
import sys

import uvicorn

from college_portal.core.config import settings
from college_portal.core.database import STUDENT_PROFILES, USERS

logger = logging.getLogger("run_server")


async def check_database_connection():
    """Ping the database and report collection sizes."""
    from motor.motor_asyncio import AsyncIOMotorClient

    client = AsyncIOMotorClient(
        settings.MONGO_URI,
        serverSelectionTimeoutMS=settings.MONGO_SERVER_SELECTION_TIMEOUT_MS,
    )
    try:
        await client.admin.command("ping")
        db = client[settings.DATABASE_NAME]
        collections = await db.list_collection_names()
        logger.info(f"collections: {collections}")
        if USERS in collections:
            logger.info(f"accounts: {await db[USERS].count_documents({})}")
        if STUDENT_PROFILES in collections:
            logger.info(f"student profiles: {await db[STUDENT_PROFILES].count_documents({})}")
        return True
    except Exception as e:
        logger.error(f"database connection failed: {e}")
        return False
    finally:
        client.close()


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    logger.info("checking database...")

    if not asyncio.run(check_database_connection()):
        logger.error("MongoDB is not reachable; is it running?")
        sys.exit(1)

    uvicorn.run(
        "college_portal.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        reload=settings.DEBUG,
    )
