"""
Index setup for the portal collections.

The unique index on ``users.email`` is what finally enforces email uniqueness
when two registrations race; the crud layer maps its rejection to a 409.
"""

import asyncio
import logging

from pymongo import ASCENDING

from college_portal.core.database import USERS, STUDENT_PROFILES

logger = logging.getLogger("database_setup")


async def ensure_indexes(db):
    """Create the indexes the portal relies on. Safe to run repeatedly."""
    await db[USERS].create_index("email", unique=True)
    await db[USERS].create_index([("role", ASCENDING), ("status", ASCENDING)])
    logger.info("users indexes ready")

    await db[STUDENT_PROFILES].create_index("user", unique=True)
    await db[STUDENT_PROFILES].create_index([("department", ASCENDING), ("year", ASCENDING)])
    logger.info("student_profiles indexes ready")

    users_count = await db[USERS].count_documents({})
    profiles_count = await db[STUDENT_PROFILES].count_documents({})
    logger.info(f"accounts: {users_count}, student profiles: {profiles_count}")


if __name__ == "__main__":
    from college_portal.core.database import db as default_db

    logging.basicConfig(level=logging.INFO)
    asyncio.run(ensure_indexes(default_db))
