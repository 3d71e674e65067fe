import logging
import re
from typing import Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from college_portal.core.database import USERS
from college_portal.core.errors import Conflict
from college_portal.models.user import Role, Status
from college_portal.utils.mongo import split_update, utcnow

logger = logging.getLogger("crud.users")


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def get_user_by_email(db, email: str) -> Optional[dict]:
    return await db[USERS].find_one({"email": normalize_email(email)})


async def get_user_by_id(db, user_id) -> Optional[dict]:
    if not isinstance(user_id, ObjectId):
        if not ObjectId.is_valid(user_id):
            return None
        user_id = ObjectId(user_id)
    return await db[USERS].find_one({"_id": user_id})


async def email_taken(db, email: str, exclude_id: Optional[ObjectId] = None) -> bool:
    query = {"email": normalize_email(email)}
    if exclude_id is not None:
        query["_id"] = {"$ne": exclude_id}
    return await db[USERS].find_one(query, {"_id": 1}) is not None


async def create_user(
    db,
    *,
    email: str,
    password_hash: str,
    role: str,
    sub_role: Optional[str] = None,
    name: Optional[str] = None,
    avatar_url: Optional[str] = None,
    department: Optional[str] = None,
    contact: Optional[dict] = None,
    status: str = Status.ACTIVE.value,
) -> dict:
    """Insert an account. A concurrent insert of the same email surfaces as Conflict."""
    now = utcnow()
    doc = {
        "email": normalize_email(email),
        "passwordHash": password_hash,
        "role": role,
        "status": status,
        "createdAt": now,
        "updatedAt": now,
    }
    # sub-role and the profile-ish fields only exist on academic accounts
    if role == Role.ACADEMIC.value:
        doc["subRole"] = sub_role
        optional = {"name": name, "avatarUrl": avatar_url, "department": department, "contact": contact}
        doc.update({k: v for k, v in optional.items() if v is not None})

    try:
        result = await db[USERS].insert_one(doc)
    except DuplicateKeyError:
        logger.info(f"duplicate email rejected by the store: {doc['email']}")
        raise Conflict()
    doc["_id"] = result.inserted_id
    return doc


async def update_user(db, user_id: ObjectId, fields: dict) -> Optional[dict]:
    """Apply a partial update; None values remove the field. Returns the new document."""
    to_set, to_unset = split_update(fields)
    if "email" in to_set:
        to_set["email"] = normalize_email(to_set["email"])
    to_set["updatedAt"] = utcnow()
    update = {"$set": to_set}
    if to_unset:
        update["$unset"] = to_unset
    try:
        return await db[USERS].find_one_and_update(
            {"_id": user_id},
            update,
            return_document=ReturnDocument.AFTER,
        )
    except DuplicateKeyError:
        raise Conflict()


async def set_password_hash(db, user_id: ObjectId, password_hash: str) -> None:
    await db[USERS].update_one(
        {"_id": user_id},
        {"$set": {"passwordHash": password_hash, "updatedAt": utcnow()}},
    )


async def set_status(db, user_id: ObjectId, status: str) -> bool:
    result = await db[USERS].update_one(
        {"_id": user_id},
        {"$set": {"status": status, "updatedAt": utcnow()}},
    )
    return result.matched_count > 0


async def delete_user(db, user_id: ObjectId) -> bool:
    result = await db[USERS].delete_one({"_id": user_id})
    return result.deleted_count > 0


async def list_academics(db, department: Optional[str] = None, q: Optional[str] = None) -> list:
    query = {"role": Role.ACADEMIC.value}
    if department:
        query["department"] = department
    if q:
        pattern = re.escape(q)
        query["$or"] = [
            {"email": {"$regex": pattern, "$options": "i"}},
            {"name": {"$regex": pattern, "$options": "i"}},
        ]
    cursor = db[USERS].find(query, {"passwordHash": 0}).sort("createdAt", -1)
    return await cursor.to_list(length=None)


async def get_users_by_ids(db, user_ids: list) -> dict:
    if not user_ids:
        return {}
    cursor = db[USERS].find({"_id": {"$in": user_ids}}, {"passwordHash": 0})
    return {doc["_id"]: doc for doc in await cursor.to_list(length=None)}
