import re
from typing import Optional

from bson import ObjectId
from pymongo import ReturnDocument

from college_portal.core.database import STUDENT_PROFILES
from college_portal.crud import users as users_crud
from college_portal.models.user import Role
from college_portal.utils.mongo import split_update, utcnow


async def create_profile(
    db,
    *,
    user_id: ObjectId,
    first_name: str,
    last_name: str,
    dob=None,
    contact: Optional[dict] = None,
    department: Optional[str] = None,
    year: Optional[int] = None,
    avatar_url: Optional[str] = None,
) -> dict:
    now = utcnow()
    doc = {
        "user": user_id,
        "firstName": first_name,
        "lastName": last_name,
        "contact": contact or {},
        "createdAt": now,
        "updatedAt": now,
    }
    optional = {"dob": dob, "department": department, "year": year, "avatarUrl": avatar_url}
    doc.update({k: v for k, v in optional.items() if v is not None})
    result = await db[STUDENT_PROFILES].insert_one(doc)
    doc["_id"] = result.inserted_id
    return doc


async def get_profile(db, profile_id: ObjectId) -> Optional[dict]:
    return await db[STUDENT_PROFILES].find_one({"_id": profile_id})


async def get_profile_by_user(db, user_id) -> Optional[dict]:
    if not isinstance(user_id, ObjectId):
        user_id = ObjectId(user_id)
    return await db[STUDENT_PROFILES].find_one({"user": user_id})


async def list_profiles(
    db,
    department: Optional[str] = None,
    year: Optional[int] = None,
    q: Optional[str] = None,
    status: Optional[str] = None,
) -> list:
    """
    Profiles matching the filters, each paired with its owning account.

    Profiles whose account is gone, is not a student, or does not match
    ``status`` are dropped. Returns a list of ``(profile, user)`` tuples.
    """
    query = {}
    if department:
        query["department"] = department
    if year is not None:
        query["year"] = year
    if q:
        pattern = re.escape(q)
        query["$or"] = [
            {"firstName": {"$regex": pattern, "$options": "i"}},
            {"lastName": {"$regex": pattern, "$options": "i"}},
        ]

    profiles = await db[STUDENT_PROFILES].find(query).sort("createdAt", -1).to_list(length=None)
    owners = await users_crud.get_users_by_ids(db, [p["user"] for p in profiles])

    linked = []
    for profile in profiles:
        user = owners.get(profile["user"])
        if not user or user.get("role") != Role.STUDENT.value:
            continue
        if status and user.get("status") != status:
            continue
        linked.append((profile, user))
    return linked


async def update_profile(db, query: dict, fields: dict) -> Optional[dict]:
    to_set, to_unset = split_update(fields)
    to_set["updatedAt"] = utcnow()
    update = {"$set": to_set}
    if to_unset:
        update["$unset"] = to_unset
    return await db[STUDENT_PROFILES].find_one_and_update(
        query,
        update,
        return_document=ReturnDocument.AFTER,
    )


async def delete_profile(db, profile_id: ObjectId) -> bool:
    result = await db[STUDENT_PROFILES].delete_one({"_id": profile_id})
    return result.deleted_count > 0
