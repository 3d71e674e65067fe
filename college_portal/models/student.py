# college_portal/models/student.py
from typing import Optional

from bson import ObjectId


def linked_user(doc: Optional[dict]) -> Optional[dict]:
    if not doc:
        return None
    return {
        "id": str(doc["_id"]),
        "email": doc.get("email"),
        "status": doc.get("status"),
        "role": doc.get("role"),
    }


def profile_view(doc: dict, user: Optional[dict] = None) -> dict:
    """
    Student profile as returned to clients.

    ``user`` is the owning account document; when given it is embedded as
    ``{id, email, status, role}``, otherwise only the account id is returned.
    """
    owner = doc.get("user")
    return {
        "id": str(doc["_id"]),
        "user": linked_user(user) if user is not None else (str(owner) if isinstance(owner, ObjectId) else owner),
        "firstName": doc.get("firstName"),
        "lastName": doc.get("lastName"),
        "dob": doc.get("dob"),
        "contact": doc.get("contact") or {},
        "department": doc.get("department"),
        "year": doc.get("year"),
        "avatarUrl": doc.get("avatarUrl"),
        "createdAt": doc.get("createdAt"),
        "updatedAt": doc.get("updatedAt"),
    }
