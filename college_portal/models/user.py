# college_portal/models/user.py
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class Role(str, Enum):
    ACADEMIC = "academic"
    STUDENT = "student"


class SubRole(str, Enum):
    FACULTY = "faculty"
    ADMINISTRATIVE = "administrative"


class Status(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class CurrentUser(BaseModel):
    """Identity attached to the request once the session cookie checks out."""

    id: str
    role: Role
    sub_role: Optional[SubRole] = None

    @property
    def is_administrator(self) -> bool:
        return self.role == Role.ACADEMIC and self.sub_role == SubRole.ADMINISTRATIVE


def public_user(doc: dict) -> dict:
    """Account document as returned to clients; never carries the hash."""
    return {
        "id": str(doc["_id"]),
        "email": doc.get("email"),
        "role": doc.get("role"),
        "subRole": doc.get("subRole"),
        "name": doc.get("name"),
        "avatarUrl": doc.get("avatarUrl"),
        "department": doc.get("department"),
        "contact": doc.get("contact"),
        "status": doc.get("status"),
    }


def faculty_view(doc: dict) -> dict:
    view = public_user(doc)
    view["createdAt"] = doc.get("createdAt")
    view["updatedAt"] = doc.get("updatedAt")
    return view
