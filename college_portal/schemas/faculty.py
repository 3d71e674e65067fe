from typing import Optional

from pydantic import EmailStr, field_validator

from college_portal.models.user import SubRole
from college_portal.schemas.common import (
    CamelModel,
    check_avatar_url,
    check_department,
    check_password,
    check_person_name,
    normalize_email,
)


class FacultyCreate(CamelModel):
    email: EmailStr
    password: str
    sub_role: SubRole
    name: str
    department: Optional[str] = None
    avatar_url: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return check_password(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return check_person_name(v, "Name", 100)

    @field_validator("department")
    @classmethod
    def validate_department(cls, v):
        return check_department(v)

    @field_validator("avatar_url")
    @classmethod
    def validate_avatar_url(cls, v):
        return check_avatar_url(v)


class FacultyUpdate(CamelModel):
    email: Optional[EmailStr] = None
    name: Optional[str] = None
    sub_role: Optional[SubRole] = None
    department: Optional[str] = None
    avatar_url: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return normalize_email(v) if v is not None else v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return check_person_name(v, "Name", 100)

    @field_validator("department")
    @classmethod
    def validate_department(cls, v):
        return check_department(v)

    @field_validator("avatar_url")
    @classmethod
    def validate_avatar_url(cls, v):
        return check_avatar_url(v)
