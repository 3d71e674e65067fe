from datetime import date
from typing import Optional

from pydantic import EmailStr, field_validator

from college_portal.schemas.common import (
    CamelModel,
    Contact,
    check_avatar_url,
    check_department,
    check_dob,
    check_password,
    check_person_name,
    check_year,
    normalize_email,
)


class _StudentFields(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    dob: Optional[date] = None
    contact: Optional[Contact] = None
    department: Optional[str] = None
    year: Optional[int] = None
    avatar_url: Optional[str] = None

    @field_validator("first_name")
    @classmethod
    def validate_first_name(cls, v):
        return check_person_name(v, "First name", 50)

    @field_validator("last_name")
    @classmethod
    def validate_last_name(cls, v):
        return check_person_name(v, "Last name", 50)

    @field_validator("dob")
    @classmethod
    def validate_dob(cls, v):
        return check_dob(v)

    @field_validator("department")
    @classmethod
    def validate_department(cls, v):
        return check_department(v)

    @field_validator("year")
    @classmethod
    def validate_year(cls, v):
        return check_year(v)

    @field_validator("avatar_url")
    @classmethod
    def validate_avatar_url(cls, v):
        return check_avatar_url(v)


class StudentCreate(_StudentFields):
    email: EmailStr
    password: str
    first_name: str
    last_name: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return check_password(v)


class StudentUpdate(_StudentFields):
    pass


class StudentContactUpdate(CamelModel):
    contact: Contact
