from datetime import date
from typing import Optional

from pydantic import EmailStr, field_validator, model_validator

from college_portal.models.user import Role, SubRole
from college_portal.schemas.common import (
    AcademicContact,
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


class UserLogin(CamelModel):
    email: EmailStr
    password: str
    role: Role

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if not v:
            raise ValueError("Password is required")
        if len(v) > 128:
            raise ValueError("Password must be less than 128 characters")
        return v


class UserCreate(CamelModel):
    """
    Self-registration payload.

    Which fields are required depends on ``role``: students need a first and
    last name, academic users need a sub-role and a display name.
    """

    email: EmailStr
    password: str
    role: Role
    sub_role: Optional[SubRole] = None
    name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    dob: Optional[date] = None
    contact: Optional[Contact] = None
    department: Optional[str] = None
    year: Optional[int] = None
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

    @model_validator(mode="after")
    def check_role_fields(self):
        if self.role == Role.STUDENT:
            if not self.first_name or not self.last_name:
                raise ValueError("firstName and lastName are required for students")
        else:
            if not self.sub_role:
                raise ValueError("subRole (faculty or administrative) is required for academic users")
            if not self.name:
                raise ValueError("name is required for academic users")
        return self


class ProfileUpdate(CamelModel):
    email: EmailStr
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    department: Optional[str] = None
    contact: Optional[AcademicContact] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return normalize_email(v)

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
