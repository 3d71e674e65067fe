import re
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

PERSON_NAME_RE = re.compile(r"^[A-Za-z\s'-]+$")
PHONE_RE = re.compile(r"^\+?[0-9\s().-]{7,20}$")


class CamelModel(BaseModel):
    """Snake-case attributes, camelCase on the wire and in MongoDB documents."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, use_enum_values=True)

    def to_document(self) -> dict:
        # only what the client actually sent
        return self.model_dump(by_alias=True, exclude_unset=True)


def normalize_email(v: str) -> str:
    v = str(v).strip().lower()
    if len(v) > 255:
        raise ValueError("Email must be less than 255 characters")
    return v


def check_password(v: str) -> str:
    if len(v) < 6:
        raise ValueError("Password must be at least 6 characters")
    if len(v) > 128:
        raise ValueError("Password must be less than 128 characters")
    return v


def check_person_name(v: Optional[str], label: str, max_length: int) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not (1 <= len(v) <= max_length):
        raise ValueError(f"{label} must be between 1 and {max_length} characters")
    if not PERSON_NAME_RE.match(v):
        raise ValueError(f"{label} can only contain letters, spaces, hyphens, and apostrophes")
    return v


def check_department(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if len(v) > 100:
        raise ValueError("Department must be less than 100 characters")
    return v


def check_avatar_url(v: Optional[str]) -> Optional[str]:
    if not v:
        return v
    # inline base64 images are accepted; the body size limit bounds them
    if v.startswith("data:image/"):
        return v
    if not v.startswith(("http://", "https://")):
        raise ValueError("Avatar URL must be a valid URL")
    if len(v) > 2048:
        raise ValueError("Avatar URL must be less than 2048 characters")
    return v


def check_dob(v: Optional[date]) -> Optional[date]:
    if v is None:
        return v
    age = date.today().year - v.year
    if age < 10 or age > 100:
        raise ValueError("Date of birth must represent an age between 10 and 100 years")
    return v


def check_year(v: Optional[int]) -> Optional[int]:
    if v is not None and not (1 <= v <= 5):
        raise ValueError("Year must be between 1 and 5")
    return v


def check_phone(v: Optional[str]) -> Optional[str]:
    if v and not PHONE_RE.match(v.strip()):
        raise ValueError("Invalid phone number format")
    return v


def check_address(v: Optional[str]) -> Optional[str]:
    if v and len(v) > 500:
        raise ValueError("Address must be less than 500 characters")
    return v


def dob_to_datetime(v: Optional[date]) -> Optional[datetime]:
    # BSON has no plain date type
    if v is None:
        return None
    return datetime(v.year, v.month, v.day)


class Contact(CamelModel):
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return check_phone(v)

    @field_validator("address")
    @classmethod
    def validate_address(cls, v):
        return check_address(v)


class AcademicContact(CamelModel):
    phone: Optional[str] = None
    address: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return check_phone(v)

    @field_validator("address")
    @classmethod
    def validate_address(cls, v):
        return check_address(v)


class StatusUpdate(CamelModel):
    status: str

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v not in ("active", "inactive"):
            raise ValueError('Status must be either "active" or "inactive"')
        return v


class ChangePasswordRequest(CamelModel):
    current_password: str
    new_password: str

    @field_validator("current_password")
    @classmethod
    def validate_current(cls, v):
        if not v:
            raise ValueError("Current password is required")
        return v

    @field_validator("new_password")
    @classmethod
    def validate_new(cls, v):
        if len(v) < 6:
            raise ValueError("New password must be at least 6 characters")
        if len(v) > 128:
            raise ValueError("New password must be less than 128 characters")
        return v
