import logging
from dataclasses import dataclass
from typing import Optional

from college_portal.core.errors import AuthenticationFailed, NotFound, PermissionDenied
from college_portal.crud import users as users_crud
from college_portal.models.user import CurrentUser, Status, public_user
from college_portal.utils.security import get_password_hash, verify_password
from college_portal.utils.tokens import (
    REFRESH,
    issue_access_token,
    issue_refresh_token,
    verify_token,
)

logger = logging.getLogger("auth_service")

INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
ROLE_MISMATCH = "ROLE_MISMATCH"
INVALID_REFRESH = "INVALID_REFRESH"


@dataclass
class Session:
    user: dict
    access_token: str
    refresh_token: str


def _issue_session(user: dict) -> Session:
    user_id = str(user["_id"])
    return Session(
        user=public_user(user),
        access_token=issue_access_token(user_id, user["role"]),
        refresh_token=issue_refresh_token(user_id, user["role"]),
    )


async def login_service(db, email: str, password: str, role: str) -> Session:
    user = await users_crud.get_user_by_email(db, email)
    if not user or user.get("status") != Status.ACTIVE.value:
        raise AuthenticationFailed("Invalid credentials", code=INVALID_CREDENTIALS)

    if user.get("role") != role:
        raise PermissionDenied("Invalid credentials", code=ROLE_MISMATCH)

    if not verify_password(password, user.get("passwordHash")):
        raise AuthenticationFailed("Invalid credentials", code=INVALID_CREDENTIALS)

    return _issue_session(user)


async def refresh_service(db, token: Optional[str]) -> Session:
    """Rotate both tokens for the account named by a valid refresh token."""
    payload = verify_token(token, REFRESH) if token else None
    if payload is None:
        raise AuthenticationFailed("Invalid refresh token", code=INVALID_REFRESH)

    user = await users_crud.get_user_by_id(db, payload["sub"])
    if not user or user.get("status") != Status.ACTIVE.value:
        raise AuthenticationFailed("Invalid refresh token", code=INVALID_REFRESH)

    return _issue_session(user)


def hash_password(plain: str) -> str:
    return get_password_hash(plain)


async def load_own_account(db, current_user: CurrentUser) -> dict:
    user = await users_crud.get_user_by_id(db, current_user.id)
    if not user:
        raise NotFound("User not found")
    if user.get("status") != Status.ACTIVE.value:
        raise PermissionDenied("Forbidden: Account is inactive")
    if str(user["_id"]) != current_user.id:
        raise PermissionDenied("Forbidden: Cannot modify another user's account")
    return user


async def change_password(db, current_user: CurrentUser, current_password: str, new_password: str) -> None:
    user = await load_own_account(db, current_user)
    if not verify_password(current_password, user.get("passwordHash")):
        raise AuthenticationFailed("Invalid current password")
    await users_crud.set_password_hash(db, user["_id"], hash_password(new_password))
    logger.info(f"password changed for {user['email']}")
