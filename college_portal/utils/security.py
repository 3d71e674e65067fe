# college_portal/utils/security.py
import logging
from typing import Optional

from fastapi import Cookie, Depends, Request
from passlib.context import CryptContext

from college_portal.core.config import settings
from college_portal.core.database import get_database
from college_portal.core.errors import AuthenticationFailed, PermissionDenied
from college_portal.crud import users as users_crud
from college_portal.models.user import CurrentUser, Role, Status, SubRole
from college_portal.utils.tokens import ACCESS, verify_token

logger = logging.getLogger("security")

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


async def get_current_user(
    request: Request,
    access_token: Optional[str] = Cookie(None),
    db=Depends(get_database),
) -> CurrentUser:
    """
    Read the JWT from the "access_token" cookie and load the account behind it.

    401 when the cookie is missing, the token does not verify, or the account
    no longer exists; 403 when the account has been deactivated.
    """
    if not access_token:
        raise AuthenticationFailed("Unauthorized: No token provided")

    payload = verify_token(access_token, ACCESS)
    if payload is None:
        raise AuthenticationFailed("Unauthorized: Invalid or expired token")

    user = await users_crud.get_user_by_id(db, payload["sub"])
    if not user:
        raise AuthenticationFailed("Unauthorized: User not found")
    if user.get("status") != Status.ACTIVE.value:
        raise PermissionDenied("Forbidden: Account is inactive")

    current = CurrentUser(id=str(user["_id"]), role=user["role"], sub_role=user.get("subRole"))
    request.state.user = current
    return current


def require_role(role: Role):
    async def checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role != role:
            raise PermissionDenied("Forbidden")
        return current_user

    return checker


def require_administrative():
    async def checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role != Role.ACADEMIC:
            raise PermissionDenied("Forbidden")
        if current_user.sub_role != SubRole.ADMINISTRATIVE:
            raise PermissionDenied("Forbidden: Administrator access required")
        return current_user

    return checker
