from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt  # PyJWT
from fastapi import Response

from college_portal.core.config import settings

ACCESS = "access"
REFRESH = "refresh"

ACCESS_COOKIE = "access_token"
REFRESH_COOKIE = "refresh_token"

_SECRETS = {
    ACCESS: lambda: settings.JWT_ACCESS_SECRET,
    REFRESH: lambda: settings.JWT_REFRESH_SECRET,
}
_TTLS = {
    ACCESS: lambda: settings.ACCESS_TOKEN_TTL_SECONDS,
    REFRESH: lambda: settings.REFRESH_TOKEN_TTL_SECONDS,
}


def _issue(subject_id: str, role: str, kind: str, expires_in: Optional[int] = None) -> str:
    now = datetime.now(timezone.utc)
    ttl = _TTLS[kind]() if expires_in is None else expires_in
    payload = {
        "sub": str(subject_id),
        "role": role,
        "type": kind,
        "iat": now,
        "exp": now + timedelta(seconds=ttl),
    }
    return jwt.encode(payload, _SECRETS[kind](), algorithm=settings.JWT_ALGORITHM)


def issue_access_token(subject_id: str, role: str, expires_in: Optional[int] = None) -> str:
    return _issue(subject_id, role, ACCESS, expires_in)


def issue_refresh_token(subject_id: str, role: str, expires_in: Optional[int] = None) -> str:
    return _issue(subject_id, role, REFRESH, expires_in)


def verify_token(token: str, expected_kind: str) -> Optional[dict]:
    """
    Decode ``token`` with the secret of ``expected_kind``.

    Returns the payload, or None when the signature is bad, the token has
    expired, it is malformed, or it is a token of the other kind.
    """
    if not token or expected_kind not in _SECRETS:
        return None
    try:
        payload = jwt.decode(token, _SECRETS[expected_kind](), algorithms=[settings.JWT_ALGORITHM])
    except jwt.PyJWTError:
        return None
    if payload.get("type") != expected_kind or not payload.get("sub"):
        return None
    return payload


def _cookie_options(max_age: int) -> dict:
    return {
        "httponly": True,
        "max_age": max_age,
        "secure": settings.is_production,
        "samesite": "lax",
        "path": "/",
    }


def set_auth_cookies(response: Response, access_token: str, refresh_token: str) -> None:
    response.set_cookie(
        key=ACCESS_COOKIE,
        value=access_token,
        **_cookie_options(settings.ACCESS_TOKEN_TTL_SECONDS),
    )
    response.set_cookie(
        key=REFRESH_COOKIE,
        value=refresh_token,
        **_cookie_options(settings.REFRESH_TOKEN_TTL_SECONDS),
    )


def clear_auth_cookies(response: Response) -> None:
    response.delete_cookie(ACCESS_COOKIE, path="/")
    response.delete_cookie(REFRESH_COOKIE, path="/")
