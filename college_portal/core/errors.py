"""
Error taxonomy for the portal API and the handlers that turn errors into
JSON responses.

Every error body has the same shape::

    {"message": "...", "code": "...", "details": ...}

Usage:
    from college_portal.core.errors import NotFound, Conflict

    if not profile:
        raise NotFound()
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("errors")


class AppError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        details: Any = None,
    ):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict:
        body = {"message": self.message, "code": self.code}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationFailed(AppError):
    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str = "Validation failed", details: Any = None):
        super().__init__(message, details=details)


class AuthenticationFailed(AppError):
    status_code = 401
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized", code: Optional[str] = None):
        super().__init__(message, code=code)


class PermissionDenied(AppError):
    status_code = 403
    code = "FORBIDDEN"

    def __init__(self, message: str = "Forbidden", code: Optional[str] = None):
        super().__init__(message, code=code)


class NotFound(AppError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class Conflict(AppError):
    status_code = 409
    code = "EMAIL_EXISTS"

    def __init__(self, message: str = "Email already exists"):
        super().__init__(message)


def _field_name(loc) -> Optional[str]:
    # drop the "body"/"query"/"path" prefix FastAPI puts in front
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "cookie")]
    return ".".join(parts) or None


def _clean_message(msg: str) -> str:
    # pydantic prefixes messages raised from validators
    return msg[len("Value error, "):] if msg.startswith("Value error, ") else msg


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = [
        {"field": _field_name(err.get("loc", ())), "message": _clean_message(err.get("msg", ""))}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"message": "Validation failed", "code": "VALIDATION_ERROR", "details": details},
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"message": "Internal server error", "code": "INTERNAL_ERROR"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
