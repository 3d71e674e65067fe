import logging
from typing import Callable

from starlette.datastructures import Headers
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger("middleware")


class RequestSizeLimitMiddleware:
    """
    Reject request bodies larger than ``max_size`` with a 413.

    A declared Content-Length is checked before anything is read. Bodies sent
    without one (chunked) are read and counted here, then replayed to the app.

    Pure ASGI so the body can be counted before FastAPI parses it.
    """

    def __init__(self, app: ASGIApp, max_size: int = 10 * 1024 * 1024):
        self.app = app
        self.max_size = max_size

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = Headers(scope=scope).get("content-length")
        if content_length is not None:
            if content_length.isdigit() and int(content_length) > self.max_size:
                await self._reject(scope, receive, send, content_length)
                return
            await self.app(scope, receive, send)
            return

        messages = []
        received = 0
        more_body = True
        while more_body:
            message = await receive()
            messages.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body", b""))
            if received > self.max_size:
                await self._reject(scope, receive, send, f"{received}+")
                return
            more_body = message.get("more_body", False)

        async def replay() -> Message:
            if messages:
                return messages.pop(0)
            return await receive()

        await self.app(scope, replay, send)

    async def _reject(self, scope: Scope, receive: Receive, send: Send, size) -> None:
        logger.warning(f"Request body too large on {scope.get('path')}: {size} bytes (max: {self.max_size})")
        response = JSONResponse(
            status_code=413,
            content={"message": "Request entity too large", "code": "PAYLOAD_TOO_LARGE"},
        )
        await response(scope, receive, send)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response
