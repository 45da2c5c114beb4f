"""
Request logging for the API.

Every request is tagged with a request id. A caller-supplied ``X-Request-ID``
is kept so one id can follow a request from the frontend through the logs.
The completion line names the authenticated account and, for rejected
requests, the error kind chosen by the exception handlers.
"""
import logging
import re
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
PROCESS_TIME_HEADER = "X-Process-Time"

# Incoming ids end up in log lines, so only short opaque tokens are accepted
VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def resolve_request_id(request: Request) -> str:
    """Reuse the caller's request id when it is well formed, otherwise make a new one."""
    incoming = request.headers.get(REQUEST_ID_HEADER, "")
    if VALID_REQUEST_ID.match(incoming):
        return incoming
    return uuid.uuid4().hex


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log each request with its id, caller, outcome and duration.

    ``request.state.user_id`` is filled in by the authentication dependency and
    ``request.state.error_kind`` by the application exception handler.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = resolve_request_id(request)
        request.state.request_id = request_id
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                f"[{request_id}] {request.method} {request.url.path} failed "
                f"after {time.perf_counter() - started:.4f}s"
            )
            raise

        duration = time.perf_counter() - started
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers[PROCESS_TIME_HEADER] = f"{duration:.4f}"

        user_id = getattr(request.state, "user_id", None) or "anonymous"
        error_kind = getattr(request.state, "error_kind", None)
        outcome = f"{response.status_code} {error_kind}" if error_kind else str(response.status_code)
        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            level,
            f"[{request_id}] {request.method} {request.url.path} -> {outcome} "
            f"user={user_id} in {duration:.4f}s",
        )
        return response


def setup_middlewares(app):
    app.add_middleware(RequestLoggingMiddleware)
