"""
ItemDrop Backend - Request ID Middleware
==========================================

What:  Assigns a correlation ID to each request and returns it in X-Request-ID.
How:   Reuses a client-supplied X-Request-ID when it is a short token of safe
       characters, otherwise generates one. The ID lives in a ContextVar for
       log lines and in request.state for handlers.

Ingest clients (mobile share sheets, browser extensions) often retry a
submission; sending the same X-Request-ID lets both attempts be matched in
the access log.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Echoed into headers and log lines, so only a bounded, printable token is kept
_CLIENT_ID_PATTERN = re.compile(r"[A-Za-z0-9._-]{1,64}")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def resolve_request_id(header_value: Optional[str]) -> str:
    """Client ID if acceptable, else a fresh 8-character hex ID."""
    if header_value and _CLIENT_ID_PATTERN.fullmatch(header_value):
        return header_value
    return new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
