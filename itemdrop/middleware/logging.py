"""
ItemDrop Backend - Access Log Middleware
==========================================

What:  One log line per HTTP request on the "itemdrop.access" logger.
How:   Times the rest of the chain and logs method, path, status, duration,
       request ID and client IP. Ingest requests also carry the submission
       size taken from Content-Length.

Levels: 5xx → ERROR, 4xx → WARNING, otherwise INFO. /health is not logged.

Request bodies are never read here; they carry user notes and image data.
"""

import logging
import time
from typing import Any, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from itemdrop.middleware.request_id import request_id_var

logger = logging.getLogger("itemdrop.access")

INGEST_PATH = "/api/ingest"
SILENT_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def submission_size(request: Request) -> Optional[int]:
    """Declared body size of an ingest POST, or None when absent or unparseable."""
    if request.method != "POST" or request.url.path != INGEST_PATH:
        return None
    try:
        return int(request.headers["content-length"])
    except (KeyError, ValueError):
        return None


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in SILENT_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        rid = request_id_var.get("")
        client_ip = request.client.host if request.client else "unknown"
        status = response.status_code
        size = submission_size(request)

        extra: Dict[str, Any] = {
            "request_id": rid,
            "method": request.method,
            "path": path,
            "status": status,
            "duration_ms": round(duration_ms, 2),
            "client_ip": client_ip,
        }
        message = "%s %s %d %.1fms [%s] from %s"
        args = [request.method, path, status, duration_ms, rid, client_ip]
        if size is not None:
            extra["submission_bytes"] = size
            message += " (%d bytes submitted)"
            args.append(size)

        logger.log(level_for_status(status), message, *args, extra=extra)
        return response
