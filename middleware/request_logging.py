"""
Request logging middleware. Logs method, path, status, duration and a
request id only. Never logs bodies: decision text and chat messages are
personal data.
"""
import logging
import time
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from config.logging_config import request_id_var

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
_QUIET_PATHS = {"/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and log one line when it finishes."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        path = request.scope.get("path", "")
        token = request_id_var.set(request_id)
        start = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        duration_ms = (time.perf_counter() - start) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id

        status = response.status_code
        if status < 400 and path in _QUIET_PATHS:
            return response

        level = logging.INFO
        if status >= 500:
            level = logging.ERROR
        elif status >= 400:
            level = logging.WARNING
        logger.log(
            level,
            "request_finished method=%s path=%s status=%s duration_ms=%.1f",
            request.method, path, status, duration_ms,
            extra={"request_id": request_id},
        )
        return response
