"""
Request id middleware.

Each request gets an id that is echoed in the ``X-Request-ID`` response
header and attached to every log line written while it is served. A
well-formed id sent by the caller (a proxy or the frontend) is kept so logs
can be joined across hops.
"""

import re
import time
import uuid
from typing import Optional

from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.core.logging_config import redact, request_id_var

REQUEST_ID_HEADER = "X-Request-ID"

_VALID_REQUEST_ID = re.compile(r"[A-Za-z0-9._-]{1,64}")


def resolve_request_id(incoming: Optional[str]) -> str:
    if incoming and _VALID_REQUEST_ID.fullmatch(incoming):
        return incoming
    return uuid.uuid4().hex


def describe(request: Request) -> str:
    """Method and URL for log lines, with OAuth secrets in the query masked."""
    target = request.url.path
    if request.url.query:
        target = f"{target}?{redact(request.url.query)}"
    return f"{request.method} {target}"


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        context = request_id_var.set(request_id)
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(f"{describe(request)} failed")
            raise
        finally:
            request_id_var.reset(context)

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id
        logger.bind(request_id=request_id).info(
            f"{describe(request)} -> {response.status_code} ({elapsed_ms:.1f} ms)"
        )
        return response
