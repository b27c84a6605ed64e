"""
Loguru setup for the login service.

Standard ``logging`` records are routed into loguru and written to stderr as
one JSON object per line. Lines logged while a request is being served carry
that request's id, and OAuth secrets that reach a message (authorization
codes, CSRF state, post-auth and access tokens) are masked before the line
is written.
"""

import json
import logging
import re
import sys
import traceback
from contextvars import ContextVar
from typing import Any, Dict, Optional, TextIO

from loguru import logger

from app.core.config import settings

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

REDACTED = "[redacted]"

_SECRET_PARAM = re.compile(
    r"(?P<key>(?<![\w-])(?:code|state|token|access_token|client_secret)=)"
    r"[^&\s#\"']+"
)

_NOISY_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "httpx",
    "httpcore",
    "uvicorn.access",
)


def redact(text: str) -> str:
    """Mask the values of OAuth secret parameters found in ``text``."""
    return _SECRET_PARAM.sub(lambda m: m.group("key") + REDACTED, text)


class InterceptHandler(logging.Handler):
    """Send standard logging records to loguru, keeping the caller's location."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        depth = settings.LOGGING_FRAME_DEPTH
        frame = sys._getframe(depth)
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def _with_request_id(record) -> bool:
    request_id = request_id_var.get()
    if request_id:
        record["extra"]["request_id"] = request_id
    return True


def _exception_entry(exception) -> Dict[str, Any]:
    text = None
    if exception.traceback:
        text = "".join(
            traceback.format_exception(
                exception.type, exception.value, exception.traceback
            )
        ).strip()

    return {
        "type": exception.type.__name__ if exception.type else None,
        "value": redact(str(exception.value)) if exception.value else None,
        "traceback": redact(text) if text else None,
    }


def build_json_record(record) -> Dict[str, Any]:
    """Flatten a loguru record into the fields written to the log stream."""
    entry = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "logger": record["name"],
        "message": redact(record["message"]),
        "request_id": record["extra"].get("request_id"),
        "process": record["process"].id,
    }
    if record["exception"]:
        entry["exception"] = _exception_entry(record["exception"])
    return entry


def json_sink(stream: Optional[TextIO] = None):
    """Loguru sink writing JSON lines to ``stream`` (stderr when omitted)."""

    def write(message) -> None:
        out = stream if stream is not None else sys.stderr
        out.write(json.dumps(build_json_record(message.record), default=str) + "\n")

    return write


def configure_logging(level: Optional[str] = None, stream: Optional[TextIO] = None):
    """Install the JSON sink and intercept standard logging at ``level``."""
    logger.remove()
    logger.add(
        json_sink(stream),
        level=level or settings.LOG_LEVEL,
        backtrace=True,
        diagnose=False,
        filter=_with_request_id,
    )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.debug("Logging configured")
