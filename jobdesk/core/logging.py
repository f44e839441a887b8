"""
Logging configuration and request logging middleware.
Sensitive values passed through ``extra=`` are redacted before output.
"""
import logging
import logging.config
import time
import uuid
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

SENSITIVE_KEYS = (
    "password",
    "token",
    "apikey",
    "api_key",
    "secret",
    "authorization",
    "cookie",
)

# Attributes every LogRecord has; anything else came in through extra=
_RESERVED_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def is_sensitive_key(key: str) -> bool:
    lowered = key.lower()
    return any(marker in lowered for marker in SENSITIVE_KEYS)


def redact(value: Any, depth: int = 0) -> Any:
    """Recursively replace values stored under sensitive keys"""
    if depth > 10:
        return "[MAX_DEPTH]"
    if isinstance(value, dict):
        return {
            key: "[REDACTED]" if is_sensitive_key(str(key)) else redact(item, depth + 1)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact(item, depth + 1) for item in value]
    return value


class RedactingFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        for key in list(vars(record)):
            if key in _RESERVED_ATTRS:
                continue
            if is_sensitive_key(key):
                setattr(record, key, "[REDACTED]")
            else:
                setattr(record, key, redact(getattr(record, key)))
        return True


class ExtraFormatter(logging.Formatter):
    """Appends extra= fields as key=value pairs"""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = {
            key: value for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if not extras:
            return base
        pairs = " ".join(f"{key}={value}" for key, value in sorted(extras.items()))
        return f"{base} | {pairs}"


def configure_logging(level: str = "INFO") -> None:
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "redact": {"()": RedactingFilter},
        },
        "formatters": {
            "default": {
                "()": ExtraFormatter,
                "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "filters": ["redact"],
            },
        },
        "loggers": {
            "jobdesk": {"level": level.upper(), "handlers": ["console"], "propagate": False},
        },
    })


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per request and tags the response with a request id"""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:16]
        request.state.request_id = request_id
        started = time.perf_counter()

        response = await call_next(request)

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.info(
            "%s %s -> %s",
            request.method,
            request.url.path,
            response.status_code,
            extra={"request_id": request_id, "duration_ms": duration_ms},
        )
        response.headers["X-Request-ID"] = request_id
        return response
