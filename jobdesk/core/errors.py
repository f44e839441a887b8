"""
Application error taxonomy and the FastAPI handlers that render it.
Handlers never echo internal details for unexpected errors.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors with a well-defined HTTP rendering"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "INTERNAL_ERROR"

    def __init__(self, message: str, *, field: Optional[str] = None, extra: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.extra = extra or {}

    def to_dict(self) -> Dict[str, Any]:
        body = {"success": False, "error": self.message, "code": self.error_code}
        if self.field:
            body["field"] = self.field
        body.update(self.extra)
        return body


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"


class EmptiedFieldError(ValidationError):
    """One or more fields that had content were submitted empty"""

    error_code = "EMPTIED_FIELD"

    def __init__(self, field_warnings: Dict[str, str]):
        names = ", ".join(field_warnings)
        super().__init__(
            f"Fields with existing content cannot be emptied: {names}",
            extra={"fieldWarnings": field_warnings},
        )
        self.field_warnings = field_warnings


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "AUTHENTICATION_REQUIRED"


class InvalidTokenError(AuthenticationError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "INVALID_TOKEN"


class AuthorizationError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "PERMISSION_DENIED"


class ConflictError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "CONFLICT"


class InvalidTransitionError(AppError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "INVALID_TRANSITION"


class UpstreamServiceError(AppError):
    status_code = status.HTTP_502_BAD_GATEWAY
    error_code = "UPSTREAM_SERVICE_ERROR"


class InternalError(AppError):
    pass


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "%s %s failed: %s",
        request.method,
        request.url.path,
        exc.message,
        extra={"error_code": exc.error_code, "status_code": exc.status_code},
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = [str(part) for part in first.get("loc", ()) if part != "body"]
    field = ".".join(location) or None
    message = f"Invalid value for '{field}': {first.get('msg')}" if field else "Malformed request body"
    error = ValidationError(message, field=field)
    return await app_error_handler(request, error)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail, "code": "HTTP_EXCEPTION"},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": "Internal Server Error", "code": InternalError.error_code},
    )


def setup_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
