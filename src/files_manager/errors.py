"""
Error taxonomy and the FastAPI handlers that render it.

Every failure leaves the service as a single ``{"error": "..."}`` body
with a status code; tracebacks and internal identifiers stay in the logs.
"""

import logging

import pydantic
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class FilesManagerError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(FilesManagerError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class Unauthorized(FilesManagerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class NotFound(FilesManagerError):
    """Missing resource, or one the caller may not see."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class NotAFile(FilesManagerError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "A folder doesn't have content"


class AlreadyExists(FilesManagerError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Already exist"


class InvalidParent(FilesManagerError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Parent not found"


class UnknownTaskKind(FilesManagerError):
    default_message = "Unknown task kind"


class InternalError(FilesManagerError):
    pass


class DependencyUnavailable(FilesManagerError):
    default_message = "Dependency unavailable"

    def __init__(self, dependency: str, attempts: int):
        self.dependency = dependency
        self.attempts = attempts
        super().__init__(f"{dependency} unavailable after {attempts} attempts")


async def handle_files_manager_error(request: Request, exc: FilesManagerError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        # Keep collaborator details out of 5xx bodies
        message = FilesManagerError.default_message
        if isinstance(exc, DependencyUnavailable):
            message = exc.message
    else:
        message = exc.message
    return JSONResponse(status_code=exc.status_code, content={"error": message})


async def handle_pydantic_validation_errors(
    request: Request, exc: pydantic.ValidationError | RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = first.get("loc", ())
    field = str(loc[-1]) if loc else ""
    message = f"Invalid {field}" if field else "Invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that propagates out of a route."""
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )
