"""
Application error kinds, exception classes and global exception handlers.

Services raise ``AppException`` subclasses tagged with an ``ErrorKind``; the
HTTP status is chosen from the kind in one place, ``app_exception_handler``.
"""
import enum
import logging

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

# Set up logging
logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    """
    Closed set of failure kinds raised by the service layer.

    Kinds:
    - NOT_FOUND: Entity absent
    - CONFLICT: Duplicate email, license number or enrollment
    - UNAUTHORIZED: Bad credentials, unverified/deactivated account, invalid or expired token
    - FORBIDDEN: Authenticated caller lacks the role for the operation
    - VALIDATION: Missing or inconsistent input
    - UNEXPECTED: Anything else
    """
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    VALIDATION = "validation"
    UNEXPECTED = "unexpected"


STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNEXPECTED: status.HTTP_400_BAD_REQUEST,
}


class AppException(Exception):
    """
    Base exception class for application-specific exceptions.
    """
    kind = ErrorKind.UNEXPECTED
    default_detail = "An unexpected error occurred"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


class NotFoundException(AppException):
    """Raised when a requested entity does not exist."""
    kind = ErrorKind.NOT_FOUND
    default_detail = "Resource not found"


class ConflictException(AppException):
    """Raised when a write would duplicate a unique value."""
    kind = ErrorKind.CONFLICT
    default_detail = "Resource already exists"


class UnauthorizedException(AppException):
    """Raised when credentials or tokens are rejected."""
    kind = ErrorKind.UNAUTHORIZED
    default_detail = "Not authenticated"


class ForbiddenException(AppException):
    """Raised when the caller is authenticated but not allowed."""
    kind = ErrorKind.FORBIDDEN
    default_detail = "Permission denied"


class ValidationException(AppException):
    """Raised when input is missing or not acceptable for the current state."""
    kind = ErrorKind.VALIDATION
    default_detail = "Invalid request"


class UnexpectedException(AppException):
    """Raised for failures that fit no other kind."""
    kind = ErrorKind.UNEXPECTED


async def app_exception_handler(request: Request, exc: AppException):
    """
    Handler for application-specific exceptions.

    Args:
        request: The request that caused the exception
        exc: The exception instance

    Returns:
        JSONResponse: Standardized error response
    """
    if exc.kind == ErrorKind.UNEXPECTED:
        logger.error(f"Application error on {request.url.path}: {exc.detail}")
    else:
        logger.info(f"Request to {request.url.path} rejected ({exc.kind.value}): {exc.detail}")
    request.state.error_kind = exc.kind.value
    headers = {"WWW-Authenticate": "Bearer"} if exc.kind == ErrorKind.UNAUTHORIZED else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "kind": exc.kind.value},
        headers=headers,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handler for request validation exceptions.

    Args:
        request: The request that caused the exception
        exc: The validation exception instance

    Returns:
        JSONResponse: Standardized error response with validation details
    """
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": "Validation error",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


async def unexpected_exception_handler(request: Request, exc: Exception):
    """
    Handler for failures that were not raised as an ``AppException``.

    They are reported as the ``unexpected`` kind; the details only go to the log.
    """
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc!r}", exc_info=exc)
    return await app_exception_handler(request, UnexpectedException())


# Register exception handlers with FastAPI app
def register_exception_handlers(app):
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, unexpected_exception_handler)
    app.add_exception_handler(Exception, unexpected_exception_handler)
