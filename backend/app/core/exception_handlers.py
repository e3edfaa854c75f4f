"""Exception handlers for converting custom exceptions to HTTP responses."""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from backend.app.core.exceptions import (
    CivicFixException,
    InvalidVoteTypeError,
    InvalidStatusTransitionError,
    InvalidCategoryError,
    InvalidParentCommentError,
    InvalidSortFieldError,
    IssueNotFoundError,
    UserNotFoundError,
    CategoryNotFoundError,
    NotificationNotFoundError,
    AuthenticationError,
    AccountInactiveError,
    PermissionDeniedError,
    EmailAlreadyRegisteredError,
    CategoryAlreadyExistsError,
    VoteConflictError,
    StorageUnavailableError,
)

logger = logging.getLogger(__name__)


async def civicfix_exception_handler(request: Request, exc: CivicFixException) -> JSONResponse:
    """
    Handle all CivicFix custom exceptions and convert to appropriate HTTP responses.

    Args:
        request: The incoming request
        exc: The exception that was raised

    Returns:
        JSONResponse with appropriate status code and error details
    """
    # Map exception types to HTTP status codes
    if isinstance(exc, (
        InvalidVoteTypeError,
        InvalidStatusTransitionError,
        InvalidCategoryError,
        InvalidParentCommentError,
        InvalidSortFieldError,
    )):
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, (
        IssueNotFoundError,
        UserNotFoundError,
        CategoryNotFoundError,
        NotificationNotFoundError,
    )):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, AuthenticationError):
        status_code = status.HTTP_401_UNAUTHORIZED
    elif isinstance(exc, (AccountInactiveError, PermissionDeniedError)):
        status_code = status.HTTP_403_FORBIDDEN
    elif isinstance(exc, (EmailAlreadyRegisteredError, CategoryAlreadyExistsError, VoteConflictError)):
        status_code = status.HTTP_409_CONFLICT
    elif isinstance(exc, StorageUnavailableError):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        # Generic CivicFixException
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None

    return JSONResponse(
        status_code=status_code,
        content={
            "detail": exc.message,
            "type": exc.__class__.__name__,
            **({"info": exc.details} if exc.details else {})
        },
        headers=headers,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected errors and hide their internals from the client."""
    logger.error(
        f"[ERROR] Unhandled exception on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "type": "InternalServerError"},
    )


def register_exception_handlers(app):
    """
    Register all custom exception handlers with the FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(CivicFixException, civicfix_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
