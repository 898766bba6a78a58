#!/usr/bin/env python3
"""
Custom exceptions and error handlers for the web application.
"""

import logging
from fastapi import Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.exceptions import NotFoundError, BatchClaimError

logger = logging.getLogger(__name__)


class ServiceException(Exception):
    """Base exception for service layer errors."""
    pass


class NotFoundException(ServiceException):
    """Raised when a requested record does not exist."""
    pass


class InvalidRequestException(ServiceException):
    """Raised when a request is well-formed but semantically invalid."""
    pass


class ScheduleValidationException(InvalidRequestException):
    """Raised when a schedule payload is semantically invalid."""
    pass


class UnauthorizedException(ServiceException):
    """Raised when the caller cannot be authenticated."""
    pass


class ForbiddenException(ServiceException):
    """Raised when the caller's role or tenant features do not allow the action."""
    pass


async def service_exception_handler(
    request: Request,
    exc: ServiceException
) -> JSONResponse:
    """
    Handle service layer exceptions.

    Args:
        request: The FastAPI request.
        exc: The service exception.

    Returns:
        JSONResponse with error details.
    """
    status_code = 500
    if isinstance(exc, NotFoundException):
        status_code = 404
    elif isinstance(exc, InvalidRequestException):
        status_code = 400
    elif isinstance(exc, UnauthorizedException):
        status_code = 401
    elif isinstance(exc, ForbiddenException):
        status_code = 403

    if status_code >= 500:
        logger.error(f"Service error in {request.url.path}: {exc}", exc_info=True)
    else:
        logger.info(f"{exc.__class__.__name__} in {request.url.path}: {exc}")

    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": str(exc),
            "type": exc.__class__.__name__
        }
    )


async def not_found_error_handler(
    request: Request,
    exc: NotFoundError
) -> JSONResponse:
    """Map engine-level NotFoundError onto 404."""
    return JSONResponse(
        status_code=404,
        content={
            "success": False,
            "error": str(exc),
            "type": "NotFound"
        }
    )


async def batch_claim_error_handler(
    request: Request,
    exc: BatchClaimError
) -> JSONResponse:
    """Claim failures abort the run with no partial counters."""
    logger.error(f"Batch claim failed in {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Failed to claim recomputation batch",
            "type": "InternalError"
        }
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Report request validation failures with field-level detail.

    Returns 400 rather than FastAPI's default 422.
    """
    details = []
    for error in exc.errors():
        loc = [str(part) for part in error.get('loc', ()) if part not in ('body', 'query', 'path', 'header')]
        details.append({
            "field": ".".join(loc) or "body",
            "message": error.get('msg', 'Invalid value')
        })

    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Validation failed",
            "type": "ValidationError",
            "details": details
        }
    )


async def http_exception_handler(
    request: Request,
    exc: HTTPException
) -> JSONResponse:
    """
    Handle FastAPI HTTP exceptions with consistent format.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "type": "HTTPException"
        }
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle unexpected exceptions.
    """
    logger.exception(f"Unexpected error in {request.url.path}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "type": "InternalError"
        }
    )


def register_exception_handlers(app) -> None:
    app.add_exception_handler(ServiceException, service_exception_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
    app.add_exception_handler(BatchClaimError, batch_claim_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
