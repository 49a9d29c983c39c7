"""
Custom exception handlers for consistent API error responses.

This module provides custom exceptions and handlers to maintain
consistent error responses across the API, even when using
standard Python exceptions internally.
"""

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from typing import Any, Dict, Optional
import logging

from modules.reservations.exceptions import (
    AlreadyCancelledError,
    BookingRuleError,
    ConfigError,
    ConflictError,
    NotFoundError,
    ReservationError,
)

logger = logging.getLogger(__name__)


class APIError(HTTPException):
    """Base API error with consistent structure"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code


RESERVATION_ERROR_STATUS = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    AlreadyCancelledError: status.HTTP_409_CONFLICT,
    ConflictError: status.HTTP_409_CONFLICT,
    BookingRuleError: status.HTTP_400_BAD_REQUEST,
    ConfigError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: ReservationError) -> int:
    """Map a reservation error to its HTTP status (most specific class wins)"""
    for klass in type(exc).__mro__:
        if klass in RESERVATION_ERROR_STATUS:
            return RESERVATION_ERROR_STATUS[klass]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def handle_value_error(request: Request, exc: ValueError) -> JSONResponse:
    """Convert ValueError to consistent API response"""
    logger.warning(f"ValueError at {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": str(exc),
            "error_code": "VALIDATION_ERROR",
            "path": str(request.url.path),
        },
    )


async def handle_reservation_error(
    request: Request, exc: ReservationError
) -> JSONResponse:
    """Convert reservation engine errors to consistent API response"""
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{type(exc).__name__} at {request.url.path}: {exc.message}")
    else:
        logger.warning(f"{type(exc).__name__} at {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": exc.message,
            "error_code": exc.error_code,
            "path": str(request.url.path),
        },
    )


async def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    """Handle custom API errors"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.detail,
            "error_code": exc.error_code,
            "path": str(request.url.path),
        },
        headers=exc.headers,
    )


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app"""
    app.add_exception_handler(ValueError, handle_value_error)
    app.add_exception_handler(ReservationError, handle_reservation_error)
    app.add_exception_handler(APIError, handle_api_error)
