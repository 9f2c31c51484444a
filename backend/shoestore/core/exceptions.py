"""
Centralized Exception Handling for the Shoe Store API

This module provides:
- Custom exception classes for different error types
- Standardized error response format
- Exception handlers for FastAPI
- Utility functions for raising common exceptions
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from datetime import datetime, timezone
import logging
from typing import Dict, Any, List, Optional

from shoestore.core.config import settings
from shoestore.core.logging_config import get_request_id

logger = logging.getLogger(__name__)

# =============================================================================
# Module Exports
# =============================================================================
__all__ = [
    # Base exception
    "ShoeStoreException",
    # Validation
    "ValidationError",
    "MalformedBodyError",
    # Resources
    "NotFoundError",
    "ShoeProductNotFoundError",
    "DatabaseError",
    "ExternalServiceError",
    "ConfigurationError",
    # Payment-related
    "PaymentError",
    # Response helpers
    "create_error_response",
    "shoestore_exception_handler",
    "http_exception_handler",
    "general_exception_handler",
    # Utility raise functions
    "raise_database_error",
]


class ShoeStoreException(Exception):
    """Base exception for the Shoe Store application"""

    def __init__(self, message: str, error_code: str = "INTERNAL_ERROR", details: Dict[str, Any] = None, status_code: int = 500):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)


class ValidationError(ShoeStoreException):
    """
    Client input violates the field rules.

    ``violations`` is the complete ordered list of ``{"field", "message"}``
    entries, never just the first failure.
    """

    def __init__(self, violations: List[Dict[str, str]], message: str = "Validation failed",
                 details: Dict[str, Any] = None):
        self.violations = list(violations)
        super().__init__(
            message,
            "VALIDATION_ERROR",
            {**(details or {}), "violations": self.violations},
            400
        )


class MalformedBodyError(ShoeStoreException):
    """Request body could not be parsed"""

    def __init__(self, detail: str, details: Dict[str, Any] = None):
        super().__init__(
            f'invalid request body format : "{detail}"',
            "MALFORMED_BODY",
            details,
            400
        )


class NotFoundError(ShoeStoreException):
    """Resource not found error"""

    def __init__(self, message: str = "Resource not found", error_code: str = "NOT_FOUND",
                 details: Dict[str, Any] = None):
        super().__init__(message, error_code, details, 404)


class ShoeProductNotFoundError(NotFoundError):
    """No shoe product stored under the identifier"""

    def __init__(self, shoe_product_id: str, details: Dict[str, Any] = None):
        super().__init__(
            f"Shoe product '{shoe_product_id}' not found",
            "SHOE_PRODUCT_NOT_FOUND",
            {**(details or {}), "shoe_product_id": shoe_product_id}
        )


class DatabaseError(ShoeStoreException):
    """Database operation error"""

    def __init__(self, message: str = "Database operation failed", details: Dict[str, Any] = None):
        super().__init__(message, "DATABASE_ERROR", details, 500)


class ExternalServiceError(ShoeStoreException):
    """External service error"""

    def __init__(self, message: str = "External service error", details: Dict[str, Any] = None):
        super().__init__(message, "EXTERNAL_SERVICE_ERROR", details, 502)


class PaymentError(ExternalServiceError):
    """Payment processor rejected or failed the request"""

    def __init__(self, reason: str, details: Dict[str, Any] = None):
        super().__init__(
            f"Payment intent creation failed: {reason}",
            {**(details or {}), "reason": reason}
        )


class ConfigurationError(ShoeStoreException):
    """Configuration/setup error"""

    def __init__(self, message: str = "Configuration error", details: Dict[str, Any] = None):
        super().__init__(message, "CONFIG_ERROR", details, 500)


# =============================================================================
# Response Helpers
# =============================================================================

def _error_body(code: str, message: str, details: Dict[str, Any] = None, request_id: Optional[str] = None) -> Dict[str, Any]:
    return {
        "success": False,
        "error": {
            "code": code,
            "message": message,
            "details": details or {}
        },
        "request_id": request_id or get_request_id() or "unknown",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


def create_error_response(error: ShoeStoreException, status_code: Optional[int] = None) -> JSONResponse:
    """Create standardized error response"""

    if status_code is None:
        status_code = error.status_code

    log = logger.error if status_code >= 500 else logger.warning
    log(f"Request failed: {error.error_code} - {error.message}", extra={
        "error_code": error.error_code,
        "status_code": status_code,
        "details": error.details
    })

    return JSONResponse(
        status_code=status_code,
        content=_error_body(error.error_code, error.message, error.details)
    )


async def shoestore_exception_handler(request: Request, exc: ShoeStoreException) -> JSONResponse:
    """Global exception handler for application exceptions"""
    return create_error_response(exc)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle framework HTTP exceptions (unknown route, wrong method) with the same envelope"""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(f"HTTP_{exc.status_code}", str(exc.detail)),
        headers=getattr(exc, "headers", None)
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions.
    Never expose internal error details outside development.
    """
    logger.error(
        f"Unhandled exception: {exc}",
        exc_info=True,
        extra={"path": request.url.path, "method": request.method}
    )

    # runs outside the request middleware, so the echo header is set here
    request_id = getattr(request.state, "request_id", None) or get_request_id()

    details = None
    if settings.debug:
        details = {
            "exception_type": type(exc).__name__,
            "exception_message": str(exc)
        }

    return JSONResponse(
        status_code=500,
        content=_error_body(
            "INTERNAL_ERROR",
            "An internal error occurred. Please try again later.",
            details,
            request_id
        ),
        headers={"X-Request-ID": request_id} if request_id else None
    )


# =============================================================================
# Utility Functions for Exception Handling
# =============================================================================

def raise_database_error(operation: str, table: str = None, original_error: Exception = None) -> None:
    """Raise a DatabaseError with context"""
    details = {"operation": operation}
    if table:
        details["table"] = table
    if original_error:
        details["original_error"] = str(original_error)
    raise DatabaseError(f"Database operation '{operation}' failed", details)
