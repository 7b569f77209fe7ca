"""
Error taxonomy shared by services and routes.

Every error carries a stable ``code`` and the HTTP status the API answers
with. ``extra`` holds structured fields that are safe to show the caller.
"""
from typing import Any, Dict, Optional


class SportRentError(Exception):
    code = "error"
    status_code = 500
    default_message = "Request failed"

    def __init__(self, message: Optional[str] = None, **extra: Any):
        self.message = message or self.default_message
        self.extra: Dict[str, Any] = extra
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "code": self.code,
            "error": self.message,
            **self.extra,
        }


class UnauthenticatedError(SportRentError):
    code = "unauthenticated"
    status_code = 401
    default_message = "Unauthorized - No token provided"


class InvalidArgumentError(SportRentError):
    code = "invalid_argument"
    status_code = 400
    default_message = "Invalid request"


class NotFoundError(SportRentError):
    code = "not_found"
    status_code = 404
    default_message = "Not found"


class ForbiddenError(SportRentError):
    code = "forbidden"
    status_code = 403
    default_message = "Access denied"


class InsufficientStockError(SportRentError):
    code = "insufficient_stock"
    status_code = 409
    default_message = "Insufficient quantity available"

    def __init__(self, available: int, requested: int, message: Optional[str] = None):
        super().__init__(message, available=available, requested=requested)
        self.available = available
        self.requested = requested


class StoreUnavailableError(SportRentError):
    """The document store failed. Details stay in the server log."""
    code = "store_unavailable"
    status_code = 500
    default_message = "Internal server error"
