"""API error handling and response helpers."""

from typing import Any, Dict

from fastapi import HTTPException, status


class AppError(Exception):
    """Base application error."""

    def __init__(self, message: str, code: str, http_status: int = 400):
        """Initialize error."""
        self.message = message
        self.code = code
        self.http_status = http_status
        super().__init__(message)


class UnauthorizedError(AppError):
    """No authenticated session accompanies the request."""

    def __init__(self, message: str = "NOT_AUTHORIZED"):
        super().__init__(message, "not_authorized", status.HTTP_401_UNAUTHORIZED)


class StoreUnavailableError(AppError):
    """The persistent account store failed to read or write."""

    def __init__(self, message: str = "Failed to reach account store"):
        super().__init__(message, "store_unavailable", status.HTTP_503_SERVICE_UNAVAILABLE)


def error_response(error: AppError) -> Dict[str, Any]:
    """Create a standardized error response."""
    return {
        "error": {
            "code": error.code,
            "message": error.message,
        }
    }


def raise_app_error(error: AppError) -> None:
    """Raise an HTTPException from an AppError."""
    raise HTTPException(
        status_code=error.http_status,
        detail=error_response(error),
    )
