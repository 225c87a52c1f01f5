"""
Exception classes and error response helpers for Moodcast.
"""

from fastapi.responses import JSONResponse
from fastapi import status
from typing import Optional


class MoodcastError(Exception):
    """Base exception for Moodcast errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        error_code: str = "MOODCAST_ERROR",
        details: Optional[dict] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_response(self) -> JSONResponse:
        """Convert exception to FastAPI JSONResponse."""
        return JSONResponse(
            status_code=self.status_code,
            content={
                "success": False,
                "error": self.message,
                "error_code": self.error_code,
                **({"details": self.details} if self.details else {}),
            },
        )


class InvalidInput(MoodcastError):
    """Raised when sample or pattern arguments have the wrong type or shape."""

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[dict] = None):
        full_details = details or {}
        if field:
            full_details["field"] = field
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code="INVALID_INPUT",
            details=full_details,
        )


class InvalidRange(MoodcastError):
    """Raised when a forecast horizon is out of range."""

    def __init__(self, hours_ahead, maximum: Optional[int] = None):
        details = {"hours_ahead": hours_ahead}
        if maximum is not None:
            details["max_hours_ahead"] = maximum
            message = f"hours_ahead must be between 1 and {maximum}, got {hours_ahead}"
        else:
            message = f"hours_ahead must be a positive integer, got {hours_ahead}"
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code="INVALID_RANGE",
            details=details,
        )
