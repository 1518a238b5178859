"""Custom exceptions and error response schemas."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Standardized error response."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict[str, Any]] = Field(None, description="Additional context")


class AppError(Exception):
    """Base exception for all app-level errors."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_response(self) -> ErrorDetail:
        """Convert to API response schema."""
        return ErrorDetail(
            code=self.code,
            message=self.message,
            details=self.details if self.details else None,
        )


class ValidationError(AppError):
    """Raised when input is rejected before any state change."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=422,
            details=details,
        )


class NotFoundError(AppError):
    """Raised when a resource (or a resource in the required state) doesn't exist."""

    def __init__(
        self,
        resource: str,
        resource_id: str | None = None,
        message: str | None = None,
    ):
        if message is None:
            message = (
                f"{resource} with ID {resource_id} not found"
                if resource_id
                else f"{resource} not found"
            )
        details: dict[str, Any] = {"resource": resource}
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(
            code="NOT_FOUND",
            message=message,
            status_code=404,
            details=details,
        )


class UnauthorizedError(AppError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            code="UNAUTHORIZED",
            message=message,
            status_code=401,
        )


class StorageError(AppError):
    """Raised on persistence failures. Fatal for the request, never retried blindly."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="STORAGE_ERROR",
            message=message,
            status_code=500,
            details=details,
        )
