from fastapi import status
from typing import Any, Dict, Optional


class APIException(Exception):
    """
    Base exception for errors returned to API callers.

    All HTTP-facing exceptions inherit from this class and render
    themselves as ``{"error": ..., "details": ...}``.
    """

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error: str = "An unexpected error occurred",
        details: Optional[str] = None
    ):
        self.status_code = status_code
        self.error = error
        self.details = details
        super().__init__(self.error)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for consistent response format."""
        body: Dict[str, Any] = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return body


class BadRequestError(APIException):
    """Exception raised when a request is missing required input."""

    def __init__(self, error: str = "Bad request", details: Optional[str] = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error=error,
            details=details
        )


class InvalidActionError(BadRequestError):
    """Exception raised when the ``action`` field names no known operation."""

    def __init__(self, action: Optional[str] = None):
        super().__init__(error="Invalid action")
        self.action = action


class MethodNotAllowedError(APIException):
    """Exception raised for any HTTP method other than POST or OPTIONS."""

    def __init__(self, method: Optional[str] = None):
        super().__init__(
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            error="Method not allowed"
        )
        self.method = method


class OperationFailedError(APIException):
    """Exception raised at the handler boundary when an operation fails."""

    def __init__(self, operation: str, details: Optional[str] = None):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error=f"{operation} operation failed",
            details=details
        )
        self.operation = operation


class UpstreamError(Exception):
    """
    Exception raised when an upstream provider call fails.

    Covers non-success responses, rate limiting and provider output that
    cannot be turned into a canonical payload.
    """

    def __init__(
        self,
        message: str,
        provider: str = "upstream",
        status_code: Optional[int] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.status_code = status_code
        self.original_exception = original_exception


class ResponseParseError(UpstreamError):
    """Exception raised when provider output cannot be parsed."""


class ConfigurationError(Exception):
    """Exception raised when required configuration is missing or invalid."""
