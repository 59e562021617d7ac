"""
Error taxonomy shared by services and API handlers.

Every error carries a stable machine-oriented ``error_code`` and the HTTP
status it maps to. API responses render them as ``{"error", "details"}``.
"""
from fastapi import status


class WardrobeError(Exception):
    """Base class for all categorized application errors."""

    error_code = "unexpected_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code

    def to_dict(self) -> dict:
        return {"error": self.error_code, "details": self.message}


class ValidationError(WardrobeError):
    """Bad input. Raised before any external service is called."""

    error_code = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(WardrobeError):
    """Missing, invalid or unresolvable bearer credential."""

    error_code = "invalid_token"
    status_code = status.HTTP_401_UNAUTHORIZED


class StorageError(WardrobeError):
    """Object storage stage or cleanup failure."""

    error_code = "storage_error"


class AnalysisError(WardrobeError):
    """Analysis provider call failure."""

    error_code = "analysis_error"


class PersistenceError(WardrobeError):
    """Database insert or query failure."""

    error_code = "database_error"


class UnexpectedError(WardrobeError):
    """Anything that does not fit another category."""

    error_code = "unexpected_error"


class RateLimitExceeded(WardrobeError):
    """Client exceeded the request quota for the current window."""

    error_code = "rate_limited"
    status_code = status.HTTP_429_TOO_MANY_REQUESTS

    def __init__(self, message: str, retry_after: int = 0):
        super().__init__(message)
        self.retry_after = retry_after
