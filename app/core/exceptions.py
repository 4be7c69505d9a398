"""Application error types.

Services raise these; the handlers registered in ``app.main`` turn them into
the ``{"success": false, "message": ...}`` envelope with the matching status.
"""

from typing import Optional

from fastapi import status


class FitSphereError(Exception):
    """Base exception for errors reported to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Server error"

    def __init__(self, message: Optional[str] = None, original_error: Optional[Exception] = None):
        self.message = message or self.default_message
        self.original_error = original_error
        super().__init__(self.message)


class ValidationError(FitSphereError):
    """A required field is missing or a value is unusable."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class ConflictError(FitSphereError):
    """The resource already exists (duplicate email)."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "User already exists"


class InvalidCredentialsError(FitSphereError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid credentials"


class UnauthenticatedError(FitSphereError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized, token failed"


class NotFoundError(FitSphereError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class InternalError(FitSphereError):
    """Unexpected fault; the underlying message is passed through to the client."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
