"""
Application errors.

Services raise these instead of ``HTTPException`` so that the same failure
reads the same way whether it comes from a route, a dependency or a helper.
The handlers in ``college_api.main`` turn them into the standard envelope::

    {"status": "error", "message": "...", "errors": [...]}
"""

from typing import Any, Dict, List, Optional

from fastapi import status


class AppError(Exception):
    """Base class for every error that is reported to the API caller."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message or self.default_message
        self.errors = errors
        self.headers = headers
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"status": "error", "message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationFailed(AppError):
    """Malformed or missing input; carries per-field messages."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class InvalidArgument(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid argument"


class Conflict(AppError):
    """A unique key (username, email, student ID) is already taken."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Resource already exists"


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not enough permissions"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class InvalidOperation(AppError):
    """A business rule forbids the request, e.g. deleting the last admin."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Operation not allowed"


class InternalError(AppError):
    """Store or transport failure; ``detail`` is only exposed in debug mode."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        super().__init__(message)
        self.detail = detail
