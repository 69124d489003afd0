"""
Centralized Exception Handling Module
=====================================

Defines custom exception classes for the application.

Every exception carries an HTTP status code and a details payload so the
application-level handler can render a consistent error body.

Usage:
    raise IncidentNotFoundError(incident_id)
    raise InvalidQueryParameterError("sort", "color", allowed=["title", ...])
"""

from typing import Any, Dict, List, Optional
from fastapi import status


class IncidentTrackerException(Exception):
    """
    Base exception class for the application.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# ==========================
# Validation Exceptions
# ==========================

class ValidationError(IncidentTrackerException):
    """Raised when client input fails validation."""

    def __init__(
        self,
        message: str = "Validation error",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
        )


class InvalidQueryParameterError(ValidationError):
    """Raised when a listing parameter holds an unsupported value."""

    def __init__(self, parameter: str, value: Any, allowed: List[str]):
        super().__init__(
            message=f"Invalid value for query parameter '{parameter}'",
            details={
                "errors": [
                    {
                        "field": f"query.{parameter}",
                        "message": f"Must be one of: {', '.join(allowed)}",
                        "type": "invalid_choice",
                    }
                ],
                "value": value,
                "allowed": allowed,
            },
        )


# ==========================
# Resource Exceptions
# ==========================

class NotFoundError(IncidentTrackerException):
    """Raised when a resource is not found."""

    def __init__(self, resource: str = "Resource", identifier: Optional[str] = None):
        message = f"{resource} not found"
        details = {"resource": resource}
        if identifier:
            details["identifier"] = identifier
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
        )


class IncidentNotFoundError(NotFoundError):
    """Raised when an incident id does not exist."""

    def __init__(self, identifier: Optional[str] = None):
        super().__init__(resource="Incident", identifier=identifier)


# ==========================
# Store Exceptions
# ==========================

class StoreError(IncidentTrackerException):
    """
    Raised when the persistence layer fails unexpectedly.

    The message returned to clients stays opaque; the underlying
    error is logged where it is raised.
    """

    def __init__(self, operation: str):
        super().__init__(
            message="Internal Server Error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"operation": operation},
        )
        self.operation = operation
