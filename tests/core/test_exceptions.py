"""
Exception Unit Tests
====================

Tests for the application exception hierarchy.
"""

import pytest

from incident_tracker.core.exceptions import (
    IncidentNotFoundError,
    IncidentTrackerException,
    InvalidQueryParameterError,
    NotFoundError,
    StoreError,
    ValidationError,
)


pytestmark = pytest.mark.unit


class TestExceptionHierarchy:
    """Tests for status codes and payloads."""

    def test_base_defaults_to_500(self):
        exc = IncidentTrackerException("boom")

        assert exc.status_code == 500
        assert exc.details == {}
        assert str(exc) == "boom"

    def test_validation_error_is_400(self):
        exc = ValidationError(details={"errors": []})

        assert exc.status_code == 400
        assert exc.message == "Validation error"

    def test_invalid_query_parameter(self):
        exc = InvalidQueryParameterError("order", "up", allowed=["asc", "desc"])

        assert isinstance(exc, ValidationError)
        assert exc.status_code == 400
        assert exc.details["errors"] == [
            {
                "field": "query.order",
                "message": "Must be one of: asc, desc",
                "type": "invalid_choice",
            }
        ]
        assert exc.details["value"] == "up"

    def test_incident_not_found(self):
        exc = IncidentNotFoundError("abc")

        assert isinstance(exc, NotFoundError)
        assert exc.status_code == 404
        assert exc.message == "Incident not found"
        assert exc.details == {"resource": "Incident", "identifier": "abc"}

    def test_not_found_without_identifier(self):
        exc = NotFoundError("Thing")

        assert exc.details == {"resource": "Thing"}

    def test_store_error_is_opaque(self):
        exc = StoreError("list_incidents")

        assert exc.status_code == 500
        assert exc.message == "Internal Server Error"
        assert exc.details == {"operation": "list_incidents"}
