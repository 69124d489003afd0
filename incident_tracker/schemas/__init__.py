"""
Schemas Package Initialization
==============================

Exports all Pydantic schemas for the application.

Usage:
    from incident_tracker.schemas import IncidentCreate, IncidentResponse
"""

from incident_tracker.schemas.incident import (
    IncidentCreate,
    IncidentUpdate,
    IncidentResponse,
    IncidentListResponse,
    PaginationMeta,
    FieldError,
    ErrorResponse,
)

__all__ = [
    "IncidentCreate",
    "IncidentUpdate",
    "IncidentResponse",
    "IncidentListResponse",
    "PaginationMeta",
    "FieldError",
    "ErrorResponse",
]
