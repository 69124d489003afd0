"""
Incident Schemas Module
=======================

Pydantic models for incident request/response validation.

- IncidentCreate: full payload, every required field present
- IncidentUpdate: partial payload, present fields obey the same rules
- IncidentResponse / IncidentListResponse: serialized with camelCase keys

Unknown payload keys are ignored, so client supplied ``id`` or timestamps
never reach the store.
"""

from datetime import datetime, UTC
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from incident_tracker.core.enums import IncidentStatus, KNOWN_SERVICES, Severity


# ==========================
# Request Schemas
# ==========================

class IncidentCreate(BaseModel):
    """Schema for creating a new incident."""

    title: str = Field(
        ...,
        min_length=1,
        description="Short incident title"
    )
    service: str = Field(
        ...,
        min_length=1,
        description=f"Affected service, e.g. {', '.join(KNOWN_SERVICES)}"
    )
    severity: Severity = Field(
        ...,
        description="Incident severity"
    )
    status: IncidentStatus = Field(
        ...,
        description="Incident lifecycle status"
    )
    owner: Optional[str] = Field(
        default=None,
        description="Person responsible for the incident"
    )
    summary: Optional[str] = Field(
        default=None,
        description="Longer free-text description"
    )

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "title": "Login requests timing out",
                "service": "Auth",
                "severity": "SEV2",
                "status": "OPEN",
                "owner": "ops@team.com",
                "summary": "p99 latency on /login above 5s since 09:40 UTC",
            }
        }
    )


class IncidentUpdate(BaseModel):
    """
    Schema for partially updating an incident.

    Omitted fields keep their stored value. Required fields of the
    full schema may be omitted but not set to null.
    """

    title: Optional[str] = Field(default=None, min_length=1)
    service: Optional[str] = Field(default=None, min_length=1)
    severity: Optional[Severity] = None
    status: Optional[IncidentStatus] = None
    owner: Optional[str] = None
    summary: Optional[str] = None

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {"status": "RESOLVED"}
        }
    )

    @field_validator("title", "service", "severity", "status")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("Field may not be null")
        return value


# ==========================
# Response Schemas
# ==========================

class IncidentResponse(BaseModel):
    """Incident as returned by the API."""

    id: str
    title: str
    service: str
    severity: Severity
    status: IncidentStatus
    owner: Optional[str] = None
    summary: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_serializer("created_at", "updated_at")
    def serialize_timestamp(self, value: datetime) -> str:
        # SQLite hands back naive datetimes; they were written as UTC.
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.isoformat()


class PaginationMeta(BaseModel):
    """Paging metadata for list responses."""

    total: int = Field(..., description="Number of incidents matching the filters")
    page: int = Field(..., description="Current page number")
    limit: int = Field(..., description="Page size")
    total_pages: int = Field(..., description="ceil(total / limit)")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class IncidentListResponse(BaseModel):
    """Response schema for the incident listing."""

    data: list[IncidentResponse]
    pagination: PaginationMeta


# ==========================
# Error Schemas
# ==========================

class FieldError(BaseModel):
    field: str
    message: str
    type: str


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    message: str = Field(
        ...,
        description="Error message"
    )
    details: Optional[dict] = Field(
        default=None,
        description="Additional error details"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "message": "Incident not found",
                "details": {"resource": "Incident", "identifier": "0b6f..."}
            }
        }
    )
