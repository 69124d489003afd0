from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from incident_tracker.core.dependencies.incidents import (
    get_incident_query,
    get_incident_service,
)
from incident_tracker.db.session import get_db
from incident_tracker.schemas.incident import (
    ErrorResponse,
    IncidentCreate,
    IncidentListResponse,
    IncidentResponse,
    IncidentUpdate,
    PaginationMeta,
)
from incident_tracker.services.incident_query import IncidentQuery, list_incidents
from incident_tracker.services.incident_service import IncidentService

router = APIRouter(
    prefix="/incidents",
    tags=["Incidents"],
    responses={
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
)


@router.get(
    "",
    response_model=IncidentListResponse,
    summary="List incidents",
    responses={400: {"model": ErrorResponse, "description": "Invalid sort or order"}},
)
def get_incidents(
    query: IncidentQuery = Depends(get_incident_query),
    db: Session = Depends(get_db),
):
    page = list_incidents(db, query)

    return IncidentListResponse(
        data=[IncidentResponse.model_validate(item) for item in page.items],
        pagination=PaginationMeta(
            total=page.total,
            page=page.page,
            limit=page.limit,
            total_pages=page.total_pages,
        ),
    )


@router.post(
    "",
    response_model=IncidentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an incident",
    responses={400: {"model": ErrorResponse, "description": "Validation error"}},
)
def create_incident(
    payload: IncidentCreate,
    service: IncidentService = Depends(get_incident_service),
):
    return service.create_incident(payload)


@router.get(
    "/{incident_id}",
    response_model=IncidentResponse,
    summary="Get an incident",
    responses={404: {"model": ErrorResponse, "description": "Incident not found"}},
)
def get_incident(
    incident_id: str,
    service: IncidentService = Depends(get_incident_service),
):
    return service.get_incident(incident_id)


@router.patch(
    "/{incident_id}",
    response_model=IncidentResponse,
    summary="Update an incident",
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        404: {"model": ErrorResponse, "description": "Incident not found"},
    },
)
def update_incident(
    incident_id: str,
    payload: IncidentUpdate = Body(...),
    service: IncidentService = Depends(get_incident_service),
):
    return service.update_incident(incident_id, payload)
