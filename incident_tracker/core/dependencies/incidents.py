"""
Incident Dependencies Module
============================

FastAPI dependencies shared by the incident routes.

Usage:
    @router.get("/incidents")
    def list_route(query: IncidentQuery = Depends(get_incident_query)):
        ...
"""

from typing import Optional

from fastapi import Depends, Query, Request
from sqlalchemy.orm import Session

from incident_tracker.core.config import Settings
from incident_tracker.db.session import get_db
from incident_tracker.services.incident_query import IncidentQuery
from incident_tracker.services.incident_service import IncidentService


def get_incident_service(db: Session = Depends(get_db)) -> IncidentService:
    """Incident store access bound to the request's session."""
    return IncidentService(db)


def get_incident_query(
    request: Request,
    # Numeric parameters are taken as text: malformed values fall back to
    # defaults instead of failing request validation.
    page: Optional[str] = Query(None, description="Page number, 1-based"),
    limit: Optional[str] = Query(None, description="Page size"),
    sort: Optional[str] = Query(None, description="Field to sort by (default createdAt)"),
    order: Optional[str] = Query(None, description="asc or desc (default desc)"),
    status: Optional[str] = Query(None, description="Exact status filter"),
    severity: Optional[str] = Query(None, description="Exact severity filter"),
    service: Optional[str] = Query(None, description="Exact service filter"),
    search: Optional[str] = Query(None, description="Substring of title or summary"),
) -> IncidentQuery:
    """
    Normalize the listing query string.

    Raises:
        InvalidQueryParameterError: Unsupported sort field or order
    """
    settings: Settings = request.app.state.settings
    return IncidentQuery.from_params(
        page=page,
        limit=limit,
        sort=sort,
        order=order,
        status=status,
        severity=severity,
        service=service,
        search=search,
        default_limit=settings.DEFAULT_PAGE_SIZE,
        max_limit=settings.MAX_PAGE_SIZE,
    )
