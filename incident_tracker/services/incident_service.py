"""
Incident Service Module
=======================

Store access for single incidents.

Features:
- Create with server-assigned id and timestamps
- Lookup by id
- Partial update (last write wins, updated_at refreshed)
- Administrative bulk clear

Every store failure is rolled back and surfaced as StoreError; no
operation is retried.
"""

from sqlalchemy.orm import Session

from incident_tracker.core.exceptions import IncidentNotFoundError
from incident_tracker.core.logging import get_logger
from incident_tracker.db.session import store_operation
from incident_tracker.models.incident import Incident, utcnow
from incident_tracker.schemas.incident import IncidentCreate, IncidentUpdate

# Initialize logger
logger = get_logger(__name__)


class IncidentService:
    """
    Incident persistence operations bound to one session.

    Usage:
        service = IncidentService(db)
        incident = service.create_incident(payload)
    """

    def __init__(self, db: Session):
        self.db = db

    def create_incident(self, payload: IncidentCreate) -> Incident:
        """
        Persist a validated incident.

        created_at and updated_at receive the same instant.

        Args:
            payload: Validated create payload

        Returns:
            The stored Incident
        """
        now = utcnow()
        incident = Incident(
            **payload.model_dump(mode="json"),
            created_at=now,
            updated_at=now,
        )

        with store_operation(self.db, "create_incident"):
            self.db.add(incident)
            self.db.commit()
            self.db.refresh(incident)

        logger.info(
            "incident_created",
            incident_id=incident.id,
            service=incident.service,
            severity=incident.severity,
        )
        return incident

    def get_incident(self, incident_id: str) -> Incident:
        """
        Fetch an incident by id.

        Raises:
            IncidentNotFoundError: No incident has this id
        """
        with store_operation(self.db, "get_incident"):
            incident = (
                self.db.query(Incident)
                .filter(Incident.id == incident_id)
                .first()
            )

        if incident is None:
            raise IncidentNotFoundError(incident_id)
        return incident

    def update_incident(self, incident_id: str, payload: IncidentUpdate) -> Incident:
        """
        Apply the supplied fields of ``payload`` to an incident.

        Concurrent updates to the same id are not version-checked: the
        commit that lands last wins.

        Raises:
            IncidentNotFoundError: No incident has this id
        """
        changes = payload.model_dump(mode="json", exclude_unset=True)

        incident = self.get_incident(incident_id)

        with store_operation(self.db, "update_incident"):
            for field_name, value in changes.items():
                setattr(incident, field_name, value)
            incident.updated_at = utcnow()
            self.db.commit()
            self.db.refresh(incident)

        logger.info(
            "incident_updated",
            incident_id=incident.id,
            fields=sorted(changes),
        )
        return incident

    def clear_incidents(self) -> int:
        """
        Delete every incident.

        Administrative only; not exposed over HTTP.

        Returns:
            Number of deleted rows
        """
        with store_operation(self.db, "clear_incidents"):
            deleted = self.db.query(Incident).delete(synchronize_session=False)
            self.db.commit()

        logger.warning("incidents_cleared", deleted=deleted)
        return deleted
