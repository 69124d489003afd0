"""
Incident Model
==============

The single persisted entity of the tracker.

Lifecycle:
- Created with a generated id and equal created_at / updated_at
- Mutated only through partial updates (updated_at refreshed each time)
- Deleted only by the administrative bulk clear

Database Indexes:
- Primary key: id (UUID stored as string)
- Index: status, severity, service (list filters)
- Index: created_at (default sort)
"""

import uuid
from datetime import datetime, UTC
from typing import Optional

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from incident_tracker.db.base import Base
from incident_tracker.core.enums import IncidentStatus, Severity


def _new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


class Incident(Base):
    """
    Incident entity representing a tracked operational issue.

    Attributes:
        id: UUID primary key (string form)
        title: Short description, never empty
        service: Affected service name
        severity: SEV1 (most severe) through SEV4
        status: OPEN, MITIGATED or RESOLVED
        owner: Optional responsible person
        summary: Optional longer description
        created_at: Creation timestamp, immutable
        updated_at: Last successful update timestamp
    """

    __tablename__ = "incidents"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=_new_id,
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)

    service: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True,
    )

    # Stored as plain strings so unknown filter values match nothing
    # instead of failing enum coercion.
    severity: Mapped[Severity] = mapped_column(
        String(10),
        nullable=False,
        index=True,
    )

    status: Mapped[IncidentStatus] = mapped_column(
        String(20),
        nullable=False,
        index=True,
    )

    owner: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ==========================
    # Timestamps
    # ==========================
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<Incident(id={self.id}, severity={self.severity}, "
            f"status={self.status})>"
        )
