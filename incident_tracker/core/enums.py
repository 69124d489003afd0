"""
Enumeration Module
==================

Defines enumerations used across the application.
"""

from enum import Enum


class Severity(str, Enum):
    """Urgency classification, SEV1 being the most severe."""

    SEV1 = "SEV1"
    SEV2 = "SEV2"
    SEV3 = "SEV3"
    SEV4 = "SEV4"


class IncidentStatus(str, Enum):
    """Lifecycle statuses for incidents."""

    OPEN = "OPEN"
    MITIGATED = "MITIGATED"
    RESOLVED = "RESOLVED"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# Services offered in the client's picker. Advisory only: the API accepts
# any non-empty service name.
KNOWN_SERVICES = (
    "Auth",
    "Payments",
    "Backend",
    "Frontend",
    "Database",
    "Search",
    "notifications",
)
