"""
Incident Query Engine
=====================

Turns raw listing parameters into a bounded, deterministically ordered page
of incidents plus the total number of matches.

Rules:
- status, severity and service are exact-match filters, ANDed together
- search matches title OR summary (literal substring), ANDed with the rest
- ordering is the requested column, then id in the same direction
- count and page are read inside one transaction at snapshot isolation
"""

import math
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from incident_tracker.core.enums import SortOrder
from incident_tracker.core.exceptions import InvalidQueryParameterError
from incident_tracker.core.logging import get_logger, log_execution_time
from incident_tracker.db.session import store_operation
from incident_tracker.models.incident import Incident

# Initialize logger
logger = get_logger(__name__)

DEFAULT_SORT = "createdAt"
DEFAULT_ORDER = SortOrder.DESC
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

# Public (JSON) field name -> column
SORTABLE_FIELDS = {
    "id": Incident.id,
    "title": Incident.title,
    "service": Incident.service,
    "severity": Incident.severity,
    "status": Incident.status,
    "owner": Incident.owner,
    "summary": Incident.summary,
    "createdAt": Incident.created_at,
    "updatedAt": Incident.updated_at,
}

# Isolation level giving count and fetch one consistent view, per dialect.
# SQLite needs none: an explicit BEGIN (see db.session) already holds one
# read snapshot for the whole transaction.
SNAPSHOT_ISOLATION = {
    "postgresql": "REPEATABLE READ",
    "mysql": "REPEATABLE READ",
}

_LEADING_INT = re.compile(r"\s*([+-]?)(\d+)")

# Larger values are clamped here before conversion; a page this far out
# is always past the end and a limit this large is always capped.
MAX_PARSED_INT = 10 ** 18
_MAX_PARSED_DIGITS = len(str(MAX_PARSED_INT))


def parse_positive_int(raw: Any, default: int) -> int:
    """
    Read an integer from a query-string value.

    A leading integer prefix is accepted ("2abc" -> 2). Missing,
    non-numeric and non-positive values give ``default``. Values above
    ``MAX_PARSED_INT``, however many digits they have, become
    ``MAX_PARSED_INT``.
    """
    if raw is None:
        return default
    match = _LEADING_INT.match(str(raw))
    if not match:
        return default
    sign, digits = match.groups()
    digits = digits.lstrip("0")
    if sign == "-" or not digits:
        return default
    if len(digits) > _MAX_PARSED_DIGITS:
        return MAX_PARSED_INT
    return min(int(digits), MAX_PARSED_INT)


@dataclass(frozen=True)
class IncidentQuery:
    """Normalized listing request."""

    page: int = 1
    limit: int = DEFAULT_LIMIT
    sort: str = DEFAULT_SORT
    order: SortOrder = DEFAULT_ORDER
    status: Optional[str] = None
    severity: Optional[str] = None
    service: Optional[str] = None
    search: Optional[str] = None

    @classmethod
    def from_params(
        cls,
        page: Any = None,
        limit: Any = None,
        sort: Optional[str] = None,
        order: Optional[str] = None,
        status: Optional[str] = None,
        severity: Optional[str] = None,
        service: Optional[str] = None,
        search: Optional[str] = None,
        *,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int = MAX_LIMIT,
    ) -> "IncidentQuery":
        """
        Build a query from raw request values.

        Raises:
            InvalidQueryParameterError: sort is not a sortable field or
                order is neither asc nor desc.
        """
        sort = sort or DEFAULT_SORT
        if sort not in SORTABLE_FIELDS:
            raise InvalidQueryParameterError("sort", sort, list(SORTABLE_FIELDS))

        raw_order = order or DEFAULT_ORDER.value
        try:
            sort_order = SortOrder(raw_order.lower())
        except ValueError:
            raise InvalidQueryParameterError(
                "order", raw_order, [o.value for o in SortOrder]
            )

        return cls(
            page=parse_positive_int(page, 1),
            limit=min(parse_positive_int(limit, default_limit), max_limit),
            sort=sort,
            order=sort_order,
            # Empty strings mean "no filter"
            status=status or None,
            severity=severity or None,
            service=service or None,
            search=search or None,
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class IncidentPage:
    """One page of results plus the full match count."""

    page: int
    limit: int
    total: int
    items: List[Incident] = field(default_factory=list)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)


def build_filters(query: IncidentQuery) -> list:
    """Where-clauses for the active filters. All of them must hold."""
    clauses = []
    if query.status:
        clauses.append(Incident.status == query.status)
    if query.severity:
        clauses.append(Incident.severity == query.severity)
    if query.service:
        clauses.append(Incident.service == query.service)
    if query.search:
        clauses.append(
            or_(
                Incident.title.contains(query.search, autoescape=True),
                Incident.summary.contains(query.search, autoescape=True),
            )
        )
    return clauses


def build_ordering(query: IncidentQuery) -> list:
    """Order-by clauses: requested column, then id as tie-break."""
    column = SORTABLE_FIELDS[query.sort]
    columns = [column] if column is Incident.id else [column, Incident.id]
    if query.order is SortOrder.ASC:
        return [c.asc() for c in columns]
    return [c.desc() for c in columns]


def _begin_snapshot(db: Session) -> None:
    # Isolation can only be chosen before the transaction starts; a session
    # already inside one keeps reading within it.
    if db.in_transaction():
        return
    isolation = SNAPSHOT_ISOLATION.get(db.get_bind().dialect.name)
    if isolation:
        db.connection(execution_options={"isolation_level": isolation})
    else:
        db.connection()


def filtered_query(db: Session, query: IncidentQuery) -> Query:
    q = db.query(Incident)
    for clause in build_filters(query):
        q = q.filter(clause)
    return q


@log_execution_time(logger, "incident_list")
def list_incidents(db: Session, query: IncidentQuery) -> IncidentPage:
    """
    Fetch one page of incidents matching ``query``.

    Args:
        db: Database session
        query: Normalized listing request

    Returns:
        IncidentPage with the page slice and the total match count

    Raises:
        StoreError: the store failed while counting or fetching
    """
    with store_operation(db, "list_incidents"):
        _begin_snapshot(db)
        base = filtered_query(db, query)

        total = base.count()

        items: List[Incident] = []
        if query.offset < total:
            items = (
                base.order_by(*build_ordering(query))
                .offset(query.offset)
                .limit(query.limit)
                .all()
            )

    logger.debug(
        "incident_list_page",
        page=query.page,
        limit=query.limit,
        total=total,
        returned=len(items),
    )

    return IncidentPage(
        page=query.page,
        limit=query.limit,
        total=total,
        items=items,
    )
