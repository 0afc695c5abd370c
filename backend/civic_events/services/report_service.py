"""CSV export of events for the admin "general" report."""
import csv
import io
import logging
from typing import Any, Optional

from sqlalchemy import distinct, func
from sqlalchemy.orm import Session

from civic_events.models.event import Event
from civic_events.models.event_checkin import EventCheckin
from civic_events.services.query_filter import compile_filter, order_by_clauses, parse_filter, parse_sort

logger = logging.getLogger(__name__)

GENERAL_HEADERS = [
    "id", "name", "category", "status", "progress", "address",
    "calendar_start_date", "point", "check_in_count",
]


def general_report(
    db: Session,
    where: Optional[dict[str, Any]] = None,
    column: Optional[str] = None,
    direction: Optional[str] = None,
) -> str:
    """Render matching events as CSV text, header row first."""
    sort = parse_sort(column, direction)
    check_in_count = func.count(distinct(EventCheckin.id)).label("check_in_count")
    rows = (
        db.query(Event, check_in_count)
        .outerjoin(EventCheckin, EventCheckin.event_id == Event.id)
        .filter(compile_filter(parse_filter(where)))
        .group_by(Event.id)
        .order_by(*order_by_clauses(sort))
        .all()
    )

    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(GENERAL_HEADERS)
    for event, count in rows:
        writer.writerow([
            event.id,
            event.name or "",
            event.category.value,
            event.status.value,
            event.progress.value,
            event.address or event.town or "",
            event.calendar_start_date.isoformat() if event.calendar_start_date else "",
            event.point,
            count,
        ])
    logger.info("Generated general event report with %d rows", len(rows))
    return buffer.getvalue()
