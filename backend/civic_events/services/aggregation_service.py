"""Event collections and summary statistics for admin and client listings."""
import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import distinct, func
from sqlalchemy.orm import Query, Session

from civic_events.config import settings
from civic_events.models.event import Event
from civic_events.models.event_checkin import EventCheckin
from civic_events.models.event_point_exchange import EventPointExchange
from civic_events.services import chart_service, geo
from civic_events.services.chart_service import ChartBucket
from civic_events.services.permissions import client_visible_clause
from civic_events.services.profiler import profile_and_notify
from civic_events.services.query_filter import compile_filter, order_by_clauses, parse_filter, parse_sort
from civic_events.services.time_window import map_display_clause, month_clause, utcnow

logger = logging.getLogger(__name__)


def _page_bounds(page: int, per_page: Optional[int]) -> tuple[int, int]:
    page = max(page or 1, 1)
    per_page = per_page or settings.DEFAULT_PER_PAGE
    return page, max(1, min(per_page, settings.MAX_PER_PAGE))


def paginate(query: Query, page: int = 1, per_page: Optional[int] = None) -> dict[str, Any]:
    page, per_page = _page_bounds(page, per_page)
    total = query.order_by(None).count()
    items = query.offset((page - 1) * per_page).limit(per_page).all()
    return {"items": items, "total": total, "page": page, "per_page": per_page}


def filtered_events(db: Session, where: Optional[dict[str, Any]]) -> Query:
    return db.query(Event).filter(compile_filter(parse_filter(where)))


@profile_and_notify("event.aggregate")
def aggregate(
    db: Session,
    where: Optional[dict[str, Any]] = None,
    column: Optional[str] = None,
    direction: Optional[str] = None,
    page: int = 1,
    per_page: Optional[int] = None,
) -> dict[str, Any]:
    """Filter, deduplicate, sort and page events."""
    sort = parse_sort(column, direction)
    query = filtered_events(db, where).distinct().order_by(*order_by_clauses(sort))
    return paginate(query, page, per_page)


def events_near(
    query: Query,
    lat: float,
    lng: float,
    radius_km: Optional[float] = None,
) -> Query:
    """Events within the radius, nearest first (ties by id)."""
    radius_km = settings.NEARBY_RADIUS_KM if radius_km is None else radius_km
    origin = geo.geography_point(lng, lat)
    return (
        query.filter(
            Event.lat.is_not(None),
            Event.lng.is_not(None),
            geo.within_radius(origin, radius_km),
        )
        .order_by(geo.distance_from(origin), Event.id.asc())
    )


def aggregate_by_location(
    db: Session,
    where: Optional[dict[str, Any]] = None,
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    year: Optional[int] = None,
    month: Optional[int] = None,
    column: Optional[str] = None,
    direction: Optional[str] = None,
    page: int = 1,
    per_page: Optional[int] = None,
    now: Optional[datetime] = None,
    published_only: bool = False,
) -> dict[str, Any]:
    """Map/listing collection: nearby events, a month's events, or what is displayable now."""
    now = now or utcnow()
    base = filtered_events(db, where)
    if published_only:
        base = base.filter(client_visible_clause())

    if lat is not None and lng is not None:
        logger.debug("Location search at (%s, %s)", lat, lng)
        return paginate(events_near(base.filter(map_display_clause(now)), lat, lng), page, per_page)

    if year is not None and month is not None:
        query = base.filter(month_clause(year, month, now))
    else:
        query = base.filter(map_display_clause(now))

    sort = parse_sort(column, direction)
    return paginate(query.distinct().order_by(*order_by_clauses(sort)), page, per_page)


def summarize(
    db: Session,
    active_area_id: int,
    bucket: ChartBucket = ChartBucket.month,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    where: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    """Event count for the area plus event, check-in and exchange charts."""
    new_event_count = (
        filtered_events(db, where)
        .filter(Event.active_area_id == active_area_id)
        .count()
    )

    def _chart(model):
        points = chart_service.chart(db, model, active_area_id, bucket, start_date, end_date)
        return [{"period": label, "count": count} for label, count in points]

    return {
        "new_event_count": new_event_count,
        "new_event_chart": _chart(Event),
        "event_checkin_chart": _chart(EventCheckin),
        "event_exchange_chart": _chart(EventPointExchange),
    }


def top_event(
    db: Session,
    where: Optional[dict[str, Any]] = None,
    limit: Optional[int] = None,
) -> list[dict[str, Any]]:
    """Events ranked by distinct check-ins, most first."""
    limit = min(limit or settings.TOP_EVENT_LIMIT, settings.TOP_EVENT_LIMIT)
    check_in_count = func.count(distinct(EventCheckin.id)).label("check_in_count")
    rows = (
        db.query(Event.id, Event.name, Event.town.label("address"), check_in_count)
        .outerjoin(EventCheckin, EventCheckin.event_id == Event.id)
        .filter(compile_filter(parse_filter(where)))
        .group_by(Event.id, Event.name, Event.town)
        .order_by(check_in_count.desc(), Event.id.asc())
        .limit(limit)
        .all()
    )
    return [
        {"id": row.id, "name": row.name, "address": row.address, "check_in_count": row.check_in_count}
        for row in rows
    ]
