"""Time-bucketed counts for the dashboard charts.

Timestamps are stored in UTC and converted to ``DISPLAY_TIMEZONE`` before
bucketing, so an event created at 2024-01-31T20:00Z lands in 2024/02.
"""
import enum
import logging
from collections import Counter
from datetime import datetime
from typing import Iterable, Optional

import pytz
from sqlalchemy import func
from sqlalchemy.orm import Session

from civic_events.config import settings
from civic_events.models.event import Event
from civic_events.services.time_window import as_utc

logger = logging.getLogger(__name__)


class ChartBucket(str, enum.Enum):
    month = "month"
    year = "year"


LABEL_FORMATS = {
    ChartBucket.month: "%Y/%m",
    ChartBucket.year: "%Y",
}
# Same labels rendered by PostgreSQL to_char
SQL_LABEL_FORMATS = {
    ChartBucket.month: "YYYY/MM",
    ChartBucket.year: "YYYY",
}
_STREAM_BATCH = 1000


def bucket_counts(
    timestamps: Iterable[Optional[datetime]],
    bucket: ChartBucket,
    tz_name: Optional[str] = None,
) -> list[tuple[str, int]]:
    """Count timestamps per period label, ascending by period."""
    tz = pytz.timezone(tz_name or settings.DISPLAY_TIMEZONE)
    fmt = LABEL_FORMATS[ChartBucket(bucket)]
    counts = Counter(as_utc(ts).astimezone(tz).strftime(fmt) for ts in timestamps if ts is not None)
    return sorted(counts.items())


def period_label(column, bucket: ChartBucket, tz_name: Optional[str] = None):
    """SQL expression for the display-zone period label of ``column`` (PostgreSQL)."""
    local_time = func.timezone(tz_name or settings.DISPLAY_TIMEZONE, column)
    return func.to_char(local_time, SQL_LABEL_FORMATS[ChartBucket(bucket)])


def chart(
    db: Session,
    model,
    active_area_id: int,
    bucket: ChartBucket = ChartBucket.month,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> list[tuple[str, int]]:
    """Per-period counts of ``model`` rows created inside one active area."""
    query = db.query(model.created_at)
    if model is not Event:
        query = query.join(Event, model.event_id == Event.id)
    query = query.filter(Event.active_area_id == active_area_id, model.created_at.is_not(None))
    if start_date is not None:
        query = query.filter(model.created_at >= as_utc(start_date))
    if end_date is not None:
        query = query.filter(model.created_at <= as_utc(end_date))

    if db.get_bind().dialect.name == "postgresql":
        label = period_label(model.created_at, bucket).label("period")
        rows = (
            query.with_entities(label, func.count().label("count"))
            .group_by(label)
            .order_by(label)
            .all()
        )
        points = [(row.period, row.count) for row in rows]
    else:
        # Stream rows into Python buckets where SQL has no zone conversion
        points = bucket_counts((row[0] for row in query.yield_per(_STREAM_BATCH)), bucket)

    logger.debug("Chart %s for area %s: %d buckets", model.__tablename__, active_area_id, len(points))
    return points
