"""Time-window rules deciding which events show on the map and in listings.

Each rule exists twice: as a plain predicate over datetimes (used when a
single record is checked in Python) and as a SQLAlchemy clause (used by
the aggregation queries). Both take one ``now`` so every sub-clause of a
query compares against the same instant. Nothing here writes to a record.
"""
import calendar
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import and_, or_

from civic_events.models.event import Event


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive values (SQLite returns them) and convert aware ones."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """First and last instant of a calendar month in UTC."""
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")
    last_day = calendar.monthrange(year, month)[1]
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    end = datetime(year, month, last_day, 23, 59, 59, 999999, tzinfo=timezone.utc)
    return start, end


def _started(start: Optional[datetime], bound: datetime) -> bool:
    start = as_utc(start)
    return start is None or start <= bound


def _not_ended(end: Optional[datetime], bound: datetime) -> bool:
    end = as_utc(end)
    return end is None or end >= bound


# ── Plain predicates ───────────────────────────────────────────────


def is_map_displayable(
    map_start_date: Optional[datetime],
    display_end_date: Optional[datetime],
    now: datetime,
) -> bool:
    """Baseline rule: the map window has opened and not yet closed."""
    now = as_utc(now)
    return _started(map_start_date, now) and _not_ended(display_end_date, now)


def is_in_month(
    qr_start_datetime: Optional[datetime],
    display_end_date: Optional[datetime],
    year: int,
    month: int,
    now: datetime,
) -> bool:
    """Month rule: live comparison for the current month, overlap otherwise.

    For any other month the start side is compared with the END of the
    month and the end side with its START, so an event qualifies when its
    window overlaps the requested month.
    """
    now = as_utc(now)
    start_of_month, end_of_month = month_bounds(year, month)
    if start_of_month <= now <= end_of_month:
        return _started(qr_start_datetime, now) and _not_ended(display_end_date, now)
    return _started(qr_start_datetime, end_of_month) and _not_ended(display_end_date, start_of_month)


# ── SQL clauses ────────────────────────────────────────────────────


def _window_clause(start_column, start_bound: datetime, end_bound: datetime):
    return and_(
        or_(start_column.is_(None), start_column <= start_bound),
        or_(Event.display_end_date.is_(None), Event.display_end_date >= end_bound),
    )


def map_display_clause(now: datetime):
    now = as_utc(now)
    return _window_clause(Event.map_start_date, now, now)


def month_clause(year: int, month: int, now: datetime):
    now = as_utc(now)
    start_of_month, end_of_month = month_bounds(year, month)
    if start_of_month <= now <= end_of_month:
        return _window_clause(Event.qr_start_datetime, now, now)
    return _window_clause(Event.qr_start_datetime, end_of_month, start_of_month)
