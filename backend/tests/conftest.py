"""Pytest fixtures: SQLite database per test, seed helpers, fake job queue."""
import math
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./civic_events_dev.db")

from datetime import datetime, timezone  # noqa: E402
from typing import Optional  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from civic_events.database import Base, get_db  # noqa: E402
from civic_events.main import app  # noqa: E402
from civic_events.models import ActiveArea, Event, EventCheckin, User, UserRole  # noqa: E402
from civic_events.models.event import EventProgress, EventStatus  # noqa: E402
from civic_events.services.point_service import get_point_queue  # noqa: E402

SQLITE_URL = "sqlite:///./test.db"

EARTH_RADIUS_M = 6371008.8


# SQLite has no PostGIS; these stand in for the spatial functions the
# location search emits. Points travel as "lng lat" text.
def _make_point(lng, lat):
    if lng is None or lat is None:
        return None
    return f"{float(lng)!r} {float(lat)!r}"


def _passthrough(point, *_):
    return point


def _distance_m(a, b):
    if a is None or b is None:
        return None
    lng1, lat1 = (math.radians(float(v)) for v in a.split())
    lng2, lat2 = (math.radians(float(v)) for v in b.split())
    h = math.sin((lat2 - lat1) / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin((lng2 - lng1) / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(h))


def _dwithin(a, b, distance, *_):
    measured = _distance_m(a, b)
    return None if measured is None else int(measured <= float(distance))


def register_spatial_functions(dbapi_conn):
    for name in ("ST_MakePoint", "MakePoint"):
        dbapi_conn.create_function(name, 2, _make_point)
    for name in ("ST_SetSRID", "SetSRID", "geography"):
        dbapi_conn.create_function(name, -1, _passthrough)
    for name in ("ST_Distance", "Distance"):
        dbapi_conn.create_function(name, -1, _distance_m)
    for name in ("ST_DWithin", "PtDistWithin"):
        dbapi_conn.create_function(name, -1, _dwithin)


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    # Enable WAL mode for better concurrency
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()
        register_spatial_functions(dbapi_conn)

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session bound to the test engine."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


class FakePointQueue:
    """In-memory stand-in for the arq queue; dedupes on request id like arq's job ids."""

    def __init__(self):
        self.jobs = []
        self._job_ids = set()
        self.fail_with: Optional[Exception] = None

    async def enqueue(self, event_id, active_area_id, point, request_id=None):
        if self.fail_with is not None:
            raise self.fail_with
        job_id = f"add_point_event:{request_id}" if request_id else f"job-{len(self.jobs) + 1}"
        if job_id in self._job_ids:
            return None
        self._job_ids.add(job_id)
        self.jobs.append((event_id, active_area_id, point))
        return job_id


@pytest.fixture(scope="function")
def point_queue():
    return FakePointQueue()


@pytest.fixture(scope="function")
def client(db_engine, point_queue):
    """FastAPI TestClient with the database and queue dependencies overridden."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_point_queue] = lambda: point_queue
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Seed helpers: write straight to the database, return the ORM object
# ---------------------------------------------------------------------------
def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def create_area(db, name: str = "North Ward") -> ActiveArea:
    area = ActiveArea(name=name)
    db.add(area)
    db.commit()
    db.refresh(area)
    return area


def create_user(
    db,
    name: str = "Admin",
    role: UserRole = UserRole.admin,
    permission_code: Optional[str] = None,
    active_area_id: Optional[int] = None,
) -> User:
    user = User(display_name=name, role=role, permission_code=permission_code, active_area_id=active_area_id)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_event(db, **fields) -> Event:
    """Insert an event directly, bypassing the write path."""
    fields.setdefault("name", "Beach Cleanup")
    fields.setdefault("status", EventStatus.active)
    fields.setdefault("progress", EventProgress.published)
    fields.setdefault("calendar_start_date", utc(2024, 1, 1))
    event = Event(**fields)
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


def add_checkins(db, event: Event, user: User, count: int, created_at: Optional[datetime] = None) -> None:
    for _ in range(count):
        checkin = EventCheckin(event_id=event.id, user_id=user.user_id)
        if created_at is not None:
            checkin.created_at = created_at
        db.add(checkin)
    db.commit()
