"""Point awards for events.

``add_point`` only hands the award to the arq queue and reports that the
queue took it; ``apply_point_award`` is what the worker runs later.
Readers right after dispatch may still see the old point total.
"""
import logging
from typing import Optional, Protocol

from arq import create_pool
from arq.connections import ArqRedis, RedisSettings
from sqlalchemy.orm import Session

from civic_events.config import settings
from civic_events.models.activity_log import ActivityLog
from civic_events.models.dashboard_event import DashboardEvent
from civic_events.models.event import Event

logger = logging.getLogger(__name__)

ADD_POINT_JOB = "add_point_event"


class PointQueue(Protocol):
    async def enqueue(
        self, event_id: int, active_area_id: int, point: int, request_id: Optional[str] = None,
    ) -> Optional[str]:
        ...


def redis_settings() -> RedisSettings:
    return RedisSettings(
        host=settings.REDIS_HOST,
        port=settings.REDIS_PORT,
        database=settings.REDIS_DATABASE,
    )


class ArqPointQueue:
    """Enqueues point awards on Redis through arq."""

    def __init__(self, redis: Optional[RedisSettings] = None):
        self.redis_settings = redis or redis_settings()
        self._pool: Optional[ArqRedis] = None

    async def get_pool(self) -> ArqRedis:
        if self._pool is None:
            self._pool = await create_pool(self.redis_settings)
            logger.info("arq pool created for %s:%s", self.redis_settings.host, self.redis_settings.port)
        return self._pool

    async def enqueue(
        self, event_id: int, active_area_id: int, point: int, request_id: Optional[str] = None,
    ) -> Optional[str]:
        """Return the job id, or None when a job with the same request id is already queued."""
        pool = await self.get_pool()
        job_id = f"{ADD_POINT_JOB}:{request_id}" if request_id else None
        job = await pool.enqueue_job(ADD_POINT_JOB, event_id, active_area_id, point, _job_id=job_id)
        return job.job_id if job is not None else None

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None


_queue: Optional[ArqPointQueue] = None


def get_point_queue() -> PointQueue:
    """FastAPI dependency; tests override it with an in-memory queue."""
    global _queue
    if _queue is None:
        _queue = ArqPointQueue()
    return _queue


async def add_point(
    queue: PointQueue,
    event_id: int,
    active_area_id: int,
    point: int,
    request_id: Optional[str] = None,
) -> dict[str, bool]:
    job_id = await queue.enqueue(event_id, active_area_id, int(point), request_id=request_id)
    if job_id is None:
        logger.info("Point award for event %s already queued (request %s)", event_id, request_id)
    else:
        logger.info("Queued point award %s: %d points to event %s in area %s", job_id, point, event_id, active_area_id)
    return {"success": True}


def apply_point_award(db: Session, event_id: int, active_area_id: int, point: int) -> bool:
    """Add points to the event and its area rollup; False when the event is gone."""
    event = db.query(Event).filter(Event.id == event_id).with_for_update().first()
    if event is None:
        logger.warning("Point award skipped: event %s no longer exists", event_id)
        return False

    event.point = (event.point or 0) + point

    rollup = (
        db.query(DashboardEvent)
        .filter(DashboardEvent.event_id == event_id, DashboardEvent.active_area_id == active_area_id)
        .with_for_update()
        .first()
    )
    if rollup is None:
        rollup = DashboardEvent(event_id=event_id, active_area_id=active_area_id, total_point=0)
        db.add(rollup)
    rollup.total_point = (rollup.total_point or 0) + point

    db.add(ActivityLog(event_id=event_id, action="add_point", detail={"point": point, "active_area_id": active_area_id}))
    db.commit()
    logger.info("Awarded %d points to event %s (total %d)", point, event_id, event.point)
    return True
