"""arq worker for point awards.

Run with ``arq civic_events.worker.WorkerSettings``.
"""
import logging
from typing import Any

from civic_events.config import settings
from civic_events.database import SessionLocal
from civic_events.services.point_service import apply_point_award, redis_settings

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


async def add_point_event(ctx: dict[str, Any], event_id: int, active_area_id: int, point: int) -> bool:
    db = SessionLocal()
    try:
        return apply_point_award(db, event_id, active_area_id, point)
    finally:
        db.close()


class WorkerSettings:
    functions = [add_point_event]
    redis_settings = redis_settings()
    max_tries = 3
