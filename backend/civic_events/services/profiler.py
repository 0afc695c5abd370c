"""Wall-clock profiling for service calls.

``profile_and_notify`` wraps a function, logs its duration and outcome,
and warns when it runs past ``SLOW_CALL_THRESHOLD_MS``. Return values and
exceptions pass through untouched.
"""
import functools
import logging
import time
from typing import Callable, Optional

from civic_events.config import settings

logger = logging.getLogger(__name__)


def profile_and_notify(label: Optional[str] = None, threshold_ms: Optional[int] = None) -> Callable:
    def decorator(func: Callable) -> Callable:
        name = label or func.__qualname__

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            limit = settings.SLOW_CALL_THRESHOLD_MS if threshold_ms is None else threshold_ms
            started = time.perf_counter()
            outcome = "ok"
            try:
                return func(*args, **kwargs)
            except Exception:
                outcome = "error"
                raise
            finally:
                elapsed_ms = (time.perf_counter() - started) * 1000
                if elapsed_ms > limit:
                    logger.warning("Slow call %s took %.1fms (%s, limit %dms)", name, elapsed_ms, outcome, limit)
                else:
                    logger.debug("%s took %.1fms (%s)", name, elapsed_ms, outcome)

        return wrapper

    return decorator
