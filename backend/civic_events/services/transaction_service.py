"""Ledger of published events.

The write path calls ``record_publication`` after a successful commit with
the progress values from before and after the save; the recorder is
injected so callers and tests can swap the ledger out.
"""
import logging
from typing import Any, Optional, Protocol

from sqlalchemy.orm import Session

from civic_events.models.event import Event, EventProgress
from civic_events.models.transaction import Transaction

logger = logging.getLogger(__name__)


class TransactionRecorder(Protocol):
    def record(self, actor_user_id: Optional[str], entity_type: str, entity: Event) -> Any:
        ...


def event_snapshot(event: Event) -> dict[str, Any]:
    """Serialize an event to a JSON-safe dict for the ledger."""
    return {
        "id": event.id,
        "name": event.name,
        "status": event.status.value if event.status else None,
        "progress": event.progress.value if event.progress else None,
        "category": event.category.value if event.category else None,
        "active_area_id": event.active_area_id,
        "point": event.point,
        "calendar_start_date": event.calendar_start_date.isoformat() if event.calendar_start_date else None,
    }


class LedgerTransactionRecorder:
    """Writes one ``Transaction`` row per call."""

    def __init__(self, db: Session):
        self.db = db

    def record(self, actor_user_id: Optional[str], entity_type: str, entity: Event) -> Transaction:
        transaction = Transaction(
            event_id=entity.id,
            actor_user_id=actor_user_id,
            entity_type=entity_type,
            snapshot=event_snapshot(entity),
        )
        self.db.add(transaction)
        self.db.commit()
        logger.info("Recorded %s transaction %s for event %s", entity_type, transaction.transaction_id, entity.id)
        return transaction


def became_published(
    previous: Optional[EventProgress],
    current: Optional[EventProgress],
    created: bool,
) -> bool:
    """True for a new record saved as published or a change into published."""
    if current != EventProgress.published:
        return False
    return created or previous != EventProgress.published


def record_publication(
    recorder: TransactionRecorder,
    event: Event,
    previous: Optional[EventProgress],
    current: Optional[EventProgress],
    created: bool,
) -> bool:
    """Post-commit hook; returns whether a transaction was recorded."""
    if not became_published(previous, current, created):
        return False
    recorder.record(None, Event.__name__, event)
    return True
