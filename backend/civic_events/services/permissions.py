"""Single-record access rules for admin and public client lookups."""
import logging

from sqlalchemy import and_
from sqlalchemy.orm import Session

from civic_events.errors import ClientEventError, NotFoundError, PermissionDeniedError
from civic_events.models.event import Event, EventProgress, EventStatus
from civic_events.models.user import User

logger = logging.getLogger(__name__)

ADMIN_EVENT = "AD_EVT"
ADMIN_DELEGATE_SUPPORT_EVENT = "AD_DLC_SPT_EVT"
AREA_RESTRICTED_PERMISSIONS = frozenset({ADMIN_EVENT, ADMIN_DELEGATE_SUPPORT_EVENT})


def is_area_restricted(requester: User) -> bool:
    """Admins holding an event permission code only see their own active area."""
    return requester.is_admin and requester.permission_code in AREA_RESTRICTED_PERMISSIONS


def can_access(requester: User, event: Event) -> bool:
    if not is_area_restricted(requester):
        return True
    return event.active_area_id == requester.active_area_id


def find_event(db: Session, requester: User, event_id: int) -> Event:
    """Admin lookup with the active-area permission gate."""
    event = db.get(Event, event_id)
    if event is None:
        raise NotFoundError("event")
    if not can_access(requester, event):
        logger.info(
            "Denied event %s (area %s) to user %s (area %s)",
            event_id, event.active_area_id, requester.user_id, requester.active_area_id,
        )
        raise PermissionDeniedError("event")
    return event


def client_visible_clause():
    """What the public client may see: active and published events."""
    return and_(Event.status == EventStatus.active, Event.progress == EventProgress.published)


def find_client_event(db: Session, event_id: int) -> Event:
    """Public lookup; only active, published events, with no hint why otherwise."""
    event = db.query(Event).filter(Event.id == event_id, client_visible_clause()).first()
    if event is None:
        raise ClientEventError()
    return event
