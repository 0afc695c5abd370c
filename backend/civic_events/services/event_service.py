"""Event write path: save, update and destroy.

Responsibilities:
- Nested relation payloads are checked against the rows the event owns
  before anything is touched (``save``)
- Record validation runs unless the resulting progress is draft
- Publishing (on create or by a progress change) records exactly one
  ledger transaction after commit
- Destroying an event removes every owned row with it
"""
import enum
import logging
from datetime import datetime
from typing import Any, Mapping, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from civic_events.errors import EventValidationError, RelationValidationError
from civic_events.models.event import Event, EventCategory, EventProgress, EventStatus
from civic_events.models.event_image import EventImage
from civic_events.models.event_point_exchange import EventPointExchange
from civic_events.models.event_sdg import EventSdg
from civic_events.services.profiler import profile_and_notify
from civic_events.services.relation_validator import RelationValidator, owned_ids_for
from civic_events.services.time_window import as_utc
from civic_events.services.transaction_service import (
    LedgerTransactionRecorder,
    TransactionRecorder,
    record_publication,
)

logger = logging.getLogger(__name__)

# relation name -> (model, writable columns, columns a new row must carry)
NESTED_RELATIONS: dict[str, tuple[type, tuple[str, ...], tuple[str, ...]]] = {
    "event_sdgs": (EventSdg, ("sdg_id",), ("sdg_id",)),
    "event_images": (EventImage, ("image", "position"), ("image",)),
    "event_point_exchanges": (EventPointExchange, ("name", "point", "user_id"), ()),
}
CHECKED_RELATIONS = ("event_sdgs", "event_images")

_ENUM_FIELDS: dict[str, type[enum.Enum]] = {
    "status": EventStatus,
    "progress": EventProgress,
    "category": EventCategory,
}
_DATETIME_FIELDS = ("calendar_start_date", "map_start_date", "display_end_date", "qr_start_datetime")
_PROTECTED_FIELDS = ("id", "created_at", "updated_at")
_REQUIRED_FIELDS = ("name", "active_area_id", "calendar_start_date")


def _coerce_value(field: str, value: Any) -> Any:
    if value is None:
        return None
    if field in _ENUM_FIELDS:
        return _ENUM_FIELDS[field](value)
    if field in _DATETIME_FIELDS and isinstance(value, datetime):
        return as_utc(value)
    return value


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_destroy(item: Mapping[str, Any]) -> bool:
    flag = item.get("_destroy", item.get("destroy", False))
    return str(flag).lower() in ("true", "1") if not isinstance(flag, bool) else flag


def _apply_nested(db: Session, event: Event, relation_name: str, payload: list[Mapping[str, Any]]) -> None:
    """Create rows without ``id``, update owned rows, drop rows flagged ``_destroy``."""
    model, columns, required = NESTED_RELATIONS[relation_name]
    collection = getattr(event, relation_name)
    owned = {row.id: row for row in collection}

    for item in payload:
        item_id = item.get("id")
        values = {col: item[col] for col in columns if col in item}
        if item_id is None:
            if not _is_destroy(item):
                missing = [col for col in required if _is_blank(values.get(col))]
                if missing:
                    raise EventValidationError(
                        [{"field": f"{relation_name}.{col}", "message": "can't be blank"} for col in missing]
                    )
                collection.append(model(**values))
            continue

        row = owned.get(int(item_id))
        if row is None:
            raise RelationValidationError(relation_name)
        if _is_destroy(item):
            collection.remove(row)
        else:
            for col, value in values.items():
                setattr(row, col, value)


def _assign(db: Session, event: Event, attributes: Mapping[str, Any]) -> None:
    for field, value in attributes.items():
        if field.endswith("_attributes"):
            relation_name = field[: -len("_attributes")]
            if relation_name in NESTED_RELATIONS and value:
                _apply_nested(db, event, relation_name, value)
            continue
        if field in _PROTECTED_FIELDS or not hasattr(Event, field):
            continue
        setattr(event, field, _coerce_value(field, value))


def _apply_defaults(event: Event) -> None:
    """Column defaults only land at flush; validation needs them before."""
    if event.status is None:
        event.status = EventStatus.active
    if event.progress is None:
        event.progress = EventProgress.published
    if event.category is None:
        event.category = EventCategory.education
    if event.point is None:
        event.point = 0
    if event.water_station is None:
        event.water_station = False


def validate_event(event: Event) -> list[dict[str, str]]:
    """Field errors for a non-draft event; empty when valid."""
    errors = []
    for field in _REQUIRED_FIELDS:
        value = getattr(event, field)
        if value is None or (isinstance(value, str) and not value.strip()):
            errors.append({"field": field, "message": "can't be blank"})
    if event.name and len(event.name) > 255:
        errors.append({"field": "name", "message": "is too long (maximum is 255 characters)"})
    if event.lat is not None and not -90 <= float(event.lat) <= 90:
        errors.append({"field": "lat", "message": "must be between -90 and 90"})
    if event.lng is not None and not -180 <= float(event.lng) <= 180:
        errors.append({"field": "lng", "message": "must be between -180 and 180"})
    if event.point is not None and event.point < 0:
        errors.append({"field": "point", "message": "must be greater than or equal to 0"})
    return errors


def save_event(
    db: Session,
    attributes: Mapping[str, Any],
    event: Optional[Event] = None,
    recorder: Optional[TransactionRecorder] = None,
) -> Event:
    """Save an event with its nested relations after checking relation ownership."""
    event = event if event is not None else Event()
    RelationValidator(owned_ids_for(event)).validate(attributes, CHECKED_RELATIONS)
    return update_event(db, event, attributes, recorder=recorder)


@profile_and_notify("event.update")
def update_event(
    db: Session,
    event: Event,
    attributes: Mapping[str, Any],
    recorder: Optional[TransactionRecorder] = None,
) -> Event:
    """Merge attributes onto the event and persist; drafts skip validation."""
    created = event.id is None
    previous_progress = None if created else event.progress

    try:
        _assign(db, event, attributes)
    except (RelationValidationError, EventValidationError):
        db.rollback()
        raise
    _apply_defaults(event)

    if event.progress != EventProgress.draft:
        errors = validate_event(event)
        if errors:
            db.rollback()
            raise EventValidationError(errors)

    db.add(event)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Rejected event save: %s", exc.orig)
        raise EventValidationError([{"field": "base", "message": "references a missing or invalid record"}]) from exc
    db.refresh(event)
    if created:
        logger.info("Created event %s (%s) in area %s", event.id, event.progress.value, event.active_area_id)
    else:
        logger.info("Updated event %s (%s)", event.id, event.progress.value)

    record_publication(
        recorder or LedgerTransactionRecorder(db),
        event,
        previous=previous_progress,
        current=event.progress,
        created=created,
    )
    return event


def destroy_event(db: Session, event: Event) -> None:
    """Delete the event; owned relations go with it."""
    event_id = event.id
    db.delete(event)
    db.commit()
    logger.info("Destroyed event %s", event_id)
