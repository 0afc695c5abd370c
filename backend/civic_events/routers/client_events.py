"""Public client event routes: published events only."""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from civic_events.database import get_db
from civic_events.schemas.event import EventOut, EventPage, LocationSearchRequest
from civic_events.services import aggregation_service, permissions

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/{event_id}", response_model=EventOut)
def get_client_event(event_id: int, db: Session = Depends(get_db)):
    return permissions.find_client_event(db, event_id)


@router.post("/search", response_model=EventPage)
def search_events(payload: LocationSearchRequest, db: Session = Depends(get_db)):
    """Map listing: nearby events, a month's events, or what is on display now."""
    return aggregation_service.aggregate_by_location(
        db,
        where=payload.where,
        lat=payload.lat,
        lng=payload.lng,
        year=payload.year,
        month=payload.month,
        column=payload.column,
        direction=payload.direction,
        page=payload.page,
        per_page=payload.per_page,
        published_only=True,
    )
