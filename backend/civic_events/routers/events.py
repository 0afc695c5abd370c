"""Admin event routes: delegate to the service layer for every rule."""
import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from civic_events.database import get_db
from civic_events.deps import get_actor
from civic_events.models.user import User
from civic_events.schemas.event import (
    AggregateRequest,
    EventAttributes,
    EventOut,
    EventPage,
    ReportRequest,
    TopEventOut,
    TopEventRequest,
)
from civic_events.schemas.summary import AddPointOut, AddPointRequest, SummaryOut, SummaryRequest
from civic_events.services import aggregation_service, event_service, permissions, point_service, report_service
from civic_events.services.point_service import PointQueue, get_point_queue

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(payload: EventAttributes, actor: User = Depends(get_actor), db: Session = Depends(get_db)):
    """Create an event with its nested SDG links, images and exchanges."""
    attributes = payload.to_attributes()
    attributes.setdefault("user_id", actor.user_id)
    return event_service.save_event(db, attributes)


@router.post("/aggregate", response_model=EventPage)
def aggregate_events(payload: AggregateRequest, actor: User = Depends(get_actor), db: Session = Depends(get_db)):
    """Filtered, sorted and paged event collection."""
    return aggregation_service.aggregate(
        db,
        where=payload.where,
        column=payload.column,
        direction=payload.direction,
        page=payload.page,
        per_page=payload.per_page,
    )


@router.post("/summary", response_model=SummaryOut)
def summarize_events(payload: SummaryRequest, actor: User = Depends(get_actor), db: Session = Depends(get_db)):
    """Counts and charts for one active area."""
    return aggregation_service.summarize(
        db,
        active_area_id=payload.active_area_id,
        bucket=payload.bucket,
        start_date=payload.start_date,
        end_date=payload.end_date,
        where=payload.where,
    )


@router.post("/top", response_model=list[TopEventOut])
def top_events(payload: TopEventRequest, actor: User = Depends(get_actor), db: Session = Depends(get_db)):
    return aggregation_service.top_event(db, where=payload.where)


@router.post("/report")
def general_report(payload: ReportRequest, actor: User = Depends(get_actor), db: Session = Depends(get_db)):
    """General CSV report of events matching the filter."""
    body = report_service.general_report(db, where=payload.where, column=payload.column, direction=payload.direction)
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="events.csv"'},
    )


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: int, actor: User = Depends(get_actor), db: Session = Depends(get_db)):
    """Fetch one event; area-restricted admins only see their own area."""
    return permissions.find_event(db, actor, event_id)


@router.put("/{event_id}", response_model=EventOut)
def save_event(
    event_id: int,
    payload: EventAttributes,
    actor: User = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """Save an existing event, checking nested relation ownership first."""
    event = permissions.find_event(db, actor, event_id)
    return event_service.save_event(db, payload.to_attributes(), event=event)


@router.patch("/{event_id}", response_model=EventOut)
def update_event(
    event_id: int,
    payload: EventAttributes,
    actor: User = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """Partial update; validation is skipped while the event is a draft."""
    event = permissions.find_event(db, actor, event_id)
    return event_service.update_event(db, event, payload.to_attributes())


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: int, actor: User = Depends(get_actor), db: Session = Depends(get_db)):
    event = permissions.find_event(db, actor, event_id)
    event_service.destroy_event(db, event)


@router.post("/{event_id}/points", response_model=AddPointOut, status_code=status.HTTP_202_ACCEPTED)
async def add_point(
    event_id: int,
    payload: AddPointRequest,
    actor: User = Depends(get_actor),
    queue: PointQueue = Depends(get_point_queue),
):
    """Queue a point award; the total updates once the worker runs."""
    return await point_service.add_point(
        queue,
        event_id=event_id,
        active_area_id=payload.active_area_id,
        point=payload.point,
        request_id=payload.request_id,
    )
