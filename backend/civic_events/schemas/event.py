"""Pydantic schemas for Events."""
from __future__ import annotations
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field

from civic_events.models.event import EventCategory, EventProgress, EventStatus


class NestedAttributes(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    destroy: bool = Field(False, alias="_destroy")


class EventSdgAttributes(NestedAttributes):
    sdg_id: Optional[int] = None


class EventImageAttributes(NestedAttributes):
    image: Optional[str] = None
    position: Optional[int] = None


class EventPointExchangeAttributes(NestedAttributes):
    name: Optional[str] = None
    point: Optional[int] = None
    user_id: Optional[str] = None


class EventAttributes(BaseModel):
    """Partial attribute set for create and update; unset fields are left alone."""

    name: Optional[str] = None
    content: Optional[str] = None
    status: Optional[EventStatus] = None
    progress: Optional[EventProgress] = None
    category: Optional[EventCategory] = None
    calendar_start_date: Optional[datetime] = None
    map_start_date: Optional[datetime] = None
    display_end_date: Optional[datetime] = None
    qr_start_datetime: Optional[datetime] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    address: Optional[str] = None
    town: Optional[str] = None
    post_code: Optional[str] = None
    access: Optional[str] = None
    active_area_id: Optional[int] = None
    prefecture_id: Optional[int] = None
    city_id: Optional[int] = None
    event_tag: Optional[int] = None
    pdf_info: Optional[str] = None
    manager: Optional[str] = None
    sponsor: Optional[str] = None
    application: Optional[str] = None
    url: Optional[str] = None
    note: Optional[str] = None
    period: Optional[str] = None
    period_note: Optional[str] = None
    inquiry_email: Optional[str] = None
    inquiry_phone_number: Optional[str] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    twitter: Optional[str] = None
    line: Optional[str] = None
    sdgs_content: Optional[str] = None
    water_station: Optional[bool] = None

    event_sdgs_attributes: Optional[list[EventSdgAttributes]] = None
    event_images_attributes: Optional[list[EventImageAttributes]] = None
    event_point_exchanges_attributes: Optional[list[EventPointExchangeAttributes]] = None

    def to_attributes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, by_alias=True)


class TagOut(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class EventImageOut(BaseModel):
    id: int
    image: str
    image_url: Optional[str] = None
    position: int

    model_config = {"from_attributes": True}


class EventSdgOut(BaseModel):
    id: int
    sdg_id: int

    model_config = {"from_attributes": True}


class EventOut(BaseModel):
    id: int
    name: Optional[str] = None
    content: Optional[str] = None
    status: EventStatus
    progress: EventProgress
    category: EventCategory
    calendar_start_date: Optional[datetime] = None
    map_start_date: Optional[datetime] = None
    display_end_date: Optional[datetime] = None
    qr_start_datetime: Optional[datetime] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    address: Optional[str] = None
    town: Optional[str] = None
    active_area_id: Optional[int] = None
    user_id: Optional[str] = None
    prefecture_id: Optional[int] = None
    city_id: Optional[int] = None
    point: int
    water_station: bool
    pdf_info_url: Optional[str] = None
    tag: Optional[TagOut] = None
    event_images: list[EventImageOut] = []
    event_sdgs: list[EventSdgOut] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class EventPage(BaseModel):
    items: list[EventOut]
    total: int
    page: int
    per_page: int


class AggregateRequest(BaseModel):
    where: Optional[dict[str, Any]] = None
    column: Optional[str] = None
    direction: Optional[str] = None
    page: int = Field(1, ge=1)
    per_page: Optional[int] = Field(None, ge=1)


class LocationSearchRequest(AggregateRequest):
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    year: Optional[int] = Field(None, ge=1)
    month: Optional[int] = Field(None, ge=1, le=12)


class ReportRequest(BaseModel):
    where: Optional[dict[str, Any]] = None
    column: Optional[str] = None
    direction: Optional[str] = None


class TopEventRequest(BaseModel):
    where: Optional[dict[str, Any]] = None


class TopEventOut(BaseModel):
    id: int
    name: Optional[str] = None
    address: Optional[str] = None
    check_in_count: int
