"""Pydantic schemas for summaries and point awards."""
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel

from civic_events.services.chart_service import ChartBucket


class SummaryRequest(BaseModel):
    active_area_id: int
    bucket: ChartBucket = ChartBucket.month
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    where: Optional[dict[str, Any]] = None


class ChartPoint(BaseModel):
    period: str
    count: int


class SummaryOut(BaseModel):
    new_event_count: int
    new_event_chart: list[ChartPoint]
    event_checkin_chart: list[ChartPoint]
    event_exchange_chart: list[ChartPoint]


class AddPointRequest(BaseModel):
    active_area_id: int
    point: int
    request_id: Optional[str] = None  # retries with the same id enqueue once


class AddPointOut(BaseModel):
    success: bool
