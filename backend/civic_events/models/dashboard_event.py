"""DashboardEvent ORM model: per-active-area point rollup for one event."""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from civic_events.database import Base


class DashboardEvent(Base):
    __tablename__ = "dashboard_events"
    __table_args__ = (UniqueConstraint("event_id", "active_area_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False)
    active_area_id = Column(Integer, ForeignKey("active_areas.id"), nullable=False)
    total_point = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    event = relationship("Event", back_populates="dashboard_events")
