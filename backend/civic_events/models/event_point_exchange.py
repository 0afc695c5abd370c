"""EventPointExchange ORM model: redemption of points against an event."""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from civic_events.database import Base


class EventPointExchange(Base):
    __tablename__ = "event_point_exchanges"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    name = Column(String(255), nullable=True)
    point = Column(Integer, nullable=False, default=0)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    event = relationship("Event", back_populates="event_point_exchanges")
