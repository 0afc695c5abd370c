"""EventImage ORM model."""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from civic_events.database import Base
from civic_events.storage import resolve_asset_url


class EventImage(Base):
    __tablename__ = "event_images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    image = Column(String(500), nullable=False)  # storage key
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    event = relationship("Event", back_populates="event_images")

    @property
    def image_url(self):
        return resolve_asset_url(self.image)
