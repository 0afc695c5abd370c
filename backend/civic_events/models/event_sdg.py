"""Sdg and EventSdg ORM models: sustainability-goal tags on events."""
from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from civic_events.database import Base


class Sdg(Base):
    __tablename__ = "sdgs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(20), nullable=False, unique=True)
    name = Column(String(255), nullable=False)


class EventSdg(Base):
    __tablename__ = "event_sdgs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    sdg_id = Column(Integer, ForeignKey("sdgs.id"), nullable=False)

    event = relationship("Event", back_populates="event_sdgs")
    sdg = relationship("Sdg")
