"""ActiveArea and ActiveAreaTag ORM models: organisational scopes."""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from civic_events.database import Base


class ActiveArea(Base):
    __tablename__ = "active_areas"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    tags = relationship("ActiveAreaTag", back_populates="active_area", cascade="all, delete-orphan")


class ActiveAreaTag(Base):
    __tablename__ = "active_area_tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    active_area_id = Column(Integer, ForeignKey("active_areas.id"), nullable=False)
    name = Column(String(255), nullable=False)

    active_area = relationship("ActiveArea", back_populates="tags")
