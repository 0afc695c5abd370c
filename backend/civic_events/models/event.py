"""Event ORM model: the record the access and aggregation engine works over."""
import enum
from sqlalchemy import (
    Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Text, Enum as SAEnum,
)
from sqlalchemy.orm import object_session, relationship
from sqlalchemy.sql import func

from civic_events.database import Base
from civic_events.storage import resolve_asset_url


class EventStatus(str, enum.Enum):
    inactive = "inactive"
    active = "active"


class EventCategory(str, enum.Enum):
    education = "education"
    festival = "festival"
    sport = "sport"
    culture = "culture"
    health = "health"
    consultation = "consultation"
    other = "other"


class EventProgress(str, enum.Enum):
    draft = "draft"
    published = "published"
    closed = "closed"


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=True)
    content = Column(Text, nullable=True)
    status = Column(SAEnum(EventStatus), nullable=False, default=EventStatus.active)
    progress = Column(SAEnum(EventProgress), nullable=False, default=EventProgress.published)
    category = Column(SAEnum(EventCategory), nullable=False, default=EventCategory.education)

    # Independent windows: map display vs QR check-in availability
    calendar_start_date = Column(DateTime(timezone=True), nullable=True)
    map_start_date = Column(DateTime(timezone=True), nullable=True)
    display_end_date = Column(DateTime(timezone=True), nullable=True)
    qr_start_datetime = Column(DateTime(timezone=True), nullable=True)

    lat = Column(Numeric(10, 7, asdecimal=False), nullable=True)
    lng = Column(Numeric(10, 7, asdecimal=False), nullable=True)
    address = Column(String(255), nullable=True)
    town = Column(Text, nullable=True)
    post_code = Column(String(255), nullable=True)
    access = Column(Text, nullable=True)

    active_area_id = Column(Integer, ForeignKey("active_areas.id"), nullable=True, index=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=True, index=True)
    prefecture_id = Column(Integer, nullable=True)
    city_id = Column(Integer, nullable=True)

    point = Column(Integer, nullable=False, default=0)
    event_tag = Column(Integer, nullable=True)
    pdf_info = Column(String(500), nullable=True)

    manager = Column(String(255), nullable=True)
    sponsor = Column(Text, nullable=True)
    application = Column(String(255), nullable=True)
    url = Column(String(255), nullable=True)
    note = Column(Text, nullable=True)
    period = Column(String(255), nullable=True)
    period_note = Column(String(255), nullable=True)
    inquiry_email = Column(String(255), nullable=True)
    inquiry_phone_number = Column(String(255), nullable=True)
    facebook = Column(String(255), nullable=True)
    instagram = Column(String(255), nullable=True)
    twitter = Column(String(255), nullable=True)
    line = Column(String(255), nullable=True)
    sdgs_content = Column(String(400), nullable=True)
    water_station = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    active_area = relationship("ActiveArea")
    event_images = relationship(
        "EventImage", back_populates="event", cascade="all, delete-orphan", order_by="EventImage.position",
    )
    event_checkins = relationship("EventCheckin", back_populates="event", cascade="all, delete-orphan")
    event_sdgs = relationship("EventSdg", back_populates="event", cascade="all, delete-orphan")
    event_point_exchanges = relationship(
        "EventPointExchange", back_populates="event", cascade="all, delete-orphan",
    )
    activity_logs = relationship("ActivityLog", back_populates="event", cascade="all, delete-orphan")
    qr_codes = relationship("QrCode", back_populates="event", cascade="all, delete-orphan")
    dashboard_events = relationship("DashboardEvent", back_populates="event", cascade="all, delete-orphan")
    transactions = relationship("Transaction", back_populates="event", cascade="all, delete-orphan")

    @property
    def pdf_info_url(self):
        return resolve_asset_url(self.pdf_info)

    @property
    def tag(self):
        """Area tag referenced by ``event_tag``, resolved on every read."""
        if self.event_tag is None:
            return None
        session = object_session(self)
        if session is None:
            return None
        from civic_events.models.active_area import ActiveAreaTag

        return session.get(ActiveAreaTag, self.event_tag)
