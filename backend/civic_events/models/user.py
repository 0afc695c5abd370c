"""User ORM model: the requester behind admin and client calls."""
import enum
import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Enum as SAEnum
from sqlalchemy.sql import func

from civic_events.database import Base


class UserRole(str, enum.Enum):
    admin = "admin"
    general = "general"


class User(Base):
    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    display_name = Column(String(100), nullable=False)
    role = Column(SAEnum(UserRole), nullable=False, default=UserRole.general)
    permission_code = Column(String(50), nullable=True)  # e.g. AD_EVT
    active_area_id = Column(Integer, ForeignKey("active_areas.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin
