"""Shared FastAPI dependencies."""
from fastapi import Depends, Query
from sqlalchemy.orm import Session

from civic_events.database import get_db
from civic_events.errors import NotFoundError
from civic_events.models.user import User


def get_actor(
    actor_user_id: str = Query(..., description="ID of the user performing the request"),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the requesting user; token handling lives in front of this service."""
    user = db.get(User, actor_user_id)
    if user is None:
        raise NotFoundError("user")
    return user
