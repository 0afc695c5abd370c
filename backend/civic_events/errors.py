"""Domain errors raised by the service layer.

Each error is an ``HTTPException`` so FastAPI renders it without extra
handlers; the transport layer decides nothing about status codes.
"""
from typing import Any, Optional

from fastapi import HTTPException, status

OCCURRED_ERROR = "An error occurred"

RELATION_MESSAGES = {
    "event_sdgs": "SDG links must belong to this event",
    "event_images": "Images must belong to this event",
    "event_point_exchanges": "Point exchanges must belong to this event",
}


class NotFoundError(HTTPException):
    def __init__(self, resource: str = "event"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=f"{resource.capitalize()} not found")
        self.resource = resource


class ClientEventError(HTTPException):
    """Generic error for the public client path; never says why."""

    def __init__(self):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=OCCURRED_ERROR)


class PermissionDeniedError(HTTPException):
    def __init__(self, field_name: str = "event"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You do not have permission to access this {field_name}",
        )
        self.field_name = field_name


class RelationValidationError(HTTPException):
    def __init__(self, relation_name: str):
        message = RELATION_MESSAGES.get(relation_name, f"Invalid {relation_name} reference")
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"relation": relation_name, "message": message},
        )
        self.relation_name = relation_name


class EventValidationError(HTTPException):
    def __init__(self, errors: list[dict[str, Any]]):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": "Event is invalid", "errors": errors},
        )
        self.errors = errors


class QueryConstructionError(HTTPException):
    def __init__(self, message: str, key: Optional[str] = None):
        detail: dict[str, Any] = {"message": message}
        if key is not None:
            detail["key"] = key
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
        self.key = key
