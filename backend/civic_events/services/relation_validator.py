"""Checks nested-attribute payloads against the rows a record already owns."""
import logging
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from civic_events.errors import RelationValidationError

logger = logging.getLogger(__name__)

OwnedIdsLookup = Callable[[str], Iterable[Any]]


def payload_ids(payload: Optional[Sequence[Mapping[str, Any]]]) -> list[int]:
    """Non-null ``id`` values of a payload, as ints."""
    if not payload:
        return []
    return [int(item["id"]) for item in payload if item.get("id") is not None]


def has_foreign_ids(payload: Optional[Sequence[Mapping[str, Any]]], owned_ids: Iterable[Any]) -> bool:
    owned = {int(i) for i in owned_ids}
    return any(pid not in owned for pid in payload_ids(payload))


class RelationValidator:
    """Stateless validator; ``owned_ids`` maps a relation name to the ids it currently holds."""

    def __init__(self, owned_ids: OwnedIdsLookup):
        self._owned_ids = owned_ids

    def check(self, relation_name: str, payload: Optional[Sequence[Mapping[str, Any]]]) -> bool:
        """True when the payload only references rows the record owns."""
        if not payload:
            return True
        return not has_foreign_ids(payload, self._owned_ids(relation_name))

    def validate(self, attributes: Mapping[str, Any], relation_names: Sequence[str]) -> None:
        """Raise for the first relation (in the given order) with a foreign id."""
        for relation_name in relation_names:
            payload = attributes.get(f"{relation_name}_attributes")
            if not self.check(relation_name, payload):
                logger.info("Rejected %s payload referencing rows outside the record", relation_name)
                raise RelationValidationError(relation_name)


def owned_ids_for(record) -> OwnedIdsLookup:
    """Lookup over an ORM record's loaded relationships (empty for unsaved records)."""

    def _lookup(relation_name: str) -> list[int]:
        if record is None or record.id is None:
            return []
        return [row.id for row in getattr(record, relation_name)]

    return _lookup
