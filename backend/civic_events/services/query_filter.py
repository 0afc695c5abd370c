"""Typed filter/sort expressions built from caller-supplied JSON.

Callers send ransack-style predicates such as ``{"name_cont": "run",
"active_area_id_eq": 3}``. ``parse_filter`` turns them into a small tree of
``Condition`` / ``FilterGroup`` nodes after checking every field and
operator against an allow-list; ``compile_filter`` then builds the
SQLAlchemy clause. Column names never reach SQL as raw text.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Optional

from sqlalchemy import and_, or_, true

from civic_events.errors import QueryConstructionError
from civic_events.models.event import Event, EventCategory, EventProgress, EventStatus
from civic_events.models.event_sdg import EventSdg
from civic_events.services.time_window import as_utc


class Operator(str, enum.Enum):
    eq = "eq"
    not_eq = "not_eq"
    in_ = "in"
    not_in = "not_in"
    lt = "lt"
    lteq = "lteq"
    gt = "gt"
    gteq = "gteq"
    cont = "cont"
    start = "start"
    end = "end"
    null = "null"
    not_null = "not_null"


# Longest suffixes first so "not_eq" wins over "eq"
_OPERATOR_SUFFIXES = sorted(Operator, key=lambda op: len(op.value), reverse=True)

_LIST_OPERATORS = {Operator.in_, Operator.not_in}
_TEXT_OPERATORS = {Operator.cont, Operator.start, Operator.end}
_FLAG_OPERATORS = {Operator.null, Operator.not_null}


class Combinator(str, enum.Enum):
    and_ = "and"
    or_ = "or"


class SortDirection(str, enum.Enum):
    asc = "asc"
    desc = "desc"


@dataclass(frozen=True)
class FieldSpec:
    """How a filterable field maps onto the Event query."""

    name: str
    kind: str  # "int" | "float" | "str" | "bool" | "datetime" | "enum"
    column: Any = None
    enum_type: Optional[type[enum.Enum]] = None
    # Association fields compile to EXISTS over a related table
    association: Optional[Callable[[Any], Any]] = None
    sortable: bool = True


@dataclass(frozen=True)
class Condition:
    field: FieldSpec
    operator: Operator
    value: Any


@dataclass
class FilterGroup:
    combinator: Combinator = Combinator.and_
    conditions: list[Condition] = field(default_factory=list)
    groups: list[FilterGroup] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.conditions and all(g.is_empty() for g in self.groups)


@dataclass(frozen=True)
class SortSpec:
    field: FieldSpec
    direction: SortDirection


def _event_fields() -> dict[str, FieldSpec]:
    int_cols = ["id", "active_area_id", "prefecture_id", "city_id", "point", "event_tag"]
    str_cols = [
        "name", "content", "address", "town", "post_code", "manager", "sponsor",
        "period", "user_id", "inquiry_email", "url",
    ]
    dt_cols = [
        "calendar_start_date", "map_start_date", "display_end_date", "qr_start_datetime",
        "created_at", "updated_at",
    ]
    fields: dict[str, FieldSpec] = {}
    for name in int_cols:
        fields[name] = FieldSpec(name, "int", getattr(Event, name))
    for name in str_cols:
        fields[name] = FieldSpec(name, "str", getattr(Event, name))
    for name in dt_cols:
        fields[name] = FieldSpec(name, "datetime", getattr(Event, name))
    fields["lat"] = FieldSpec("lat", "float", Event.lat)
    fields["lng"] = FieldSpec("lng", "float", Event.lng)
    fields["water_station"] = FieldSpec("water_station", "bool", Event.water_station)
    fields["status"] = FieldSpec("status", "enum", Event.status, EventStatus)
    fields["progress"] = FieldSpec("progress", "enum", Event.progress, EventProgress)
    fields["category"] = FieldSpec("category", "enum", Event.category, EventCategory)
    fields["sdg_id"] = FieldSpec(
        "sdg_id", "int", EventSdg.sdg_id,
        association=lambda clause: Event.event_sdgs.any(clause),
        sortable=False,
    )
    return fields


EVENT_FIELDS = _event_fields()


def _blank(value: Any) -> bool:
    return value is None or value == "" or (isinstance(value, (list, tuple)) and len(value) == 0)


def _split_key(key: str, fields: dict[str, FieldSpec]) -> tuple[FieldSpec, Operator]:
    for operator in _OPERATOR_SUFFIXES:
        suffix = f"_{operator.value}"
        if key.endswith(suffix):
            name = key[: -len(suffix)]
            if name in fields:
                return fields[name], operator
    raise QueryConstructionError(f"Unknown filter predicate '{key}'", key=key)


def _coerce_scalar(spec: FieldSpec, value: Any, key: str) -> Any:
    try:
        if spec.kind == "int":
            if isinstance(value, bool):
                raise ValueError("boolean is not an integer")
            return int(value)
        if spec.kind == "float":
            return float(value)
        if spec.kind == "bool":
            if isinstance(value, bool):
                return value
            if str(value).lower() in ("true", "1", "t"):
                return True
            if str(value).lower() in ("false", "0", "f"):
                return False
            raise ValueError(f"not a boolean: {value!r}")
        if spec.kind == "datetime":
            if isinstance(value, datetime):
                return as_utc(value)
            if isinstance(value, date):
                return as_utc(datetime(value.year, value.month, value.day))
            return as_utc(datetime.fromisoformat(str(value).replace("Z", "+00:00")))
        if spec.kind == "enum":
            if isinstance(value, spec.enum_type):
                return value
            return spec.enum_type[str(value)]
        return str(value)
    except (KeyError, TypeError, ValueError) as exc:
        raise QueryConstructionError(f"Invalid value for '{key}': {value!r}", key=key) from exc


def _coerce(spec: FieldSpec, operator: Operator, value: Any, key: str) -> Any:
    if operator in _FLAG_OPERATORS:
        return _coerce_scalar(FieldSpec(spec.name, "bool"), value, key)
    if operator in _LIST_OPERATORS:
        values = value if isinstance(value, (list, tuple)) else [value]
        return [_coerce_scalar(spec, v, key) for v in values]
    if operator in _TEXT_OPERATORS:
        if spec.kind != "str":
            raise QueryConstructionError(f"'{operator.value}' only applies to text fields", key=key)
        return str(value)
    return _coerce_scalar(spec, value, key)


def parse_filter(where: Optional[dict[str, Any]], fields: dict[str, FieldSpec] = EVENT_FIELDS) -> FilterGroup:
    """Parse a predicate mapping (with optional ``m``/``g`` grouping) into a FilterGroup."""
    if where is None:
        return FilterGroup()
    if not isinstance(where, dict):
        raise QueryConstructionError("Filter must be an object")

    raw_combinator = str(where.get("m", "and")).lower()
    try:
        combinator = Combinator(raw_combinator)
    except ValueError as exc:
        raise QueryConstructionError(f"Unknown combinator '{raw_combinator}'", key="m") from exc

    group = FilterGroup(combinator=combinator)
    for key, value in where.items():
        if key == "m":
            continue
        if key == "g":
            nested = value.values() if isinstance(value, dict) else value
            if not isinstance(nested, (list, tuple)) and not isinstance(value, dict):
                raise QueryConstructionError("'g' must be a list of groups", key="g")
            group.groups.extend(parse_filter(sub, fields) for sub in nested)
            continue
        if _blank(value):
            continue
        spec, operator = _split_key(key, fields)
        group.conditions.append(Condition(spec, operator, _coerce(spec, operator, value, key)))
    return group


def _compile_condition(condition: Condition):
    column = condition.field.column
    op = condition.operator
    value = condition.value

    if op == Operator.eq:
        clause = column == value
    elif op == Operator.not_eq:
        clause = column != value
    elif op == Operator.in_:
        clause = column.in_(value)
    elif op == Operator.not_in:
        clause = column.not_in(value)
    elif op == Operator.lt:
        clause = column < value
    elif op == Operator.lteq:
        clause = column <= value
    elif op == Operator.gt:
        clause = column > value
    elif op == Operator.gteq:
        clause = column >= value
    elif op == Operator.cont:
        clause = column.contains(value, autoescape=True)
    elif op == Operator.start:
        clause = column.startswith(value, autoescape=True)
    elif op == Operator.end:
        clause = column.endswith(value, autoescape=True)
    elif op == Operator.null:
        clause = column.is_(None) if value else column.is_not(None)
    elif op == Operator.not_null:
        clause = column.is_not(None) if value else column.is_(None)
    else:  # pragma: no cover - Operator is closed
        raise QueryConstructionError(f"Unsupported operator '{op.value}'")

    if condition.field.association is not None:
        return condition.field.association(clause)
    return clause


def compile_filter(group: FilterGroup):
    """Build a SQLAlchemy boolean clause; an empty group matches everything."""
    parts = [_compile_condition(c) for c in group.conditions]
    parts.extend(compile_filter(g) for g in group.groups if not g.is_empty())
    if not parts:
        return true()
    if group.combinator == Combinator.or_:
        return or_(*parts)
    return and_(*parts)


def parse_sort(
    column: Optional[str],
    direction: Optional[str],
    fields: dict[str, FieldSpec] = EVENT_FIELDS,
    default_column: str = "id",
    default_direction: str = "asc",
) -> SortSpec:
    name = column or default_column
    spec = fields.get(name)
    if spec is None or not spec.sortable:
        raise QueryConstructionError(f"Cannot sort by '{name}'", key="column")
    raw_direction = (direction or default_direction).lower()
    try:
        sort_direction = SortDirection(raw_direction)
    except ValueError as exc:
        raise QueryConstructionError(f"Unknown sort direction '{direction}'", key="direction") from exc
    return SortSpec(spec, sort_direction)


def order_by_clauses(sort: SortSpec) -> list:
    """ORDER BY terms with ``id`` appended so paging is deterministic."""
    column = sort.field.column
    primary = column.asc() if sort.direction == SortDirection.asc else column.desc()
    if sort.field.name == "id":
        return [primary]
    return [primary, Event.id.asc()]
