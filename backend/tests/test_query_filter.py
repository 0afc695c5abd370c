"""Tests for the filter/sort expression parser and compiler."""
import pytest

from civic_events.errors import QueryConstructionError
from civic_events.models.event import Event, EventCategory
from civic_events.models.event_sdg import EventSdg, Sdg
from civic_events.services.query_filter import (
    Combinator,
    Operator,
    SortDirection,
    compile_filter,
    parse_filter,
    parse_sort,
)
from tests.conftest import create_area, create_event, utc


def _names(db, where):
    return sorted(e.name for e in db.query(Event).filter(compile_filter(parse_filter(where))))


class TestParseFilter:
    def test_splits_field_and_operator(self):
        group = parse_filter({"active_area_id_eq": "3", "name_cont": "run"})
        by_field = {c.field.name: c for c in group.conditions}
        assert by_field["active_area_id"].operator == Operator.eq
        assert by_field["active_area_id"].value == 3
        assert by_field["name"].operator == Operator.cont

    def test_longest_operator_suffix_wins(self):
        group = parse_filter({"point_not_eq": 0, "lat_not_null": True})
        ops = {c.field.name: c.operator for c in group.conditions}
        assert ops == {"point": Operator.not_eq, "lat": Operator.not_null}

    def test_enum_values_by_name(self):
        group = parse_filter({"category_in": ["sport", "health"]})
        assert group.conditions[0].value == [EventCategory.sport, EventCategory.health]

    def test_blank_values_skipped(self):
        group = parse_filter({"name_cont": "", "category_in": [], "point_eq": None})
        assert group.is_empty()

    def test_groups_and_combinator(self):
        group = parse_filter({"m": "or", "g": [{"point_gt": 1}, {"name_eq": "a"}]})
        assert group.combinator == Combinator.or_
        assert len(group.groups) == 2

    def test_unknown_field_rejected(self):
        with pytest.raises(QueryConstructionError):
            parse_filter({"password_eq": "x"})

    def test_unknown_operator_rejected(self):
        with pytest.raises(QueryConstructionError):
            parse_filter({"name_matches": "x; drop table events"})

    def test_bad_value_rejected(self):
        with pytest.raises(QueryConstructionError):
            parse_filter({"point_gt": "lots"})
        with pytest.raises(QueryConstructionError):
            parse_filter({"status_eq": "deleted"})

    def test_text_operator_on_number_rejected(self):
        with pytest.raises(QueryConstructionError):
            parse_filter({"point_cont": "1"})

    def test_bad_combinator_rejected(self):
        with pytest.raises(QueryConstructionError):
            parse_filter({"m": "xor"})


class TestParseSort:
    def test_defaults(self):
        sort = parse_sort(None, None)
        assert sort.field.name == "id"
        assert sort.direction == SortDirection.asc

    def test_direction_case_insensitive(self):
        assert parse_sort("calendar_start_date", "DESC").direction == SortDirection.desc

    def test_unknown_column_rejected(self):
        with pytest.raises(QueryConstructionError):
            parse_sort("name; drop table events", "asc")

    def test_association_not_sortable(self):
        with pytest.raises(QueryConstructionError):
            parse_sort("sdg_id", "asc")

    def test_bad_direction_rejected(self):
        with pytest.raises(QueryConstructionError):
            parse_sort("id", "sideways")


class TestCompileFilter:
    def test_empty_matches_all(self, db):
        create_event(db, name="a")
        create_event(db, name="b")
        assert _names(db, None) == ["a", "b"]

    def test_and_conditions(self, db):
        area = create_area(db)
        create_event(db, name="Fun Run", active_area_id=area.id, category=EventCategory.sport)
        create_event(db, name="Fun Fair", active_area_id=area.id, category=EventCategory.festival)
        create_event(db, name="Fun Run 2", category=EventCategory.sport)
        assert _names(db, {"active_area_id_eq": area.id, "category_eq": "sport"}) == ["Fun Run"]

    def test_or_group(self, db):
        create_event(db, name="a", point=1)
        create_event(db, name="b", point=5)
        create_event(db, name="c", point=10)
        assert _names(db, {"m": "or", "point_lt": 2, "point_gteq": 10}) == ["a", "c"]

    def test_text_operators_escape_wildcards(self, db):
        create_event(db, name="100% fun")
        create_event(db, name="1000 fun")
        assert _names(db, {"name_cont": "0%"}) == ["100% fun"]
        assert _names(db, {"name_start": "100"}) == ["100% fun", "1000 fun"]
        assert _names(db, {"name_end": "% fun"}) == ["100% fun"]

    def test_datetime_range(self, db):
        create_event(db, name="jan", calendar_start_date=utc(2024, 1, 5))
        create_event(db, name="mar", calendar_start_date=utc(2024, 3, 5))
        where = {"calendar_start_date_gteq": "2024-02-01T00:00:00Z", "calendar_start_date_lt": "2024-04-01"}
        assert _names(db, where) == ["mar"]

    def test_null_operator(self, db):
        create_event(db, name="placed", lat=35.0, lng=139.0)
        create_event(db, name="unplaced")
        assert _names(db, {"lat_null": True}) == ["unplaced"]
        assert _names(db, {"lat_not_null": True}) == ["placed"]

    def test_sdg_association(self, db):
        sdg = Sdg(code="SDG13", name="Climate action")
        db.add(sdg)
        db.commit()
        linked = create_event(db, name="linked")
        create_event(db, name="plain")
        db.add(EventSdg(event_id=linked.id, sdg_id=sdg.id))
        db.commit()
        assert _names(db, {"sdg_id_in": [sdg.id]}) == ["linked"]
