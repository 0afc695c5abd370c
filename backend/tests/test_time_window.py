"""Tests for map display and month window rules."""
import pytest

from civic_events.services.time_window import (
    is_in_month,
    is_map_displayable,
    map_display_clause,
    month_bounds,
    month_clause,
)
from civic_events.models.event import Event
from tests.conftest import create_event, utc


class TestMonthBounds:
    def test_regular_month(self):
        start, end = month_bounds(2024, 2)
        assert start == utc(2024, 2, 1)
        assert end == utc(2024, 2, 29, 23, 59, 59, 999999)

    def test_december(self):
        _, end = month_bounds(2023, 12)
        assert end == utc(2023, 12, 31, 23, 59, 59, 999999)

    def test_invalid_month(self):
        with pytest.raises(ValueError):
            month_bounds(2024, 13)


class TestMapDisplayable:
    def test_ended_event_hidden_after_end(self):
        """display_end 2024-01-10, no map start: hidden on 01-15, shown on 01-05."""
        end = utc(2024, 1, 10)
        assert is_map_displayable(None, end, utc(2024, 1, 15)) is False
        assert is_map_displayable(None, end, utc(2024, 1, 5)) is True

    def test_open_window(self):
        assert is_map_displayable(None, None, utc(2030, 1, 1)) is True

    def test_not_started(self):
        assert is_map_displayable(utc(2024, 3, 1), None, utc(2024, 2, 1)) is False

    def test_bounds_inclusive(self):
        now = utc(2024, 3, 1, 12)
        assert is_map_displayable(now, now, now) is True

    def test_naive_values_are_utc(self):
        from datetime import datetime
        assert is_map_displayable(datetime(2024, 1, 1), datetime(2024, 1, 10), utc(2024, 1, 5)) is True


class TestInMonth:
    def test_current_month_uses_now(self):
        now = utc(2024, 5, 15)
        # Ended on the 10th: overlaps May but is no longer live
        assert is_in_month(None, utc(2024, 5, 10), 2024, 5, now) is False
        assert is_in_month(None, utc(2024, 5, 20), 2024, 5, now) is True
        # QR opens later this month: not yet
        assert is_in_month(utc(2024, 5, 20), None, 2024, 5, now) is False

    def test_current_month_matches_baseline_shape(self):
        now = utc(2024, 5, 15)
        for qr_start, end in [(None, None), (utc(2024, 5, 1), utc(2024, 6, 1)), (utc(2024, 5, 16), None)]:
            assert is_in_month(qr_start, end, 2024, 5, now) == is_map_displayable(qr_start, end, now)

    def test_other_month_uses_month_bounds(self):
        now = utc(2024, 5, 15)
        # Ran 2024-03-10..2024-03-12: overlaps March
        assert is_in_month(utc(2024, 3, 10), utc(2024, 3, 12), 2024, 3, now) is True
        # Ended in February: no overlap with March
        assert is_in_month(utc(2024, 2, 1), utc(2024, 2, 20), 2024, 3, now) is False
        # Starts in April: no overlap with March
        assert is_in_month(utc(2024, 4, 1), None, 2024, 3, now) is False

    def test_future_month(self):
        now = utc(2024, 5, 15)
        assert is_in_month(utc(2024, 7, 31, 23), utc(2024, 8, 5), 2024, 7, now) is True
        assert is_in_month(utc(2024, 8, 1), None, 2024, 7, now) is False


class TestClauses:
    """The SQL clauses select the same rows as the predicates."""

    def test_map_display_clause(self, db):
        shown = create_event(db, name="shown", display_end_date=utc(2024, 1, 20))
        create_event(db, name="ended", display_end_date=utc(2024, 1, 10))
        create_event(db, name="later", map_start_date=utc(2024, 2, 1))
        names = {e.name for e in db.query(Event).filter(map_display_clause(utc(2024, 1, 15)))}
        assert names == {shown.name}

    def test_month_clause_other_month(self, db):
        create_event(db, name="march", qr_start_datetime=utc(2024, 3, 10), display_end_date=utc(2024, 3, 12))
        create_event(db, name="feb", qr_start_datetime=utc(2024, 2, 1), display_end_date=utc(2024, 2, 20))
        create_event(db, name="open", qr_start_datetime=None, display_end_date=None)
        rows = db.query(Event).filter(month_clause(2024, 3, utc(2024, 5, 15))).all()
        assert {e.name for e in rows} == {"march", "open"}

    def test_month_clause_current_month(self, db):
        create_event(db, name="ended", display_end_date=utc(2024, 5, 10))
        create_event(db, name="live", qr_start_datetime=utc(2024, 5, 1), display_end_date=utc(2024, 5, 31))
        rows = db.query(Event).filter(month_clause(2024, 5, utc(2024, 5, 15))).all()
        assert [e.name for e in rows] == ["live"]
