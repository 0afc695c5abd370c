"""Tests for chart bucketing, the profiler and asset URLs."""
import logging
from datetime import datetime

import pytest
from sqlalchemy.dialects import postgresql

from civic_events.models.event import Event
from civic_events.services import geo
from civic_events.services.chart_service import ChartBucket, bucket_counts, period_label
from civic_events.services.profiler import profile_and_notify
from civic_events.storage import resolve_asset_url
from tests.conftest import create_area, create_event, utc


class TestBucketCounts:
    def test_month_labels_in_display_zone(self):
        stamps = [utc(2024, 1, 31, 14, 59), utc(2024, 1, 31, 15, 0), datetime(2024, 2, 10), None]
        assert bucket_counts(stamps, ChartBucket.month, "Asia/Tokyo") == [("2024/01", 1), ("2024/02", 2)]

    def test_year_labels_sorted(self):
        stamps = [utc(2025, 3, 1), utc(2023, 3, 1), utc(2025, 4, 1)]
        assert bucket_counts(stamps, ChartBucket.year, "UTC") == [("2023", 1), ("2025", 2)]

    def test_empty(self):
        assert bucket_counts([], ChartBucket.month) == []


class TestProfiler:
    def test_passes_through_result(self):
        @profile_and_notify("double")
        def double(x):
            return x * 2

        assert double(4) == 8

    def test_passes_through_errors(self):
        @profile_and_notify("boom")
        def boom():
            raise KeyError("nope")

        with pytest.raises(KeyError):
            boom()

    def test_slow_call_warns(self, caplog):
        @profile_and_notify("slow", threshold_ms=-1)
        def slow():
            return "done"

        with caplog.at_level(logging.WARNING, logger="civic_events.services.profiler"):
            assert slow() == "done"
        assert any("Slow call slow" in r.getMessage() for r in caplog.records)


class TestGeoExpressions:
    def _sql(self, expr) -> str:
        return str(expr.compile(dialect=postgresql.dialect()))

    def test_radius_filter_uses_geography_in_metres(self):
        origin = geo.geography_point(139.7671, 35.6812)
        sql = self._sql(geo.within_radius(origin, 10))
        assert "ST_DWithin(geography(ST_SetSRID(ST_MakePoint(events.lng, events.lat)" in sql
        compiled = geo.within_radius(origin, 10).compile(dialect=postgresql.dialect())
        assert 10000.0 in compiled.params.values()

    def test_distance_orders_from_event_to_origin(self):
        sql = self._sql(geo.distance_from(geo.geography_point(139.0, 35.0)))
        assert sql.startswith("ST_Distance(geography(ST_SetSRID(ST_MakePoint(events.lng, events.lat)")


class TestChartLabels:
    def test_postgres_labels_convert_to_display_zone(self):
        expr = period_label(Event.created_at, ChartBucket.month, "Asia/Tokyo")
        compiled = expr.compile(dialect=postgresql.dialect())
        assert str(compiled).startswith("to_char(timezone(")
        assert set(compiled.params.values()) == {"Asia/Tokyo", "YYYY/MM"}


class TestDerivedFields:
    def test_asset_url(self):
        assert resolve_asset_url(None) is None
        assert resolve_asset_url("https://other.example/x.pdf") == "https://other.example/x.pdf"
        assert resolve_asset_url("/docs/x.pdf").endswith("/docs/x.pdf")

    def test_tag_lookup(self, db):
        from civic_events.models import ActiveAreaTag

        area = create_area(db)
        tag = ActiveAreaTag(active_area_id=area.id, name="Seaside")
        db.add(tag)
        db.commit()
        tagged = create_event(db, active_area_id=area.id, event_tag=tag.id)
        untagged = create_event(db, active_area_id=area.id)
        dangling = create_event(db, active_area_id=area.id, event_tag=999)
        assert tagged.tag.name == "Seaside"
        assert untagged.tag is None
        assert dangling.tag is None
