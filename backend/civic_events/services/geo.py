"""PostGIS expressions for proximity search.

Events keep plain ``lat``/``lng`` columns; the point is built in SQL and
cast to geography so ``ST_DWithin`` and ``ST_Distance`` work in metres.
"""
from geoalchemy2 import functions as geo_func
from sqlalchemy import func

from civic_events.models.event import Event

WGS84_SRID = 4326


def geography_point(lng, lat):
    """WGS84 point from longitude/latitude columns or values."""
    return func.geography(geo_func.ST_SetSRID(geo_func.ST_MakePoint(lng, lat), WGS84_SRID))


def event_point():
    return geography_point(Event.lng, Event.lat)


def within_radius(origin, radius_km: float):
    return geo_func.ST_DWithin(event_point(), origin, radius_km * 1000.0)


def distance_from(origin):
    """Distance in metres from the event to ``origin``."""
    return geo_func.ST_Distance(event_point(), origin)
