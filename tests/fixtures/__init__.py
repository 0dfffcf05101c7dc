"""Test fixtures for transit feeds."""
from .feed_records import (
    create_agency,
    create_calendar,
    create_calendar_date,
    create_fare_attribute,
    create_feed_info,
    create_route,
    create_shape,
    create_stop,
    create_stop_time,
    create_trip,
)
from .scenario_builders import (
    DEFAULT_COORDS,
    build_feed,
    default_tables,
    frame,
    line_feed,
)

__all__ = [
    "DEFAULT_COORDS",
    "build_feed",
    "create_agency",
    "create_calendar",
    "create_calendar_date",
    "create_fare_attribute",
    "create_feed_info",
    "create_route",
    "create_shape",
    "create_stop",
    "create_stop_time",
    "create_trip",
    "default_tables",
    "frame",
    "line_feed",
]
