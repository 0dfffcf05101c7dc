"""Scenario builders for creating common test feeds.

The reference scenario is a clean feed: one agency running one bus line
over three stops of a station, with a shape, a calendar and feed info.
Tests start from it and override the tables they are about.
"""

import polars as pl

from feed_canon import RawFeed

from .feed_records import (
    create_agency,
    create_calendar,
    create_feed_info,
    create_route,
    create_shape,
    create_stop,
    create_stop_time,
    create_trip,
)

# Stops of the reference line, 0.01 degree of latitude (~1.1 km) apart
DEFAULT_COORDS = {
    "station": (48.8500, 2.3500),
    "A": (48.8500, 2.3500),
    "B": (48.8600, 2.3500),
    "C": (48.8700, 2.3500),
}


def frame(records: list[dict]) -> pl.DataFrame:
    """DataFrame of a table from its records."""
    return pl.DataFrame(records, infer_schema_length=None)


def default_tables() -> dict[str, list[dict]]:
    """Records of the reference feed, per table."""
    return {
        "agency": [create_agency()],
        "routes": [create_route()],
        "trips": [create_trip(shape_id="SH1")],
        "stops": [
            create_stop(
                "station", *DEFAULT_COORDS["station"],
                stop_name="Central", location_type=1,
            ),
            create_stop("A", *DEFAULT_COORDS["A"], parent_station="station"),
            create_stop("B", *DEFAULT_COORDS["B"]),
            create_stop("C", *DEFAULT_COORDS["C"]),
        ],
        "stop_times": [
            create_stop_time("T1", "A", 1, "08:00:00"),
            create_stop_time("T1", "B", 2, "08:05:00"),
            create_stop_time("T1", "C", 3, "08:10:00"),
        ],
        "calendar": [create_calendar()],
        "shapes": create_shape(
            "SH1",
            [DEFAULT_COORDS["A"], DEFAULT_COORDS["B"], DEFAULT_COORDS["C"]],
        ),
        "feed_info": [create_feed_info()],
    }


def build_feed(
    files: list[str] | None = None,
    **overrides: list[dict] | None,
) -> RawFeed:
    """Build a raw feed from the reference tables and overrides.

    Args:
        files: Archive file names, derived from the tables if None
        **overrides: Records per table; None removes the table

    Returns:
        The raw feed
    """
    tables = default_tables()
    tables.update(overrides)
    frames = {
        name: frame(records)
        for name, records in tables.items()
        if records is not None
    }
    return RawFeed.from_files(frames, files=files)


def line_feed(
    coords: list[tuple[float, float]],
    times: list[str | None],
    route_type: int = 3,
    **overrides: list[dict] | None,
) -> RawFeed:
    """Feed with a single trip T1 visiting one stop per coordinate.

    Stops are named S1, S2, ... and the trip has no shape.
    """
    stops = [
        create_stop(f"S{i}", lat, lon)
        for i, (lat, lon) in enumerate(coords, start=1)
    ]
    stop_times = [
        create_stop_time("T1", f"S{i}", i, t)
        for i, t in enumerate(times, start=1)
    ]
    tables = {
        "routes": [create_route(route_type=route_type)],
        "trips": [create_trip()],
        "stops": stops,
        "stop_times": stop_times,
        "shapes": None,
    }
    tables.update(overrides)
    return build_feed(**tables)
