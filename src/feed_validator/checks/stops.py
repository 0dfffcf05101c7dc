"""Checks on stops and their hierarchy."""

import logging

import polars as pl

from feed_canon.codebook.stops import LocationType
from feed_canon.models import StopModel
from feed_validator.index import ModelIndex
from feed_validator.issues import Issue, IssueKind
from feed_validator.rules import RuleConfig
from feed_validator.utils import expr_haversine

from . import check

logger = logging.getLogger(__name__)

# To limit the size of an issue, at most this many trips are attached
MAX_RELATED_TRIPS = 20

# Location type of the child -> location type its parent must have
PARENT_TYPES = {
    LocationType.STOP_POINT: LocationType.STOP_AREA,
    LocationType.STATION_ENTRANCE: LocationType.STOP_AREA,
    LocationType.GENERIC_NODE: LocationType.STOP_AREA,
    LocationType.BOARDING_AREA: LocationType.STOP_POINT,
}

# Location types that cannot exist without a parent
PARENT_REQUIRED = {
    LocationType.STATION_ENTRANCE,
    LocationType.GENERIC_NODE,
    LocationType.BOARDING_AREA,
}

# Location types compared by the duplicate stops check
DUPLICATE_LOCATION_TYPES = {LocationType.STOP_POINT, LocationType.STOP_AREA}


def label(location_type: LocationType) -> str:
    """Readable name of a location type."""
    return location_type.name.replace("_", " ").lower()


@check(requires=("stops",), on_error=IssueKind.INVALID_STOP_PARENT)
def check_stop_parents(index: ModelIndex, rules: RuleConfig) -> list[Issue]:  # noqa: ARG001
    """Report stops whose parent_station breaks the stop hierarchy.

    Unresolved parents are invalid references and are not reported here.
    """
    issues = []
    for stop in index.stops.values():
        if stop.location_type == LocationType.STOP_AREA:
            if stop.parent_station:
                issues.append(
                    Issue.for_object(IssueKind.INVALID_STOP_PARENT, stop)
                    .with_details("A stop area cannot have a parent station")
                )
            continue

        if not stop.parent_station:
            if stop.location_type in PARENT_REQUIRED:
                issues.append(
                    Issue.for_object(IssueKind.INVALID_STOP_PARENT, stop)
                    .with_details(
                        f"A {label(stop.location_type)} must have a "
                        "parent station"
                    )
                )
            continue

        parent = index.parent_of(stop.stop_id)
        if parent is None:
            continue
        expected = PARENT_TYPES[stop.location_type]
        if parent.location_type != expected:
            issues.append(
                Issue.for_object(IssueKind.INVALID_STOP_PARENT, stop)
                .with_related(parent)
                .with_details(
                    f"The parent of a {label(stop.location_type)} must be a "
                    f"{label(expected)}, not a {label(parent.location_type)}"
                )
            )
    return issues


@check(
    requires=("stops", "stop_times", "trips"),
    on_error=IssueKind.INVALID_STOP_LOCATION_TYPE_IN_TRIP,
)
def check_stop_location_types_in_trips(
    index: ModelIndex, rules: RuleConfig  # noqa: ARG001
) -> list[Issue]:
    """Report stops used by stop times that are not stop points."""
    issues: dict[str, Issue] = {}
    related_trips: dict[str, set[str]] = {}
    for trip_id, stop_times in index.stop_times.items():
        trip = index.trip(trip_id)
        for st in stop_times:
            stop = index.stop(st.stop_id)
            if stop is None or stop.location_type == LocationType.STOP_POINT:
                continue
            if stop.stop_id not in issues:
                issues[stop.stop_id] = Issue.for_object(
                    IssueKind.INVALID_STOP_LOCATION_TYPE_IN_TRIP, stop
                ).with_details(
                    f"A {label(stop.location_type)} cannot be referenced "
                    "by a stop time"
                )
                related_trips[stop.stop_id] = set()
            seen = related_trips[stop.stop_id]
            if trip is None or trip_id in seen or len(seen) >= MAX_RELATED_TRIPS:
                continue
            seen.add(trip_id)
            issues[stop.stop_id] = issues[stop.stop_id].with_related(trip)
    return list(issues.values())


@check(requires=("stops", "stop_times"), on_error=IssueKind.UNUSED_STOP)
def check_unused_stops(index: ModelIndex, rules: RuleConfig) -> list[Issue]:  # noqa: ARG001
    """Report stop points and stations used by no stop time and no child."""
    used = {
        st.stop_id
        for stop_times in index.stop_times.values()
        for st in stop_times
    }
    used.update(index.children)
    return [
        Issue.for_object(IssueKind.UNUSED_STOP, stop)
        for stop in index.stops.values()
        if stop.location_type in (LocationType.STOP_POINT, LocationType.STOP_AREA)
        and stop.stop_id not in used
    ]


def normalize_name(name: str) -> str:
    """Case-folded name with collapsed whitespace."""
    return " ".join(name.split()).casefold()


def _stops_frame(stops: list[StopModel]) -> pl.DataFrame:
    return pl.DataFrame(
        {
            "stop_id": [s.stop_id for s in stops],
            "name_key": [normalize_name(s.stop_name) for s in stops],
            "location_type": [int(s.location_type) for s in stops],
            "lat": [s.stop_lat for s in stops],
            "lon": [s.stop_lon for s in stops],
        },
        schema={
            "stop_id": pl.Utf8,
            "name_key": pl.Utf8,
            "location_type": pl.Int64,
            "lat": pl.Float64,
            "lon": pl.Float64,
        },
    )


@check(requires=("stops",), on_error=IssueKind.DUPLICATE_STOPS)
def check_duplicate_stops(index: ModelIndex, rules: RuleConfig) -> list[Issue]:
    """Report pairs of stops with the same name at (almost) the same place.

    Stops are paired when their names and location types match. Only stop
    points and stations are compared: entrances, generic nodes and boarding
    areas of a station often share a name and a spot.
    """
    candidates = [
        s for s in index.stops.values()
        if s.location_type in DUPLICATE_LOCATION_TYPES
        and s.stop_name
        and s.has_coordinates
    ]
    if len(candidates) < 2:  # noqa: PLR2004
        return []

    stops = _stops_frame(candidates)
    pairs = (
        stops.join(stops, on=["name_key", "location_type"], suffix="_b")
        .filter(pl.col("stop_id") < pl.col("stop_id_b"))
        .with_columns(
            expr_haversine(
                pl.col("lat"), pl.col("lon"), pl.col("lat_b"), pl.col("lon_b")
            ).alias("distance")
        )
        .with_columns(
            pl.when(pl.col("location_type") == int(LocationType.STOP_AREA))
            .then(pl.lit(rules.duplicate_stop_area_distance))
            .otherwise(pl.lit(rules.duplicate_stop_point_distance))
            .alias("threshold")
        )
        .filter(pl.col("distance") < pl.col("threshold"))
        .sort(["stop_id", "stop_id_b"])
    )
    logger.debug("%d duplicate stop pairs", len(pairs))

    return [
        Issue.for_object(IssueKind.DUPLICATE_STOPS, index.stops[a])
        .with_related(index.stops[b])
        .with_details(f"The stops are {distance:.1f} m apart")
        for a, b, distance in pairs.select(
            "stop_id", "stop_id_b", "distance"
        ).iter_rows()
    ]
