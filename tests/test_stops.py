"""Tests for the stop and coordinate checks."""

import pytest

from feed_validator.checks.coordinates import (
    check_shape_coordinates,
    check_stop_coordinates,
)
from feed_validator.checks.stops import (
    check_duplicate_stops,
    check_stop_location_types_in_trips,
    check_stop_parents,
    check_unused_stops,
    normalize_name,
)
from feed_validator.index import ModelIndex
from feed_validator.issues import IssueKind
from feed_validator.rules import RuleConfig
from tests.fixtures import (
    build_feed,
    create_shape,
    create_stop,
    create_stop_time,
    default_tables,
)

# About one meter and fifty meters of latitude
ONE_METER = 0.000009
FIFTY_METERS = 0.00045


def _run(check, feed, rules=None):
    return check(ModelIndex.build(feed), rules or RuleConfig())


def _with_stops(*extra: dict) -> list[dict]:
    return [*default_tables()["stops"], *extra]


class TestStopCoordinates:
    """Missing and out of range stop coordinates."""

    def test_clean_feed(self):
        """The reference feed locates every stop."""
        assert _run(check_stop_coordinates, build_feed()) == []

    def test_missing_coordinates(self):
        """Unset or zero coordinates are missing."""
        stops = _with_stops(
            create_stop("D", None, None),
            create_stop("E", 0.0, 2.4),
            create_stop("F", 48.9, None),
        )
        issues = _run(check_stop_coordinates, build_feed(stops=stops))

        assert [(i.kind, i.object_id, i.details) for i in issues] == [
            (
                IssueKind.MISSING_COORDINATES, "D",
                "Latitude and longitude are missing",
            ),
            (IssueKind.MISSING_COORDINATES, "E", "Latitude is missing"),
            (IssueKind.MISSING_COORDINATES, "F", "Longitude is missing"),
        ]

    def test_generic_node_may_omit_coordinates(self):
        """Generic nodes and boarding areas need no coordinates."""
        stops = _with_stops(
            create_stop(
                "N", None, None, location_type=3, parent_station="station"
            ),
        )
        assert _run(check_stop_coordinates, build_feed(stops=stops)) == []

    def test_out_of_bounds(self):
        """Coordinates outside WGS84 bounds are invalid."""
        stops = _with_stops(create_stop("D", 95.0, 2.4))
        issues = _run(check_stop_coordinates, build_feed(stops=stops))

        assert [(i.kind, i.object_id) for i in issues] == [
            (IssueKind.INVALID_COORDINATES, "D")
        ]


class TestShapeCoordinates:
    """Shape points without coordinates."""

    def test_one_issue_per_shape(self):
        """Several bad points of a shape make one issue."""
        shapes = create_shape(
            "SH1", [(48.85, 2.35), (0.0, 0.0), (0.0, 0.0), (48.87, 2.35)]
        )
        issues = _run(check_shape_coordinates, build_feed(shapes=shapes))

        assert [(i.kind, i.object_id) for i in issues] == [
            (IssueKind.MISSING_COORDINATES, "SH1")
        ]

    def test_out_of_bounds_point(self):
        """A point out of bounds makes the shape invalid."""
        shapes = create_shape("SH1", [(48.85, 2.35), (48.86, 200.0)])
        issues = _run(check_shape_coordinates, build_feed(shapes=shapes))

        assert [i.kind for i in issues] == [IssueKind.INVALID_COORDINATES]
        assert issues[0].details == "Point 2 is out of bounds"


class TestStopParents:
    """Consistency of the stop hierarchy."""

    def test_clean_feed(self):
        """A stop point in a station is valid."""
        assert _run(check_stop_parents, build_feed()) == []

    def test_point_in_point(self):
        """A stop point cannot have a stop point as parent."""
        stops = _with_stops(create_stop("D", 48.9, 2.4, parent_station="B"))
        issues = _run(check_stop_parents, build_feed(stops=stops))

        assert len(issues) == 1
        assert issues[0].object_id == "D"
        assert issues[0].details == (
            "The parent of a stop point must be a stop area, not a stop point"
        )
        assert [r.id for r in issues[0].related_objects] == ["B"]

    def test_station_with_parent(self):
        """A station cannot have a parent."""
        stops = _with_stops(
            create_stop(
                "S2", 48.9, 2.4, location_type=1, parent_station="station"
            )
        )
        issues = _run(check_stop_parents, build_feed(stops=stops))

        assert [i.details for i in issues] == [
            "A stop area cannot have a parent station"
        ]

    def test_entrance_without_parent(self):
        """An entrance must belong to a station."""
        stops = _with_stops(create_stop("E1", 48.9, 2.4, location_type=2))
        issues = _run(check_stop_parents, build_feed(stops=stops))

        assert [i.details for i in issues] == [
            "A station entrance must have a parent station"
        ]

    def test_boarding_area_in_stop_point(self):
        """A boarding area belongs to a stop point."""
        stops = _with_stops(
            create_stop("BA", 48.85, 2.35, location_type=4, parent_station="A")
        )
        assert _run(check_stop_parents, build_feed(stops=stops)) == []

    def test_unresolved_parent_ignored(self):
        """Unknown parents are left to the reference check."""
        stops = _with_stops(create_stop("D", 48.9, 2.4, parent_station="ghost"))
        assert _run(check_stop_parents, build_feed(stops=stops)) == []


class TestLocationTypesInTrips:
    """Stop times must use stop points."""

    def test_station_in_trip(self):
        """A station visited by a trip is reported with the trip."""
        stop_times = [
            create_stop_time("T1", "station", 1, "08:00:00"),
            create_stop_time("T1", "B", 2, "08:05:00"),
        ]
        issues = _run(
            check_stop_location_types_in_trips,
            build_feed(stop_times=stop_times),
        )

        assert len(issues) == 1
        assert issues[0].object_id == "station"
        assert issues[0].details == (
            "A stop area cannot be referenced by a stop time"
        )
        assert [r.id for r in issues[0].related_objects] == ["T1"]


class TestUnusedStops:
    """Stops no trip visits."""

    def test_clean_feed(self):
        """A station with a used child is used."""
        assert _run(check_unused_stops, build_feed()) == []

    def test_unused_stop_point(self):
        """A stop point without stop times is unused."""
        stops = _with_stops(
            create_stop("D", 48.9, 2.4),
            create_stop("E1", 48.9, 2.4, location_type=2, parent_station="station"),
        )
        issues = _run(check_unused_stops, build_feed(stops=stops))

        assert [(i.kind, i.object_id) for i in issues] == [
            (IssueKind.UNUSED_STOP, "D")
        ]

    def test_childless_station(self):
        """A station without children nor stop times is unused."""
        stops = _with_stops(create_stop("S2", 48.9, 2.4, location_type=1))
        issues = _run(check_unused_stops, build_feed(stops=stops))

        assert [i.object_id for i in issues] == ["S2"]


class TestDuplicateStops:
    """Stops with the same name at the same place."""

    def test_same_name_same_place(self):
        """Two stop points one meter apart with one name are duplicates."""
        stops = _with_stops(
            create_stop("M1", 48.9, 2.4, stop_name="Market"),
            create_stop("M2", 48.9 + ONE_METER, 2.4, stop_name="market "),
        )
        issues = _run(check_duplicate_stops, build_feed(stops=stops))

        assert len(issues) == 1
        assert issues[0].kind == IssueKind.DUPLICATE_STOPS
        assert issues[0].object_id == "M1"
        assert [r.id for r in issues[0].related_objects] == ["M2"]

    @pytest.mark.parametrize("location_type", [2, 3, 4])
    def test_station_parts_never_duplicates(self, location_type):
        """Entrances, nodes and boarding areas may share a name and a place."""
        parent = "A" if location_type == 4 else "station"
        stops = _with_stops(
            create_stop(
                "E1", 48.9, 2.4, stop_name="Exit",
                location_type=location_type, parent_station=parent,
            ),
            create_stop(
                "E2", 48.9, 2.4, stop_name="Exit",
                location_type=location_type, parent_station=parent,
            ),
        )
        assert _run(check_duplicate_stops, build_feed(stops=stops)) == []

    def test_threshold_per_location_type(self):
        """Stations use a wider radius than stop points."""
        stops = _with_stops(
            create_stop("M1", 48.9, 2.4, stop_name="Market"),
            create_stop("M2", 48.9 + FIFTY_METERS, 2.4, stop_name="Market"),
            create_stop(
                "P1", 48.8, 2.4, stop_name="Plaza", location_type=1
            ),
            create_stop(
                "P2", 48.8 + FIFTY_METERS, 2.4, stop_name="Plaza",
                location_type=1,
            ),
        )
        issues = _run(check_duplicate_stops, build_feed(stops=stops))

        assert [i.object_id for i in issues] == ["P1"]

    def test_different_location_types(self):
        """A station and its stop point may share name and place."""
        stops = _with_stops(
            create_stop("M1", 48.9, 2.4, stop_name="Market", location_type=1),
            create_stop(
                "M2", 48.9, 2.4, stop_name="Market", parent_station="M1"
            ),
        )
        assert _run(check_duplicate_stops, build_feed(stops=stops)) == []

    def test_configurable_distance(self):
        """The stop point radius comes from the rules."""
        stops = _with_stops(
            create_stop("M1", 48.9, 2.4, stop_name="Market"),
            create_stop("M2", 48.9 + FIFTY_METERS, 2.4, stop_name="Market"),
        )
        rules = RuleConfig(duplicate_stop_point_distance=60)
        issues = _run(check_duplicate_stops, build_feed(stops=stops), rules)

        assert [i.object_id for i in issues] == ["M1"]

    def test_normalize_name(self):
        """Names compare case and whitespace insensitive."""
        assert normalize_name("  Gare  du Nord ") == normalize_name(
            "gare du nord"
        )
