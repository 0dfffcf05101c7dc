"""Checks on stop and shape coordinates.

A coordinate set to 0 is treated as missing: null island is far more
often a default value than a real location.
"""

from feed_canon.codebook.stops import LocationType
from feed_canon.models import ShapePointModel, StopModel
from feed_validator.index import ModelIndex
from feed_validator.issues import Issue, IssueKind
from feed_validator.rules import RuleConfig
from feed_validator.utils import valid_coordinates

from . import check

# Generic nodes and boarding areas may omit their coordinates
LOCATED_TYPES = {
    LocationType.STOP_POINT,
    LocationType.STOP_AREA,
    LocationType.STATION_ENTRANCE,
}


def _is_missing(value: float | None) -> bool:
    return value is None or value == 0.0


def _missing_details(stop: StopModel) -> str | None:
    lat_missing = _is_missing(stop.stop_lat)
    lon_missing = _is_missing(stop.stop_lon)
    if lat_missing and lon_missing:
        return "Latitude and longitude are missing"
    if lat_missing:
        return "Latitude is missing"
    if lon_missing:
        return "Longitude is missing"
    return None


@check(requires=("stops",), on_error=IssueKind.INVALID_COORDINATES)
def check_stop_coordinates(
    index: ModelIndex, rules: RuleConfig  # noqa: ARG001
) -> list[Issue]:
    """Report stops with missing or out of range coordinates."""
    issues = []
    for stop in index.records["stops"]:
        details = _missing_details(stop)
        if details is not None:
            if stop.location_type in LOCATED_TYPES:
                issues.append(
                    Issue.for_object(
                        IssueKind.MISSING_COORDINATES, stop
                    ).with_details(details)
                )
            continue
        if not valid_coordinates(stop.stop_lat, stop.stop_lon):
            issues.append(
                Issue.for_object(
                    IssueKind.INVALID_COORDINATES, stop
                ).with_details(
                    f"Coordinates ({stop.stop_lat}, {stop.stop_lon}) "
                    "are out of bounds"
                )
            )
    return issues


def _point_missing(point: ShapePointModel) -> bool:
    return _is_missing(point.shape_pt_lat) or _is_missing(point.shape_pt_lon)


@check(requires=("shapes",), on_error=IssueKind.INVALID_COORDINATES)
def check_shape_coordinates(
    index: ModelIndex, rules: RuleConfig  # noqa: ARG001
) -> list[Issue]:
    """Report shapes with a point lacking coordinates or out of range."""
    issues = []
    for points in index.shapes.values():
        if any(_point_missing(p) for p in points):
            issues.append(
                Issue.for_object(IssueKind.MISSING_COORDINATES, points[0])
            )
        invalid = [
            p for p in points
            if not _point_missing(p)
            and not valid_coordinates(p.shape_pt_lat, p.shape_pt_lon)
        ]
        if invalid:
            issues.append(
                Issue.for_object(
                    IssueKind.INVALID_COORDINATES, points[0]
                ).with_details(
                    f"Point {invalid[0].shape_pt_sequence} is out of bounds"
                )
            )
    return issues
