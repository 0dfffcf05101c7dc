"""Checks on object names."""

from feed_canon.codebook.generic import ObjectType
from feed_canon.codebook.stops import LocationType
from feed_validator.index import ModelIndex
from feed_validator.issues import Issue, IssueKind
from feed_validator.rules import RuleConfig

from . import check

# Location types for which a stop_name is mandatory
NAMED_LOCATION_TYPES = {
    LocationType.STOP_POINT,
    LocationType.STOP_AREA,
    LocationType.STATION_ENTRANCE,
}


@check(on_error=IssueKind.MISSING_NAME)
def check_names(index: ModelIndex, rules: RuleConfig) -> list[Issue]:  # noqa: ARG001
    """Report routes, stops, agencies and publishers without a name."""
    issues = [
        Issue.for_object(IssueKind.MISSING_NAME, route)
        for route in index.records["routes"]
        if not route.route_short_name and not route.route_long_name
    ]
    issues.extend(
        Issue.for_object(IssueKind.MISSING_NAME, stop)
        for stop in index.records["stops"]
        if not stop.stop_name and stop.location_type in NAMED_LOCATION_TYPES
    )
    issues.extend(
        Issue.for_object(IssueKind.MISSING_NAME, agency)
        for agency in index.records["agency"]
        if not agency.agency_name
    )
    issues.extend(
        Issue(
            kind=IssueKind.MISSING_NAME,
            object_id="",
            object_type=ObjectType.FEED_INFO,
            details="The feed publisher name is missing",
        )
        for feed_info in index.feed_info
        if not feed_info.feed_publisher_name
    )
    return issues
