"""Checks on routes."""

from feed_canon.codebook.routes import route_type_to_mode
from feed_validator.index import ModelIndex
from feed_validator.issues import Issue, IssueKind
from feed_validator.rules import RuleConfig

from . import check


@check(requires=("routes",), on_error=IssueKind.INVALID_ROUTE_TYPE)
def check_route_types(index: ModelIndex, rules: RuleConfig) -> list[Issue]:  # noqa: ARG001
    """Report routes whose type is neither basic nor extended."""
    return [
        Issue.for_object(IssueKind.INVALID_ROUTE_TYPE, route).with_details(
            f"The route type '{route.route_type}' is not part of the main "
            "GTFS specification"
        )
        for route in index.records["routes"]
        if route_type_to_mode(route.route_type) is None
    ]
