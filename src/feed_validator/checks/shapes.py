"""Checks on the links between trips and shapes."""

from feed_validator.index import ModelIndex
from feed_validator.issues import Issue, IssueKind
from feed_validator.rules import RuleConfig

from . import check


@check(requires=("trips", "shapes"), on_error=IssueKind.INVALID_SHAPE_ID)
def check_shape_references(
    index: ModelIndex, rules: RuleConfig  # noqa: ARG001
) -> list[Issue]:
    """Report trips pointing at a shape that does not exist."""
    return [
        Issue.for_object(IssueKind.INVALID_SHAPE_ID, trip).with_details(
            f"The shape {trip.shape_id} does not exist"
        )
        for trip in index.trips.values()
        if trip.shape_id and trip.shape_id not in index.shapes
    ]


@check(requires=("trips", "shapes"), on_error=IssueKind.UNUSED_SHAPE_ID)
def check_unused_shapes(index: ModelIndex, rules: RuleConfig) -> list[Issue]:  # noqa: ARG001
    """Report shapes no trip uses."""
    used = {trip.shape_id for trip in index.trips.values() if trip.shape_id}
    return [
        Issue.for_object(IssueKind.UNUSED_SHAPE_ID, points[0])
        for shape_id, points in index.shapes.items()
        if shape_id not in used
    ]


@check(requires=("trips",), on_error=IssueKind.NO_SHAPE)
def check_missing_shapes(index: ModelIndex, rules: RuleConfig) -> list[Issue]:  # noqa: ARG001
    """Report trips without a shape."""
    return [
        Issue.for_object(IssueKind.NO_SHAPE, trip)
        for trip in index.trips.values()
        if not trip.shape_id
    ]
