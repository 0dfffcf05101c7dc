"""Checks on the set of files in the archive."""

from feed_canon.codebook.generic import ObjectType
from feed_validator.index import ModelIndex
from feed_validator.issues import Issue, IssueKind
from feed_validator.rules import RuleConfig

from . import check

MANDATORY_FILES = [
    "agency.txt",
    "routes.txt",
    "stops.txt",
    "stop_times.txt",
    "trips.txt",
]

OPTIONAL_FILES = [
    "fare_attributes.txt",
    "calendar.txt",
    "calendar_dates.txt",
    "fare_rules.txt",
    "fare_media.txt",
    "fare_products.txt",
    "fare_leg_rules.txt",
    "fare_leg_join_rules.txt",
    "feed_info.txt",
    "frequencies.txt",
    "transfers.txt",
    "shapes.txt",
    "pathways.txt",
    "levels.txt",
    "translations.txt",
    "attributions.txt",
    "timeframes.txt",
    "areas.txt",
    "stop_areas.txt",
    "networks.txt",
    "route_networks.txt",
    "location_groups.txt",
    "location_group_stops.txt",
    "locations.geojson",
    "booking_rules.txt",
]


def _file_issue(kind: IssueKind, file_name: str, details: str) -> Issue:
    return Issue(
        kind=kind,
        object_id=file_name,
        object_type=ObjectType.FILE,
        details=details,
    )


@check(on_error=IssueKind.MISSING_MANDATORY_FILE)
def check_file_presence(index: ModelIndex, rules: RuleConfig) -> list[Issue]:  # noqa: ARG001
    """Report missing mandatory files and files foreign to the format.

    File names are matched on their suffix so that an archive whose data
    sits in a sub folder still counts.
    """
    files = [f for f in index.raw.files if not f.endswith("/")]
    issues = [
        _file_issue(
            IssueKind.MISSING_MANDATORY_FILE,
            name,
            "The mandatory file was not found",
        )
        for name in MANDATORY_FILES
        if not any(f.endswith(name) for f in files)
    ]

    known = MANDATORY_FILES + OPTIONAL_FILES
    issues.extend(
        _file_issue(
            IssueKind.EXTRA_FILE, f, "This file shouldn’t be in the archive"
        )
        for f in files
        if not any(f.endswith(name) for name in known)
    )
    return issues
