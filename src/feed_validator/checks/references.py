"""Referential integrity between tables.

Links are declared on the record models with feed_field(fk_to=...). Every
mandatory link whose target does not exist is an InvalidReference about
the missing object, reported once per missing object with the records
pointing at it as related objects.
"""

import logging

from feed_canon.core.feed_field import get_foreign_key_fields
from feed_canon.models import TABLE_MODELS
from feed_validator.index import ModelIndex
from feed_validator.issues import Issue, IssueKind, RelatedObject
from feed_validator.rules import RuleConfig

from . import check

logger = logging.getLogger(__name__)

# Tables holding links, in report order
REFERENCING_TABLES = ["stop_times", "trips", "routes", "stops", "fare_rules"]

MAX_RELATED_OBJECTS = 20

_DETAILS = {
    ("stop_times", "trip_id"): (
        "The trip is referenced by a stop time but does not exist"
    ),
    ("stop_times", "stop_id"): (
        "The stop is referenced by a stop time but does not exist"
    ),
    ("trips", "route_id"): (
        "The route is referenced by a trip but does not exist"
    ),
    ("trips", "service_id"): (
        "The service is referenced by a trip but does not exist"
    ),
    ("routes", "agency_id"): (
        "The agency is referenced by a route but does not exist"
    ),
    ("stops", "parent_station"): (
        "The stop is referenced as a stop's parent_station but does not exist"
    ),
    ("fare_rules", "fare_id"): (
        "The fare is referenced by a fare rule but does not exist"
    ),
    ("fare_rules", "route_id"): (
        "The route is referenced by a fare rule but does not exist"
    ),
}


def _known_ids(index: ModelIndex, table_name: str) -> set[str] | None:
    """Identifiers of a table, None when references to it cannot be checked.

    Services are defined by calendar and calendar_dates together.
    """
    if table_name == "calendar":
        if index.is_broken("calendar") or index.is_broken("calendar_dates"):
            return None
        if not index.is_loaded("calendar") and not index.is_loaded(
            "calendar_dates"
        ):
            return None
        return index.service_ids()

    if not index.is_loaded(table_name):
        return None
    return {record.id for record in index.records[table_name]}


@check(on_error=IssueKind.INVALID_REFERENCE)
def check_invalid_references(
    index: ModelIndex, rules: RuleConfig  # noqa: ARG001
) -> list[Issue]:
    """Report links to objects that do not exist."""
    issues: dict[tuple[str, str], Issue] = {}
    known_ids: dict[str, set[str] | None] = {}

    for table_name in REFERENCING_TABLES:
        model = TABLE_MODELS[table_name]
        links = get_foreign_key_fields(model, strict_only=True)
        for field_name, (parent_table, _) in links.items():
            if parent_table not in known_ids:
                known_ids[parent_table] = _known_ids(index, parent_table)
            parent_ids = known_ids[parent_table]
            if parent_ids is None:
                logger.debug(
                    "Not checking %s.%s: %s unavailable",
                    table_name, field_name, parent_table,
                )
                continue

            parent_type = TABLE_MODELS[parent_table].object_type
            for record in index.records[table_name]:
                value = getattr(record, field_name)
                if value is None or value in parent_ids:
                    continue
                key = (parent_type, value)
                if key not in issues:
                    issues[key] = Issue(
                        kind=IssueKind.INVALID_REFERENCE,
                        object_id=value,
                        object_type=parent_type,
                        details=_DETAILS[(table_name, field_name)],
                    )
                issue = issues[key]
                if len(issue.related_objects) < MAX_RELATED_OBJECTS:
                    issues[key] = issue.with_related(RelatedObject.of(record))

    return list(issues.values())
