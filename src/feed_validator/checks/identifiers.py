"""Checks on object identifiers."""

import logging

import polars as pl

from feed_canon.core.feed_field import get_unique_field
from feed_canon.models import TABLE_MODELS, AgencyModel
from feed_validator.index import ModelIndex
from feed_validator.issues import Issue, IssueKind
from feed_validator.rules import RuleConfig

from . import check

logger = logging.getLogger(__name__)

DUPLICATE_ID_TABLES = ["stops", "routes", "trips", "calendar", "fare_attributes"]
MISSING_ID_TABLES = ["routes", "trips", "calendar", "stops"]
ASCII_ID_TABLES = ["agency", "routes", "trips", "stops", "calendar", "fare_attributes"]


@check(on_error=IssueKind.DUPLICATE_OBJECT_ID)
def check_duplicate_ids(index: ModelIndex, rules: RuleConfig) -> list[Issue]:  # noqa: ARG001
    """Report every identifier shared by several records of a table."""
    issues = []
    for table_name in DUPLICATE_ID_TABLES:
        if not index.is_loaded(table_name):
            continue
        model = TABLE_MODELS[table_name]
        id_column = get_unique_field(model)
        df = index.table(table_name)
        if id_column not in df.columns:
            continue

        # Check for duplicates using Polars
        duplicates = (
            df.filter(
                pl.col(id_column).is_not_null()
                & (pl.col(id_column).cast(pl.Utf8) != "")
            )
            .group_by(id_column)
            .agg(pl.len().alias("count"))
            .filter(pl.col("count") > 1)
            .sort(id_column)
        )
        if len(duplicates) > 0:
            logger.debug(
                "%d duplicated ids in %s", len(duplicates), table_name
            )

        for object_id, count in duplicates.iter_rows():
            issues.append(
                Issue(
                    kind=IssueKind.DUPLICATE_OBJECT_ID,
                    object_id=str(object_id),
                    object_type=model.object_type,
                    details=f"{count} objects share this identifier",
                )
            )
    return issues


@check(on_error=IssueKind.MISSING_ID)
def check_missing_ids(index: ModelIndex, rules: RuleConfig) -> list[Issue]:  # noqa: ARG001
    """Report records without an identifier.

    The id of an agency only needs to be set when there is more than one.
    """
    issues = []
    agencies: list[AgencyModel] = index.records["agency"]
    if len(agencies) > 1:
        issues.extend(
            Issue.for_object(IssueKind.MISSING_ID, agency)
            for agency in agencies
            if not agency.agency_id
        )

    for table_name in MISSING_ID_TABLES:
        issues.extend(
            Issue.for_object(IssueKind.MISSING_ID, record)
            for record in index.records[table_name]
            if not record.id
        )

    if "" in index.shapes:
        issues.append(
            Issue.for_object(IssueKind.MISSING_ID, index.shapes[""][0])
        )
    return issues


@check(on_error=IssueKind.ID_NOT_ASCII)
def check_ids_ascii(index: ModelIndex, rules: RuleConfig) -> list[Issue]:  # noqa: ARG001
    """Report identifiers containing non-ASCII characters."""
    issues = []
    for table_name in ASCII_ID_TABLES:
        issues.extend(
            Issue.for_object(IssueKind.ID_NOT_ASCII, record)
            for record in index.records[table_name]
            if not record.id.isascii()
        )
    issues.extend(
        Issue.for_object(IssueKind.ID_NOT_ASCII, points[0])
        for shape_id, points in index.shapes.items()
        if not shape_id.isascii()
    )
    return issues
