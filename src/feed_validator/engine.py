"""Validation engine.

Builds the model index of a feed, runs every check against it and
assembles the report. Findings never raise: a crashing check becomes an
issue and a broken table only disables the checks that need it.
"""

import logging
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

from feed_canon import FeedLoadError, RawFeed

from .checks import Check
from .checks.agency import check_agencies
from .checks.coordinates import check_shape_coordinates, check_stop_coordinates
from .checks.fares import check_fares
from .checks.feed_info import check_feed_info
from .checks.files import check_file_presence
from .checks.identifiers import (
    check_duplicate_ids,
    check_ids_ascii,
    check_missing_ids,
)
from .checks.names import check_names
from .checks.references import check_invalid_references
from .checks.routes import check_route_types
from .checks.shapes import (
    check_missing_shapes,
    check_shape_references,
    check_unused_shapes,
)
from .checks.stop_times import (
    check_close_stops,
    check_interpolation,
    check_stop_time_order,
    check_travel_speeds,
)
from .checks.stops import (
    check_duplicate_stops,
    check_stop_location_types_in_trips,
    check_stop_parents,
    check_unused_stops,
)
from .collector import DEFAULT_MAX_ISSUES, IssueCollector
from .index import ModelIndex
from .issues import Issue
from .metadata import summarize
from .report import Report
from .rules import RuleConfig
from .visualization import add_visualization

logger = logging.getLogger(__name__)

# Checks run on every feed, in order
CHECKS: list[Check] = [
    check_file_presence,
    check_duplicate_ids,
    check_invalid_references,
    check_missing_ids,
    check_ids_ascii,
    check_names,
    check_stop_coordinates,
    check_shape_coordinates,
    check_shape_references,
    check_unused_shapes,
    check_missing_shapes,
    check_route_types,
    check_stop_parents,
    check_stop_location_types_in_trips,
    check_unused_stops,
    check_duplicate_stops,
    check_interpolation,
    check_stop_time_order,
    check_travel_speeds,
    check_close_stops,
    check_agencies,
    check_feed_info,
    check_fares,
]


def run_check(
    check: Check,
    index: ModelIndex,
    rules: RuleConfig,
    collector: IssueCollector,
) -> int:
    """Run one check and collect its issues.

    A check needing a broken table is skipped. An exception raised by the
    check is logged and reported as a single issue of the check's
    on_error kind.

    Returns:
        Number of issues collected
    """
    broken = [table for table in check.requires if index.is_broken(table)]
    if broken:
        logger.warning(
            "Skipping %s: broken tables %s", check.__name__, ", ".join(broken)
        )
        return 0

    start_time = time.time()
    try:
        issues = check(index, rules)
    except Exception as e:
        logger.exception("Check %s failed", check.__name__)
        issues = [
            Issue(
                kind=check.on_error,
                object_id="",
                details=f"The check {check.__name__} failed: {e}",
            )
        ]

    count = collector.extend(add_visualization(i, index) for i in issues)
    logger.info(
        "%s: %d issues in %.2fs",
        check.__name__, count, time.time() - start_time,
    )
    return count


def validate_feed(
    raw: RawFeed,
    rules: RuleConfig | None = None,
    max_issues: int = DEFAULT_MAX_ISSUES,
    workers: int = 1,
) -> Report:
    """Validate a feed.

    Args:
        raw: Tables of the feed as loaded from the archive
        rules: Thresholds of the checks, defaults if None
        max_issues: Maximum number of issues retained per kind
        workers: Number of threads running the checks

    Returns:
        The validation report

    Raises:
        ValueError: If max_issues or workers is lower than 1
    """
    if workers < 1:
        msg = f"workers must be at least 1, got {workers}"
        raise ValueError(msg)
    rules = rules or RuleConfig()
    collector = IssueCollector(max_issues=max_issues)

    start_time = time.time()
    index = ModelIndex.build(raw)
    unloadable = index.unloadable_issue()
    if unloadable is not None:
        logger.warning("Model partially loaded: %s", unloadable.details)
        collector.add(unloadable)

    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                pool.submit(run_check, check, index, rules, collector)
                for check in CHECKS
            ]
            for future in futures:
                future.result()
    else:
        for check in CHECKS:
            run_check(check, index, rules, collector)

    metadata = summarize(index, collector.counts)
    logger.info(
        "Validation done: %d issues in %.2fs",
        collector.total, time.time() - start_time,
    )
    return Report(metadata=metadata, validations=collector.validations())


def validate_source(
    load: Callable[[], RawFeed],
    rules: RuleConfig | None = None,
    max_issues: int = DEFAULT_MAX_ISSUES,
    workers: int = 1,
) -> Report:
    """Load a feed with an external loader and validate it.

    An archive the loader cannot read yields an InvalidArchive report
    without metadata. Any other loader failure propagates.

    Args:
        load: Zero-argument function returning the raw feed
        rules: Thresholds of the checks, defaults if None
        max_issues: Maximum number of issues retained per kind
        workers: Number of threads running the checks

    Returns:
        The validation report
    """
    try:
        raw = load()
    except FeedLoadError as e:
        logger.error("Invalid archive: %s", e)  # noqa: TRY400
        return Report.invalid_archive(str(e))
    return validate_feed(
        raw, rules=rules, max_issues=max_issues, workers=workers
    )
