"""Tests for the issue collector."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from feed_validator.collector import IssueCollector
from feed_validator.issues import Issue, IssueKind


def _issues(kind: IssueKind, count: int) -> list[Issue]:
    return [Issue(kind=kind, object_id=str(i)) for i in range(count)]


class TestIssueCollector:
    """Retained issues are capped, counts are not."""

    def test_cap_does_not_change_counts(self):
        """Counts are the same whatever the cap."""
        issues = _issues(IssueKind.UNUSED_STOP, 5) + _issues(
            IssueKind.MISSING_NAME, 2
        )
        large = IssueCollector(max_issues=1000)
        small = IssueCollector(max_issues=1)
        large.extend(issues)
        small.extend(issues)

        assert large.counts == small.counts == {
            IssueKind.MISSING_NAME: 2,
            IssueKind.UNUSED_STOP: 5,
        }
        assert len(large.validations()[IssueKind.UNUSED_STOP]) == 5
        assert len(small.validations()[IssueKind.UNUSED_STOP]) == 1

    def test_first_issues_retained(self):
        """The cap keeps the first issues collected."""
        collector = IssueCollector(max_issues=2)
        collector.extend(_issues(IssueKind.SLOW, 4))

        retained = collector.validations()[IssueKind.SLOW]
        assert [i.object_id for i in retained] == ["0", "1"]

    def test_taxonomy_order(self):
        """Kinds come out in taxonomy order, not insertion order."""
        collector = IssueCollector()
        collector.add(Issue(kind=IssueKind.NO_SHAPE, object_id="T1"))
        collector.add(Issue(kind=IssueKind.INVALID_REFERENCE, object_id="S9"))

        assert list(collector.validations()) == [
            IssueKind.INVALID_REFERENCE,
            IssueKind.NO_SHAPE,
        ]
        assert collector.total == 2
        assert collector.count(IssueKind.EXCESSIVE_SPEED) == 0

    def test_extend_returns_count(self):
        """Extending reports the number of issues added."""
        collector = IssueCollector()
        assert collector.extend(_issues(IssueKind.SLOW, 3)) == 3

    def test_concurrent_adds(self):
        """Concurrent producers lose no issue."""
        collector = IssueCollector(max_issues=10)
        with ThreadPoolExecutor(max_workers=8) as pool:
            for _ in range(8):
                pool.submit(collector.extend, _issues(IssueKind.SLOW, 250))

        assert collector.count(IssueKind.SLOW) == 2000
        assert len(collector.validations()[IssueKind.SLOW]) == 10

    def test_invalid_cap(self):
        """The cap must be at least one."""
        with pytest.raises(ValueError, match="max_issues"):
            IssueCollector(max_issues=0)
