"""Thread-safe accumulation of issues with a per-kind display cap."""

import threading
from collections import defaultdict
from collections.abc import Iterable

from .issues import Issue, IssueKind


DEFAULT_MAX_ISSUES = 1000


class IssueCollector:
    """Collects issues from the checks.

    Two pieces of state are kept per issue kind: the retained issues,
    capped at ``max_issues`` for display, and the true number of issues
    found. Lowering the cap never changes the counts.
    """

    def __init__(self, max_issues: int = DEFAULT_MAX_ISSUES) -> None:
        """Initialize an empty collector.

        Args:
            max_issues: Maximum number of issues retained per kind

        Raises:
            ValueError: If max_issues is lower than 1
        """
        if max_issues < 1:
            msg = f"max_issues must be at least 1, got {max_issues}"
            raise ValueError(msg)
        self.max_issues = max_issues
        self._lock = threading.Lock()
        self._issues: dict[IssueKind, list[Issue]] = defaultdict(list)
        self._counts: dict[IssueKind, int] = defaultdict(int)

    def add(self, issue: Issue) -> None:
        """Record one issue."""
        with self._lock:
            self._counts[issue.kind] += 1
            retained = self._issues[issue.kind]
            if len(retained) < self.max_issues:
                retained.append(issue)

    def extend(self, issues: Iterable[Issue]) -> int:
        """Record several issues.

        Returns:
            Number of issues recorded
        """
        added = 0
        for issue in issues:
            self.add(issue)
            added += 1
        return added

    def count(self, kind: IssueKind) -> int:
        """True number of issues of a kind."""
        with self._lock:
            return self._counts.get(kind, 0)

    @property
    def counts(self) -> dict[IssueKind, int]:
        """True number of issues per kind, in taxonomy order."""
        with self._lock:
            return {
                kind: self._counts[kind]
                for kind in IssueKind
                if self._counts.get(kind, 0) > 0
            }

    @property
    def total(self) -> int:
        """True number of issues of all kinds."""
        with self._lock:
            return sum(self._counts.values())

    def validations(self) -> dict[IssueKind, list[Issue]]:
        """Snapshot of the retained issues, in taxonomy order."""
        with self._lock:
            return {
                kind: list(self._issues[kind])
                for kind in IssueKind
                if self._issues.get(kind)
            }
