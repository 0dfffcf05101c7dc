"""Validation report."""

from pydantic import BaseModel, Field

from .issues import Issue, IssueKind
from .metadata import Metadata


class Report(BaseModel):
    """Outcome of a validation run.

    Attributes:
        metadata: Summary of the feed, None when the archive was unreadable
        validations: Retained issues per kind, at most max_issues each
    """

    metadata: Metadata | None = None
    validations: dict[IssueKind, list[Issue]] = Field(default_factory=dict)

    @classmethod
    def invalid_archive(cls, error: str) -> "Report":
        """Report for an archive that could not be read at all."""
        issue = Issue(
            kind=IssueKind.INVALID_ARCHIVE, object_id="", details=error
        )
        return cls(
            metadata=None,
            validations={IssueKind.INVALID_ARCHIVE: [issue]},
        )

    def issues(self, kind: IssueKind) -> list[Issue]:
        """Retained issues of a kind."""
        return self.validations.get(kind, [])

    def to_json(self, indent: int | None = None) -> str:
        """Serialize the report to JSON."""
        return self.model_dump_json(indent=indent)

    @classmethod
    def from_json(cls, data: str | bytes) -> "Report":
        """Parse a report serialized with to_json()."""
        return cls.model_validate_json(data)
