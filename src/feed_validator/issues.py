"""Issue taxonomy of the validator.

Every finding is an Issue of one IssueKind. The severity of an issue is a
pure function of its kind, looked up in SEVERITIES; it is never stored on
an instance and is recomputed when an issue is serialized.
"""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field

from feed_canon.codebook.generic import ObjectType
from feed_canon.models import FeedRecord


class Severity(StrEnum):
    """Importance of an issue, most severe first."""

    FATAL = "Fatal"
    ERROR = "Error"
    WARNING = "Warning"
    INFORMATION = "Information"


class IssueKind(StrEnum):
    """Closed set of issue kinds, in report order."""

    # Fatal
    INVALID_ARCHIVE = "InvalidArchive"
    UNLOADABLE_MODEL = "UnloadableModel"
    MISSING_MANDATORY_FILE = "MissingMandatoryFile"
    INVALID_REFERENCE = "InvalidReference"

    # Error
    MISSING_ID = "MissingId"
    INVALID_COORDINATES = "InvalidCoordinates"
    INVALID_TIMEZONE = "InvalidTimezone"
    MISSING_PRICE = "MissingPrice"
    INVALID_CURRENCY = "InvalidCurrency"
    INVALID_TRANSFERS = "InvalidTransfers"
    INVALID_TRANSFER_DURATION = "InvalidTransferDuration"
    IMPOSSIBLE_TO_INTERPOLATE_STOP_TIMES = "ImpossibleToInterpolateStopTimes"
    INVALID_SHAPE_ID = "InvalidShapeId"

    # Warning
    NEGATIVE_TRAVEL_TIME = "NegativeTravelTime"
    MISSING_NAME = "MissingName"
    MISSING_COORDINATES = "MissingCoordinates"
    NULL_DURATION = "NullDuration"
    MISSING_URL = "MissingUrl"
    INVALID_URL = "InvalidUrl"
    MISSING_LANGUAGE = "MissingLanguage"
    INVALID_LANGUAGE = "InvalidLanguage"
    DUPLICATE_OBJECT_ID = "DuplicateObjectId"
    INVALID_STOP_LOCATION_TYPE_IN_TRIP = "InvalidStopLocationTypeInTrip"
    INVALID_STOP_PARENT = "InvalidStopParent"
    ID_NOT_ASCII = "IdNotAscii"

    # Information
    UNUSED_STOP = "UnusedStop"
    SLOW = "Slow"
    EXCESSIVE_SPEED = "ExcessiveSpeed"
    CLOSE_STOPS = "CloseStops"
    INVALID_ROUTE_TYPE = "InvalidRouteType"
    DUPLICATE_STOPS = "DuplicateStops"
    EXTRA_FILE = "ExtraFile"
    UNUSED_SHAPE_ID = "UnusedShapeId"
    NO_SHAPE = "NoShape"

    @property
    def severity(self) -> Severity:
        """Severity of this kind of issue."""
        return SEVERITIES[self]


_KINDS_BY_SEVERITY: dict[Severity, list[IssueKind]] = {
    Severity.FATAL: [
        IssueKind.INVALID_ARCHIVE,
        IssueKind.UNLOADABLE_MODEL,
        IssueKind.MISSING_MANDATORY_FILE,
        IssueKind.INVALID_REFERENCE,
    ],
    Severity.ERROR: [
        IssueKind.MISSING_ID,
        IssueKind.INVALID_COORDINATES,
        IssueKind.INVALID_TIMEZONE,
        IssueKind.MISSING_PRICE,
        IssueKind.INVALID_CURRENCY,
        IssueKind.INVALID_TRANSFERS,
        IssueKind.INVALID_TRANSFER_DURATION,
        IssueKind.IMPOSSIBLE_TO_INTERPOLATE_STOP_TIMES,
        IssueKind.INVALID_SHAPE_ID,
    ],
    Severity.WARNING: [
        IssueKind.NEGATIVE_TRAVEL_TIME,
        IssueKind.MISSING_NAME,
        IssueKind.MISSING_COORDINATES,
        IssueKind.NULL_DURATION,
        IssueKind.MISSING_URL,
        IssueKind.INVALID_URL,
        IssueKind.MISSING_LANGUAGE,
        IssueKind.INVALID_LANGUAGE,
        IssueKind.DUPLICATE_OBJECT_ID,
        IssueKind.INVALID_STOP_LOCATION_TYPE_IN_TRIP,
        IssueKind.INVALID_STOP_PARENT,
        IssueKind.ID_NOT_ASCII,
    ],
    Severity.INFORMATION: [
        IssueKind.UNUSED_STOP,
        IssueKind.SLOW,
        IssueKind.EXCESSIVE_SPEED,
        IssueKind.CLOSE_STOPS,
        IssueKind.INVALID_ROUTE_TYPE,
        IssueKind.DUPLICATE_STOPS,
        IssueKind.EXTRA_FILE,
        IssueKind.UNUSED_SHAPE_ID,
        IssueKind.NO_SHAPE,
    ],
}

SEVERITIES: dict[IssueKind, Severity] = {
    kind: severity
    for severity, kinds in _KINDS_BY_SEVERITY.items()
    for kind in kinds
}

if set(SEVERITIES) != set(IssueKind):  # pragma: no cover
    _missing = sorted(set(IssueKind) - set(SEVERITIES))
    msg = f"Issue kinds without a severity: {_missing}"
    raise RuntimeError(msg)


# Issue Models -----------------------------------------------------------------
class RelatedObject(BaseModel):
    """Reference to another feed object involved in an issue."""

    model_config = ConfigDict(frozen=True)

    id: str
    object_type: ObjectType
    name: str = ""

    @classmethod
    def of(cls, obj: FeedRecord) -> "RelatedObject":
        """Reference a feed record."""
        return cls(
            id=obj.id, object_type=obj.object_type, name=obj.display_name
        )


class RelatedLine(BaseModel):
    """Offending line of a file."""

    model_config = ConfigDict(frozen=True)

    line_number: int
    headers: list[str] = Field(default_factory=list)
    values: list[str] = Field(default_factory=list)


class RelatedFile(BaseModel):
    """File an issue was found in."""

    model_config = ConfigDict(frozen=True)

    file_name: str
    line: RelatedLine | None = None


class Issue(BaseModel):
    """A single validation finding.

    Issues are immutable. The builder methods return modified copies:

        >>> issue = (
        ...     Issue.for_object(IssueKind.MISSING_NAME, stop)
        ...     .with_details("The stop has no name")
        ... )
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    kind: IssueKind
    object_id: str
    object_type: ObjectType | None = None
    object_name: str = ""
    related_objects: list[RelatedObject] = Field(default_factory=list)
    details: str | None = None
    related_file: RelatedFile | None = None
    geojson: dict[str, Any] | None = None

    @computed_field
    @property
    def severity(self) -> Severity:
        """Severity derived from the issue kind."""
        return SEVERITIES[self.kind]

    @classmethod
    def for_object(cls, kind: IssueKind, obj: FeedRecord) -> "Issue":
        """Create an issue about a feed record."""
        return cls(
            kind=kind,
            object_id=obj.id,
            object_type=obj.object_type,
            object_name=obj.display_name,
        )

    def with_details(self, details: str) -> "Issue":
        """Copy of the issue with a detail message."""
        return self.model_copy(update={"details": details})

    def with_name(self, name: str) -> "Issue":
        """Copy of the issue with another subject name."""
        return self.model_copy(update={"object_name": name})

    def with_related(self, *objects: FeedRecord | RelatedObject) -> "Issue":
        """Copy of the issue with more related objects."""
        related = list(self.related_objects)
        for obj in objects:
            if isinstance(obj, RelatedObject):
                related.append(obj)
            else:
                related.append(RelatedObject.of(obj))
        return self.model_copy(update={"related_objects": related})

    def with_related_file(self, related_file: RelatedFile) -> "Issue":
        """Copy of the issue pointing at a file."""
        return self.model_copy(update={"related_file": related_file})

    def with_geojson(self, geojson: dict[str, Any]) -> "Issue":
        """Copy of the issue with a geometry attachment."""
        return self.model_copy(update={"geojson": geojson})
