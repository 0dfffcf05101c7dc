"""Record models for transit feed tables.

This module uses Pydantic for data validation.

Models represent individual records (rows) rather than entire DataFrames.
The model index validates Polars DataFrames by iterating through rows
and keeps the resulting records in lookups keyed by identifier.

Models are lenient on purpose: identifiers are plain strings that may be
empty and most columns are optional, so that content problems surface as
validation issues instead of decoding failures.
"""

import datetime as dt
from datetime import date, datetime
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from .codebook.generic import Availability, ObjectType
from .codebook.stop_times import PickupDropOffType
from .codebook.stops import LocationType
from .codebook.trips import BikesAllowed
from .core.feed_field import feed_field

SECONDS_PER_HOUR = 3600
SECONDS_PER_MINUTE = 60


def parse_time(value: Any) -> int | None:  # noqa: ANN401
    """Parse a stop time into seconds after midnight.

    Accepts "HH:MM:SS" (hours may exceed 23 for trips running past
    midnight), "H:MM:SS" and integer seconds.

    Raises:
        ValueError: If the value is neither a time string nor an integer
    """
    if value is None or value == "":
        return None
    if isinstance(value, int):
        return value
    parts = str(value).strip().split(":")
    if len(parts) != 3 or not all(p.isdigit() for p in parts):  # noqa: PLR2004
        msg = f"invalid time '{value}', expected HH:MM:SS"
        raise ValueError(msg)
    hours, minutes, seconds = (int(p) for p in parts)
    return hours * SECONDS_PER_HOUR + minutes * SECONDS_PER_MINUTE + seconds


def format_time(seconds: int | None) -> str:
    """Format seconds after midnight as HH:MM:SS."""
    if seconds is None:
        return "--:--:--"
    hours, rest = divmod(seconds, SECONDS_PER_HOUR)
    minutes, secs = divmod(rest, SECONDS_PER_MINUTE)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def parse_date(value: Any) -> date | None:  # noqa: ANN401
    """Parse a YYYYMMDD service date."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value), "%Y%m%d").date()  # noqa: DTZ007


class FeedRecord(BaseModel):
    """Base class for feed records.

    Blank cells are dropped before validation so that defaults apply,
    and numeric identifiers are coerced to strings.
    """

    model_config = ConfigDict(
        coerce_numbers_to_str=True,
        extra="ignore",
        frozen=True,
    )

    object_type: ClassVar[ObjectType]

    @model_validator(mode="before")
    @classmethod
    def _drop_blank_cells(cls, data: Any) -> Any:  # noqa: ANN401
        if isinstance(data, dict):
            return {
                k: v for k, v in data.items()
                if v is not None and not (isinstance(v, str) and v == "")
            }
        return data

    @property
    def id(self) -> str:
        """Identifier of the record."""
        return ""

    @property
    def display_name(self) -> str:
        """Human readable name used in issues."""
        return self.id


# Data Models ------------------------------------------------------------------
class AgencyModel(FeedRecord):
    """Transit agency."""

    object_type: ClassVar[ObjectType] = ObjectType.AGENCY

    agency_id: str = feed_field(unique=True, default="")
    agency_name: str = ""
    agency_url: str = ""
    agency_timezone: str = ""
    agency_lang: str | None = None

    @property
    def id(self) -> str:  # noqa: D102
        return self.agency_id

    @property
    def display_name(self) -> str:  # noqa: D102
        return self.agency_name


class RouteModel(FeedRecord):
    """Route served by an agency."""

    object_type: ClassVar[ObjectType] = ObjectType.ROUTE

    route_id: str = feed_field(unique=True, default="")
    agency_id: str | None = feed_field(fk_to="agency.agency_id", default=None)
    route_short_name: str = ""
    route_long_name: str = ""
    route_type: int
    route_color: str = "FFFFFF"
    route_text_color: str = "000000"

    @property
    def id(self) -> str:  # noqa: D102
        return self.route_id

    @property
    def display_name(self) -> str:  # noqa: D102
        return self.route_long_name or self.route_short_name


class TripModel(FeedRecord):
    """Trip of a route on a service."""

    object_type: ClassVar[ObjectType] = ObjectType.TRIP

    trip_id: str = feed_field(unique=True, default="")
    route_id: str = feed_field(fk_to="routes.route_id", default="")
    service_id: str = feed_field(fk_to="calendar.service_id", default="")
    shape_id: str | None = feed_field(
        fk_to="shapes.shape_id", strict_fk=False, default=None
    )
    wheelchair_accessible: Availability = Availability.INFORMATION_NOT_AVAILABLE
    bikes_allowed: BikesAllowed = BikesAllowed.NO_BIKE_INFO

    @property
    def id(self) -> str:  # noqa: D102
        return self.trip_id

    @property
    def display_name(self) -> str:  # noqa: D102
        return f"route id: {self.route_id}, service id: {self.service_id}"


class StopModel(FeedRecord):
    """Stop, station, entrance, generic node or boarding area."""

    object_type: ClassVar[ObjectType] = ObjectType.STOP

    stop_id: str = feed_field(unique=True, default="")
    stop_name: str = ""
    stop_lat: float | None = None
    stop_lon: float | None = None
    location_type: LocationType = LocationType.STOP_POINT
    parent_station: str | None = feed_field(
        fk_to="stops.stop_id", default=None
    )
    wheelchair_boarding: Availability = Availability.INFORMATION_NOT_AVAILABLE

    @property
    def id(self) -> str:  # noqa: D102
        return self.stop_id

    @property
    def display_name(self) -> str:  # noqa: D102
        return self.stop_name

    @property
    def has_coordinates(self) -> bool:
        """Whether both coordinates are set and not null-island zeros."""
        return (
            self.stop_lat is not None
            and self.stop_lon is not None
            and self.stop_lat != 0.0
            and self.stop_lon != 0.0
        )


class StopTimeModel(FeedRecord):
    """Scheduled visit of a trip at a stop."""

    object_type: ClassVar[ObjectType] = ObjectType.STOP_TIME

    trip_id: str = feed_field(fk_to="trips.trip_id", default="")
    stop_id: str = feed_field(fk_to="stops.stop_id", default="")
    stop_sequence: int = feed_field(ge=0)
    arrival_time: int | None = None
    departure_time: int | None = None
    pickup_type: PickupDropOffType = PickupDropOffType.REGULAR
    drop_off_type: PickupDropOffType = PickupDropOffType.REGULAR
    continuous_pickup: PickupDropOffType | None = None
    continuous_drop_off: PickupDropOffType | None = None
    shape_dist_traveled: float | None = None

    @field_validator("arrival_time", "departure_time", mode="before")
    @classmethod
    def _parse_time(cls, value: Any) -> int | None:  # noqa: ANN401
        return parse_time(value)

    @property
    def id(self) -> str:  # noqa: D102
        return f"{self.trip_id}:{self.stop_sequence}"


class CalendarModel(FeedRecord):
    """Weekly service pattern over a date range."""

    object_type: ClassVar[ObjectType] = ObjectType.CALENDAR

    service_id: str = feed_field(unique=True, default="")
    monday: bool = False
    tuesday: bool = False
    wednesday: bool = False
    thursday: bool = False
    friday: bool = False
    saturday: bool = False
    sunday: bool = False
    start_date: date
    end_date: date

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> date | None:  # noqa: ANN401
        return parse_date(value)

    @property
    def id(self) -> str:  # noqa: D102
        return self.service_id


class CalendarDateModel(FeedRecord):
    """Service exception on a single date."""

    object_type: ClassVar[ObjectType] = ObjectType.CALENDAR

    service_id: str = ""
    date: dt.date
    exception_type: int

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> dt.date | None:  # noqa: ANN401
        return parse_date(value)

    @property
    def id(self) -> str:  # noqa: D102
        return self.service_id


class ShapePointModel(FeedRecord):
    """Point of a shape polyline."""

    object_type: ClassVar[ObjectType] = ObjectType.SHAPE

    shape_id: str = ""
    shape_pt_lat: float | None = None
    shape_pt_lon: float | None = None
    shape_pt_sequence: int = feed_field(ge=0)
    shape_dist_traveled: float | None = None

    @property
    def id(self) -> str:  # noqa: D102
        return self.shape_id


class FareAttributeModel(FeedRecord):
    """Fare price and transfer policy."""

    object_type: ClassVar[ObjectType] = ObjectType.FARE

    fare_id: str = feed_field(unique=True, default="")
    price: str = ""
    currency_type: str = ""
    payment_method: int | None = None
    transfers: int | None = None
    transfer_duration: int | None = None

    @property
    def id(self) -> str:  # noqa: D102
        return self.fare_id


class FareRuleModel(FeedRecord):
    """Link between a fare and the routes it applies to."""

    object_type: ClassVar[ObjectType] = ObjectType.FARE

    fare_id: str = feed_field(
        fk_to="fare_attributes.fare_id", default=""
    )
    route_id: str | None = feed_field(fk_to="routes.route_id", default=None)

    @property
    def id(self) -> str:  # noqa: D102
        return self.fare_id


class FeedInfoModel(FeedRecord):
    """Publisher information."""

    object_type: ClassVar[ObjectType] = ObjectType.FEED_INFO

    feed_publisher_name: str = ""
    feed_publisher_url: str = ""
    feed_lang: str = ""

    @property
    def display_name(self) -> str:  # noqa: D102
        return self.feed_publisher_name


class PathwayModel(FeedRecord):
    """Pathway between two locations of a station."""

    object_type: ClassVar[ObjectType] = ObjectType.PATHWAY

    pathway_id: str = feed_field(unique=True, default="")
    from_stop_id: str = ""
    to_stop_id: str = ""

    @property
    def id(self) -> str:  # noqa: D102
        return self.pathway_id


# Table name -> record model
TABLE_MODELS: dict[str, type[FeedRecord]] = {
    "agency": AgencyModel,
    "routes": RouteModel,
    "trips": TripModel,
    "stops": StopModel,
    "stop_times": StopTimeModel,
    "calendar": CalendarModel,
    "calendar_dates": CalendarDateModel,
    "shapes": ShapePointModel,
    "fare_attributes": FareAttributeModel,
    "fare_rules": FareRuleModel,
    "feed_info": FeedInfoModel,
    "pathways": PathwayModel,
}
