"""Summary statistics of a validated feed."""

import logging
from datetime import date
from importlib.metadata import PackageNotFoundError, version

import polars as pl
from pydantic import BaseModel, Field

from feed_canon.codebook.generic import Availability
from feed_canon.codebook.routes import TransportMode, route_type_to_mode
from feed_canon.codebook.stop_times import PickupDropOffType
from feed_canon.codebook.stops import LocationType
from feed_canon.codebook.trips import BikesAllowed

from .index import ModelIndex
from .issues import IssueKind

logger = logging.getLogger(__name__)

DISTRIBUTION = "transit-feed-validator"
DEFAULT_ROUTE_COLOR = "FFFFFF"
DEFAULT_ROUTE_TEXT_COLOR = "000000"


def installed_version() -> str:
    """Installed version of the validator."""
    try:
        return version(DISTRIBUTION)
    except PackageNotFoundError:
        logger.debug("%s is not installed", DISTRIBUTION)
        return "unknown"


class Metadata(BaseModel):
    """Aggregate description of a feed."""

    start_date: date | None = None
    end_date: date | None = None
    stops_count: int = 0
    stop_areas_count: int = 0
    stop_points_count: int = 0
    stops_with_wheelchair_info_count: int = 0
    lines_count: int = 0
    trips_count: int = 0
    trips_with_bike_info_count: int = 0
    trips_with_wheelchair_info_count: int = 0
    networks: list[str] = Field(default_factory=list)
    networks_start_end_dates: dict[str, tuple[date, date] | None] = Field(
        default_factory=dict
    )
    modes: list[TransportMode] = Field(default_factory=list)
    issues_count: dict[IssueKind, int] = Field(default_factory=dict)
    has_fares: bool = False
    has_shapes: bool = False
    has_pathways: bool = False
    lines_with_custom_color_count: int = 0
    some_stops_need_phone_agency: bool = False
    some_stops_need_phone_driver: bool = False
    validator_version: str = Field(default_factory=installed_version)


# Helpers ----------------------------------------------------------------------
def service_dates(index: ModelIndex) -> pl.DataFrame:
    """Boundary dates of every service.

    A service spans its calendar range plus the dates calendar_dates adds
    to it; removed dates never widen a range.

    Returns:
        DataFrame with columns service_id, date
    """
    rows = []
    for calendar in index.calendars.values():
        rows.append((calendar.service_id, calendar.start_date))
        rows.append((calendar.service_id, calendar.end_date))
    for service_id, dates in index.added_dates().items():
        rows.extend((service_id, d) for d in dates)
    return pl.DataFrame(
        rows, schema={"service_id": pl.Utf8, "date": pl.Date}, orient="row"
    )


def _network_dates(
    index: ModelIndex, dates: pl.DataFrame
) -> dict[str, tuple[date, date] | None]:
    """First and last date of service of each agency, by agency name."""
    rows = []
    for route in index.routes.values():
        agency = index.agency(route.agency_id)
        if agency is None:
            continue
        rows.extend(
            (agency.agency_name, trip.service_id)
            for trip in index.trips_of_route(route.route_id)
        )
    agency_services = pl.DataFrame(
        rows, schema={"network": pl.Utf8, "service_id": pl.Utf8}, orient="row"
    )
    spans = (
        agency_services.join(dates, on="service_id")
        .group_by("network")
        .agg(
            pl.col("date").min().alias("start"),
            pl.col("date").max().alias("end"),
        )
    )
    result: dict[str, tuple[date, date] | None] = {
        agency.agency_name: None for agency in index.records["agency"]
    }
    for network, start, end in spans.iter_rows():
        result[network] = (start, end)
    return result


def _has_wheelchair_info(index: ModelIndex, stop_id: str) -> bool:
    """Whether a stop, or its parent station, has wheelchair information."""
    stop = index.stops[stop_id]
    if stop.wheelchair_boarding != Availability.INFORMATION_NOT_AVAILABLE:
        return True
    parent = index.parent_of(stop_id)
    return parent is not None and parent.wheelchair_boarding in (
        Availability.AVAILABLE,
        Availability.NOT_AVAILABLE,
    )


def _stops_need(index: ModelIndex, kind: PickupDropOffType) -> bool:
    return any(
        st.pickup_type == kind or st.drop_off_type == kind
        for stop_times in index.stop_times.values()
        for st in stop_times
    )


# Summarizer -------------------------------------------------------------------
def summarize(index: ModelIndex, issues_count: dict[IssueKind, int]) -> Metadata:
    """Derive the metadata of a feed.

    Args:
        index: Model index of the feed
        issues_count: Uncapped number of issues per kind

    Returns:
        Metadata of the feed
    """
    dates = service_dates(index)
    start_date = dates["date"].min() if len(dates) > 0 else None
    end_date = dates["date"].max() if len(dates) > 0 else None

    stops = index.stops.values()
    routes = index.routes.values()
    trips = index.trips.values()

    modes = {route_type_to_mode(route.route_type) for route in routes}
    modes.discard(None)

    metadata = Metadata(
        start_date=start_date,
        end_date=end_date,
        stops_count=len(index.stops),
        stop_areas_count=sum(
            1 for s in stops if s.location_type == LocationType.STOP_AREA
        ),
        stop_points_count=sum(
            1 for s in stops if s.location_type == LocationType.STOP_POINT
        ),
        stops_with_wheelchair_info_count=sum(
            1 for stop_id in index.stops if _has_wheelchair_info(index, stop_id)
        ),
        lines_count=len(index.routes),
        trips_count=len(index.trips),
        trips_with_bike_info_count=sum(
            1 for t in trips if t.bikes_allowed != BikesAllowed.NO_BIKE_INFO
        ),
        trips_with_wheelchair_info_count=sum(
            1 for t in trips
            if t.wheelchair_accessible
            != Availability.INFORMATION_NOT_AVAILABLE
        ),
        networks=sorted({a.agency_name for a in index.records["agency"]}),
        networks_start_end_dates=_network_dates(index, dates),
        modes=sorted(modes),
        issues_count=dict(issues_count),
        has_fares=len(index.fare_attributes) > 0,
        has_shapes=len(index.shapes) > 0,
        has_pathways=len(index.records["pathways"]) > 0,
        lines_with_custom_color_count=sum(
            1 for r in routes
            if r.route_color.upper() != DEFAULT_ROUTE_COLOR
            or r.route_text_color.upper() != DEFAULT_ROUTE_TEXT_COLOR
        ),
        some_stops_need_phone_agency=_stops_need(
            index, PickupDropOffType.ARRANGE_BY_PHONE
        ),
        some_stops_need_phone_driver=_stops_need(
            index, PickupDropOffType.COORDINATE_WITH_DRIVER
        ),
    )
    logger.info(
        "Feed runs from %s to %s with %d lines",
        metadata.start_date, metadata.end_date, metadata.lines_count,
    )
    return metadata
