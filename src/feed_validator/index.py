"""Cross-referenced, read-only view over a raw feed.

Each table is validated row by row with its record model and stored as an
arena keyed by identifier. Relationships (trip to stop times, stop to
parent, route to trips, fare rule to fare) are identifier lookups into
those arenas.

A table whose rows cannot be decoded is *broken*: its arena stays empty
and the checks that need it are skipped. Broken tables and trips with
repeated stop sequences are summarized in a single UnloadableModel issue.
"""

import logging
import time
from collections import defaultdict
from dataclasses import dataclass, field

import polars as pl
from pydantic import ValidationError as PydanticValidationError

from feed_canon import RawFeed, TableLoadError
from feed_canon.codebook.calendar import ExceptionType
from feed_canon.codebook.routes import TransportMode, route_type_to_mode
from feed_canon.core.feed_field import get_unique_field
from feed_canon.models import (
    TABLE_MODELS,
    AgencyModel,
    CalendarDateModel,
    CalendarModel,
    FareAttributeModel,
    FareRuleModel,
    FeedInfoModel,
    FeedRecord,
    RouteModel,
    ShapePointModel,
    StopModel,
    StopTimeModel,
    TripModel,
)

from .interpolation import (
    InterpolationError,
    TimedStop,
    interpolate_trip,
    needs_interpolation,
)
from .issues import Issue, IssueKind, RelatedFile, RelatedLine
from .utils import haversine, valid_coordinates

logger = logging.getLogger(__name__)

UNLOADABLE_MESSAGE = (
    "A fatal error has occurred while loading the model, "
    "many rules have not been checked"
)


def _decode_table(
    table_name: str, df: pl.DataFrame
) -> tuple[list[FeedRecord], TableLoadError | None]:
    """Validate every row of a table with its record model.

    Returns:
        The decoded records, and the first decoding failure if any
    """
    model = TABLE_MODELS[table_name]
    records = []
    # Line 1 is the header row of the file
    for line_number, row in enumerate(df.iter_rows(named=True), start=2):
        try:
            records.append(model.model_validate(row))
        except PydanticValidationError as e:
            first = e.errors()[0]
            column = ".".join(str(loc) for loc in first["loc"])
            error = TableLoadError(
                file_name=f"{table_name}.txt",
                message=f"column '{column}': {first['msg']}",
                line_number=line_number,
                headers=list(df.columns),
                values=["" if v is None else str(v) for v in row.values()],
            )
            return [], error
    return records, None


@dataclass
class ModelIndex:
    """Queryable model of a feed, built once with ModelIndex.build()."""

    raw: RawFeed

    # Every decoded record per table, duplicates included
    records: dict[str, list[FeedRecord]] = field(default_factory=dict)

    # Arenas, first record wins for a duplicated identifier
    agencies: dict[str, AgencyModel] = field(default_factory=dict)
    routes: dict[str, RouteModel] = field(default_factory=dict)
    trips: dict[str, TripModel] = field(default_factory=dict)
    stops: dict[str, StopModel] = field(default_factory=dict)
    calendars: dict[str, CalendarModel] = field(default_factory=dict)
    fare_attributes: dict[str, FareAttributeModel] = field(
        default_factory=dict
    )
    shapes: dict[str, list[ShapePointModel]] = field(default_factory=dict)

    # Relations
    stop_times: dict[str, list[StopTimeModel]] = field(default_factory=dict)
    route_trips: dict[str, list[str]] = field(default_factory=dict)
    children: dict[str, list[str]] = field(default_factory=dict)

    # Derived data
    shape_distances: dict[str, list[float]] = field(default_factory=dict)
    timetables: dict[str, list[TimedStop]] = field(default_factory=dict)
    uninterpolable_trips: dict[str, str] = field(default_factory=dict)

    # Structural failures
    broken_tables: dict[str, TableLoadError] = field(default_factory=dict)
    corrupt_trips: dict[str, str] = field(default_factory=dict)

    @classmethod
    def build(cls, raw: RawFeed) -> "ModelIndex":
        """Build the index of a raw feed.

        Never raises on bad content: decoding failures mark tables as
        broken and the index is built from what remains.
        """
        start_time = time.time()
        index = cls(raw=raw)
        index._decode_tables()
        index._build_arenas()
        index._build_stop_times()
        index._build_shapes()
        index._build_timetables()

        logger.info(
            "Built model index: %d stops, %d routes, %d trips in %.2fs",
            len(index.stops), len(index.routes), len(index.trips),
            time.time() - start_time,
        )
        if index.broken_tables:
            logger.warning(
                "Broken tables: %s", ", ".join(sorted(index.broken_tables))
            )
        return index

    # Build steps --------------------------------------------------------------
    def _decode_tables(self) -> None:
        for table_name in RawFeed.table_names():
            self.records[table_name] = []
            if table_name in self.raw.load_errors:
                self.broken_tables[table_name] = self.raw.load_errors[
                    table_name
                ]
                continue
            df = self.raw.get_table(table_name)
            if df is None:
                continue
            records, error = _decode_table(table_name, df)
            if error is not None:
                logger.warning("Cannot decode %s", error)
                self.broken_tables[table_name] = error
                continue
            self.records[table_name] = records

    def _build_arenas(self) -> None:
        arenas = {
            "agency": self.agencies,
            "routes": self.routes,
            "trips": self.trips,
            "stops": self.stops,
            "calendar": self.calendars,
            "fare_attributes": self.fare_attributes,
        }
        for table_name, arena in arenas.items():
            id_field = get_unique_field(TABLE_MODELS[table_name])
            for record in self.records[table_name]:
                arena.setdefault(getattr(record, id_field), record)

        for trip in self.trips.values():
            self.route_trips.setdefault(trip.route_id, []).append(
                trip.trip_id
            )
        for stop in self.stops.values():
            if stop.parent_station:
                self.children.setdefault(stop.parent_station, []).append(
                    stop.stop_id
                )

    def _build_stop_times(self) -> None:
        grouped: dict[str, list[StopTimeModel]] = defaultdict(list)
        for st in self.records["stop_times"]:
            grouped[st.trip_id].append(st)

        for trip_id, stop_times in grouped.items():
            stop_times.sort(key=lambda st: st.stop_sequence)
            for prev, st in zip(stop_times, stop_times[1:], strict=False):
                if prev.stop_sequence == st.stop_sequence:
                    self.corrupt_trips[trip_id] = (
                        f"trip {trip_id} has duplicate stop_sequence "
                        f"{st.stop_sequence}"
                    )
                    logger.debug("%s", self.corrupt_trips[trip_id])
                    break
            self.stop_times[trip_id] = stop_times

    def _build_shapes(self) -> None:
        grouped: dict[str, list[ShapePointModel]] = defaultdict(list)
        for point in self.records["shapes"]:
            grouped[point.shape_id].append(point)

        for shape_id, points in grouped.items():
            points.sort(key=lambda p: p.shape_pt_sequence)
            self.shapes[shape_id] = points
            if all(p.shape_dist_traveled is not None for p in points):
                self.shape_distances[shape_id] = [
                    p.shape_dist_traveled for p in points
                ]
                continue
            distances = [0.0]
            for a, b in zip(points, points[1:], strict=False):
                step = 0.0
                if valid_coordinates(
                    a.shape_pt_lat, a.shape_pt_lon
                ) and valid_coordinates(b.shape_pt_lat, b.shape_pt_lon):
                    step = haversine(
                        a.shape_pt_lat, a.shape_pt_lon,
                        b.shape_pt_lat, b.shape_pt_lon,
                    )
                distances.append(distances[-1] + step)
            self.shape_distances[shape_id] = distances

    def _trip_distances(
        self,
        trip_id: str,
        stop_times: list[StopTimeModel],
        projections: dict[
            tuple[str, tuple[str, ...]], list[float | None] | None
        ],
    ) -> list[float | None] | None:
        """Distance traveled at each stop time of a trip, if known.

        Uses shape_dist_traveled of the stop times when all are set, else
        projects each stop on the nearest shape vertex, searching forward
        from the previous stop's vertex. Projections are memoized in
        ``projections`` by shape and stop pattern.
        """
        if all(st.shape_dist_traveled is not None for st in stop_times):
            return [st.shape_dist_traveled for st in stop_times]

        trip = self.trips.get(trip_id)
        if trip is None or not trip.shape_id:
            return None
        key = (trip.shape_id, tuple(st.stop_id for st in stop_times))
        if key not in projections:
            projections[key] = self._project_stops(trip.shape_id, key[1])
        return projections[key]

    def _project_stops(
        self, shape_id: str, stop_ids: tuple[str, ...]
    ) -> list[float | None] | None:
        points = self.shapes.get(shape_id)
        if not points:
            return None
        cumulated = self.shape_distances[shape_id]

        distances: list[float | None] = []
        cursor = 0
        for stop_id in stop_ids:
            stop = self.stops.get(stop_id)
            if stop is None or not stop.has_coordinates:
                distances.append(None)
                continue
            best, best_distance = None, float("inf")
            for k in range(cursor, len(points)):
                p = points[k]
                if not valid_coordinates(p.shape_pt_lat, p.shape_pt_lon):
                    continue
                d = haversine(
                    stop.stop_lat, stop.stop_lon, p.shape_pt_lat, p.shape_pt_lon
                )
                if d < best_distance:
                    best, best_distance = k, d
            if best is None:
                distances.append(None)
                continue
            cursor = best
            distances.append(cumulated[best])
        return distances

    def _build_timetables(self) -> None:
        projections: dict[
            tuple[str, tuple[str, ...]], list[float | None] | None
        ] = {}
        for trip_id, stop_times in self.stop_times.items():
            if trip_id in self.corrupt_trips:
                continue
            distances = None
            if needs_interpolation(stop_times):
                distances = self._trip_distances(
                    trip_id, stop_times, projections
                )
            try:
                self.timetables[trip_id] = interpolate_trip(
                    stop_times, distances
                )
            except InterpolationError as e:
                self.uninterpolable_trips[trip_id] = str(e)

    # Lookups ------------------------------------------------------------------
    def table(self, table_name: str) -> pl.DataFrame | None:
        """Raw DataFrame of a table, None if absent."""
        return self.raw.get_table(table_name)

    def is_broken(self, table_name: str) -> bool:
        """Whether a table failed to decode."""
        return table_name in self.broken_tables

    def is_loaded(self, table_name: str) -> bool:
        """Whether a table is present and decoded."""
        return (
            self.raw.get_table(table_name) is not None
            and not self.is_broken(table_name)
        )

    def stop(self, stop_id: str) -> StopModel | None:  # noqa: D102
        return self.stops.get(stop_id)

    def route(self, route_id: str) -> RouteModel | None:  # noqa: D102
        return self.routes.get(route_id)

    def trip(self, trip_id: str) -> TripModel | None:  # noqa: D102
        return self.trips.get(trip_id)

    def agency(self, agency_id: str | None) -> AgencyModel | None:
        """Agency by id; a feed with a single agency may omit the id."""
        if agency_id:
            return self.agencies.get(agency_id)
        agencies = self.records["agency"]
        if len(agencies) == 1:
            return agencies[0]
        return None

    def shape_points(self, shape_id: str) -> list[ShapePointModel]:
        """Points of a shape in sequence order."""
        return self.shapes.get(shape_id, [])

    def stop_times_of(self, trip_id: str) -> list[StopTimeModel]:
        """Stop times of a trip in sequence order."""
        return self.stop_times.get(trip_id, [])

    def timetable(self, trip_id: str) -> list[TimedStop] | None:
        """Interpolated timetable, None for corrupt or uninterpolable trips."""
        return self.timetables.get(trip_id)

    def parent_of(self, stop_id: str) -> StopModel | None:
        """Parent station of a stop, None if unset or unresolved."""
        stop = self.stops.get(stop_id)
        if stop is None or not stop.parent_station:
            return None
        return self.stops.get(stop.parent_station)

    def trips_of_route(self, route_id: str) -> list[TripModel]:  # noqa: D102
        return [self.trips[t] for t in self.route_trips.get(route_id, [])]

    def fare_attribute_of_rule(
        self, rule: FareRuleModel
    ) -> FareAttributeModel | None:
        """Fare attribute a fare rule belongs to."""
        return self.fare_attributes.get(rule.fare_id)

    @property
    def calendar_dates(self) -> list[CalendarDateModel]:  # noqa: D102
        return self.records["calendar_dates"]

    @property
    def fare_rules(self) -> list[FareRuleModel]:  # noqa: D102
        return self.records["fare_rules"]

    @property
    def feed_info(self) -> list[FeedInfoModel]:  # noqa: D102
        return self.records["feed_info"]

    def service_ids(self) -> set[str]:
        """Services defined by calendar or calendar_dates."""
        return set(self.calendars) | {cd.service_id for cd in self.calendar_dates}

    def added_dates(self) -> dict[str, list]:
        """Dates added to each service by calendar_dates."""
        added = defaultdict(list)
        for cd in self.calendar_dates:
            if cd.exception_type == ExceptionType.ADDED:
                added[cd.service_id].append(cd.date)
        return dict(added)

    def mode_of_trip(self, trip_id: str) -> TransportMode | None:
        """Transport mode of a trip's route, None if non-standard."""
        trip = self.trips.get(trip_id)
        if trip is None:
            return None
        route = self.routes.get(trip.route_id)
        if route is None:
            return None
        return route_type_to_mode(route.route_type)

    # Structural issue -------------------------------------------------------
    def unloadable_issue(self) -> Issue | None:
        """Single issue summarizing broken tables and corrupt trips."""
        if not self.broken_tables and not self.corrupt_trips:
            return None

        failures = [str(e) for e in self.broken_tables.values()]
        failures.extend(self.corrupt_trips.values())
        issue = Issue(
            kind=IssueKind.UNLOADABLE_MODEL,
            object_id=UNLOADABLE_MESSAGE,
            details="; ".join(failures),
        )

        if self.broken_tables:
            first = next(iter(self.broken_tables.values()))
            line = None
            if first.line_number is not None:
                line = RelatedLine(
                    line_number=first.line_number,
                    headers=first.headers,
                    values=first.values,
                )
            issue = issue.with_related_file(
                RelatedFile(file_name=first.file_name, line=line)
            )
        return issue
