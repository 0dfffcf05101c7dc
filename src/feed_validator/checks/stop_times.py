"""Temporal and kinematic checks on the stop times of trips."""

import logging

from feed_canon.models import StopModel, TripModel, format_time
from feed_validator.index import ModelIndex
from feed_validator.interpolation import TimedStop
from feed_validator.issues import Issue, IssueKind
from feed_validator.rules import RuleConfig
from feed_validator.utils import haversine, speed_kmh

from . import check

logger = logging.getLogger(__name__)


@check(
    requires=("stop_times", "trips"),
    on_error=IssueKind.IMPOSSIBLE_TO_INTERPOLATE_STOP_TIMES,
)
def check_interpolation(index: ModelIndex, rules: RuleConfig) -> list[Issue]:  # noqa: ARG001
    """Report trips whose first or last stop time misses a time."""
    issues = []
    for trip_id, message in index.uninterpolable_trips.items():
        trip = index.trip(trip_id)
        if trip is None:
            continue
        issues.append(
            Issue.for_object(
                IssueKind.IMPOSSIBLE_TO_INTERPOLATE_STOP_TIMES, trip
            ).with_details(message)
        )
    return issues


@check(
    requires=("stop_times", "trips"),
    on_error=IssueKind.NEGATIVE_TRAVEL_TIME,
)
def check_stop_time_order(index: ModelIndex, rules: RuleConfig) -> list[Issue]:  # noqa: ARG001
    """Report stop times departing before they arrive."""
    issues = []
    for trip_id, stop_times in index.stop_times.items():
        trip = index.trip(trip_id)
        if trip is None:
            continue
        issues.extend(
            Issue.for_object(IssueKind.NEGATIVE_TRAVEL_TIME, trip).with_details(
                "Departure time before arrival time at stop sequence "
                f"{st.stop_sequence}"
            )
            for st in stop_times
            if st.arrival_time is not None
            and st.departure_time is not None
            and st.arrival_time > st.departure_time
        )
    return issues


def _segments(index: ModelIndex, *, timed: bool = True):  # noqa: ANN202
    """Yield (trip, departure, arrival, stop a, stop b, distance).

    With timed=True the interpolated timetables are walked, otherwise the
    raw stop times of every trip. Segments whose stops are unknown or lack
    coordinates are skipped.
    """
    sequences = index.timetables if timed else index.stop_times
    for trip_id, timetable in sequences.items():
        trip = index.trip(trip_id)
        if trip is None:
            continue
        for a, b in zip(timetable, timetable[1:], strict=False):
            stop_a = index.stop(a.stop_id)
            stop_b = index.stop(b.stop_id)
            if stop_a is None or stop_b is None:
                continue
            if not stop_a.has_coordinates or not stop_b.has_coordinates:
                continue
            distance = haversine(
                stop_a.stop_lat, stop_a.stop_lon,
                stop_b.stop_lat, stop_b.stop_lon,
            )
            yield trip, a, b, stop_a, stop_b, distance


def _segment_details(a: TimedStop, b: TimedStop, what: str) -> str:
    return (
        f"{what} between stop sequence {a.stop_sequence} "
        f"(departure {format_time(a.departure)}) and {b.stop_sequence} "
        f"(arrival {format_time(b.arrival)})"
    )


def _segment_issue(
    kind: IssueKind,
    index: ModelIndex,
    trip: TripModel,
    stop_a: StopModel,
    stop_b: StopModel,
) -> Issue:
    """Issue about stop a, with stop b, the trip and its route attached."""
    issue = Issue.for_object(kind, stop_a).with_related(stop_b, trip)
    route = index.route(trip.route_id)
    if route is not None:
        issue = issue.with_related(route)
    return issue


@check(
    requires=("stops", "stop_times", "trips", "routes"),
    on_error=IssueKind.EXCESSIVE_SPEED,
)
def check_travel_speeds(index: ModelIndex, rules: RuleConfig) -> list[Issue]:
    """Report implausible travel times between consecutive stops.

    Times are taken from the interpolated timetable; the speed ceiling
    depends on the transport mode of the trip's route.
    """
    issues = []
    for trip, a, b, stop_a, stop_b, distance in _segments(index):
        duration = b.arrival - a.departure

        if duration < 0:
            issues.append(
                _segment_issue(
                    IssueKind.NEGATIVE_TRAVEL_TIME, index, trip, stop_a, stop_b
                ).with_details(
                    _segment_details(a, b, f"Negative travel time of {duration}s")
                )
            )
            continue

        if duration == 0:
            if distance > 0:
                issues.append(
                    _segment_issue(
                        IssueKind.NULL_DURATION, index, trip, stop_a, stop_b
                    ).with_details(
                        _segment_details(
                            a, b, f"Null duration to travel {distance:.0f} m"
                        )
                    )
                )
            continue

        speed = speed_kmh(distance, duration)
        max_speed = rules.max_speed(index.mode_of_trip(trip.trip_id))
        if speed > max_speed:
            issues.append(
                _segment_issue(
                    IssueKind.EXCESSIVE_SPEED, index, trip, stop_a, stop_b
                ).with_details(
                    _segment_details(
                        a, b,
                        f"Speed of {speed:.1f} km/h (maximum {max_speed:g})",
                    )
                )
            )
        elif speed < rules.slow_speed and distance >= rules.close_stops_distance:
            issues.append(
                _segment_issue(
                    IssueKind.SLOW, index, trip, stop_a, stop_b
                ).with_details(
                    _segment_details(a, b, f"Speed of {speed:.2f} km/h")
                )
            )
    logger.debug("%d travel speed issues", len(issues))
    return issues


@check(
    requires=("stops", "stop_times", "trips"),
    on_error=IssueKind.CLOSE_STOPS,
)
def check_close_stops(index: ModelIndex, rules: RuleConfig) -> list[Issue]:
    """Report consecutive stops of a trip that are too close to each other."""
    return [
        _segment_issue(
            IssueKind.CLOSE_STOPS, index, trip, stop_a, stop_b
        ).with_details(
            f"Stops {distance:.1f} m apart between stop sequence "
            f"{a.stop_sequence} and {b.stop_sequence}"
        )
        for trip, a, b, stop_a, stop_b, distance in _segments(
            index, timed=False
        )
        if stop_a.stop_id != stop_b.stop_id
        and distance < rules.close_stops_distance
    ]
