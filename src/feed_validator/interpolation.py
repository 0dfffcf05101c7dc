"""Interpolation of missing stop times within a trip.

The first and last stop times of a trip are anchors and must carry both an
arrival and a departure. Every run of time-less stop times between two
anchors is filled in proportionally to the distance traveled along the
shape, or uniformly by stop count when distances are missing or unusable.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from feed_canon.models import StopTimeModel

logger = logging.getLogger(__name__)


class InterpolationError(Exception):
    """Raised when a trip's times cannot be interpolated."""


@dataclass(frozen=True)
class TimedStop:
    """A stop time of the interpolated timetable.

    Attributes:
        stop_id: Stop visited
        stop_sequence: Order of the visit in the trip
        arrival: Arrival in seconds after midnight
        departure: Departure in seconds after midnight
        interpolated: Whether the times were computed rather than scheduled
    """

    stop_id: str
    stop_sequence: int
    arrival: int
    departure: int
    interpolated: bool = False


def _usable_distances(
    distances: Sequence[float | None], start: int, end: int
) -> bool:
    """Whether distances between two anchors can drive interpolation."""
    span = distances[start : end + 1]
    if any(d is None for d in span):
        return False
    if span[-1] - span[0] <= 0:
        return False
    return all(b >= a for a, b in zip(span, span[1:], strict=False))


def needs_interpolation(stop_times: Sequence[StopTimeModel]) -> bool:
    """Whether an intermediate stop time of a trip has no time at all."""
    return any(
        st.arrival_time is None and st.departure_time is None
        for st in stop_times[1:-1]
    )


def fill_run(
    start_time: int,
    end_time: int,
    count: int,
    offsets: Sequence[float] | None = None,
) -> list[int]:
    """Compute the times of a run of stops between two anchors.

    Args:
        start_time: Departure at the anchor before the run
        end_time: Arrival at the anchor after the run
        count: Number of stops in the run
        offsets: Fraction of the anchor-to-anchor distance reached at each
            stop of the run, or None for uniform spacing

    Returns:
        One time per stop of the run
    """
    if offsets is None:
        offsets = [(k + 1) / (count + 1) for k in range(count)]
    duration = end_time - start_time
    return [start_time + round(duration * f) for f in offsets]


def interpolate_trip(
    stop_times: Sequence[StopTimeModel],
    distances: Sequence[float | None] | None = None,
) -> list[TimedStop]:
    """Build the complete timetable of a trip.

    The first and last stop times need both an arrival and a departure.
    An intermediate stop time with only one of them uses it for both.

    Args:
        stop_times: Stop times of the trip sorted by stop_sequence
        distances: Cumulative distance traveled at each stop time, or None

    Returns:
        One TimedStop per stop time

    Raises:
        InterpolationError: If the first or last stop time lacks an arrival
            or a departure
    """
    if not stop_times:
        return []

    for boundary in (stop_times[0], stop_times[-1]):
        if boundary.arrival_time is None or boundary.departure_time is None:
            msg = (
                "The first and last stop time of a trip cannot have empty "
                "departure/arrivals as they cannot be interpolated"
            )
            raise InterpolationError(msg)

    times: list[tuple[int, int] | None] = []
    for st in stop_times:
        arrival = st.arrival_time if st.arrival_time is not None else (
            st.departure_time
        )
        departure = st.departure_time if st.departure_time is not None else (
            st.arrival_time
        )
        times.append(None if arrival is None else (arrival, departure))

    if distances is None or len(distances) != len(stop_times):
        distances = [None] * len(stop_times)

    anchors = [i for i, t in enumerate(times) if t is not None]
    filled: dict[int, int] = {}
    for start, end in zip(anchors, anchors[1:], strict=False):
        count = end - start - 1
        if count == 0:
            continue
        offsets = None
        if _usable_distances(distances, start, end):
            total = distances[end] - distances[start]
            offsets = [
                (distances[k] - distances[start]) / total
                for k in range(start + 1, end)
            ]
        run = fill_run(times[start][1], times[end][0], count, offsets)
        if any(b < a for a, b in zip(run, run[1:], strict=False)):
            run = fill_run(times[start][1], times[end][0], count)
        for k, t in zip(range(start + 1, end), run, strict=True):
            filled[k] = t

    if filled:
        logger.debug(
            "Interpolated %d stop times of trip %s",
            len(filled), stop_times[0].trip_id,
        )

    timetable = []
    for i, st in enumerate(stop_times):
        if times[i] is not None:
            arrival, departure = times[i]
            timetable.append(
                TimedStop(st.stop_id, st.stop_sequence, arrival, departure)
            )
        else:
            t = filled[i]
            timetable.append(
                TimedStop(st.stop_id, st.stop_sequence, t, t, interpolated=True)
            )
    return timetable
