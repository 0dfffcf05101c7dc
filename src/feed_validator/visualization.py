"""GeoJSON attachments for issues.

Each issue about a located object gets a FeatureCollection with one
feature per subject or related geometry (stops as points, shapes and trips
as lines) and, when the issue has details, a geometry-less feature
carrying them.
"""

from typing import Any

from feed_canon.codebook.generic import ObjectType

from .index import ModelIndex
from .issues import Issue


def _feature(
    geometry: dict[str, Any] | None, properties: dict[str, Any]
) -> dict[str, Any]:
    return {"type": "Feature", "geometry": geometry, "properties": properties}


def stop_geometry(index: ModelIndex, stop_id: str) -> dict[str, Any] | None:
    """Point of a stop, None if the stop is unknown or not located."""
    stop = index.stop(stop_id)
    if stop is None or not stop.has_coordinates:
        return None
    return {"type": "Point", "coordinates": [stop.stop_lon, stop.stop_lat]}


def shape_geometry(index: ModelIndex, shape_id: str) -> dict[str, Any] | None:
    """Line of a shape, None with fewer than two located points."""
    coordinates = [
        [p.shape_pt_lon, p.shape_pt_lat]
        for p in index.shape_points(shape_id)
        if p.shape_pt_lat is not None and p.shape_pt_lon is not None
    ]
    if len(coordinates) < 2:  # noqa: PLR2004
        return None
    return {"type": "LineString", "coordinates": coordinates}


def trip_geometry(index: ModelIndex, trip_id: str) -> dict[str, Any] | None:
    """Line of a trip: its shape, else the line through its stops."""
    trip = index.trip(trip_id)
    if trip is None:
        return None
    if trip.shape_id:
        geometry = shape_geometry(index, trip.shape_id)
        if geometry is not None:
            return geometry
    coordinates = []
    for st in index.stop_times_of(trip_id):
        point = stop_geometry(index, st.stop_id)
        if point is not None:
            coordinates.append(point["coordinates"])
    if len(coordinates) < 2:  # noqa: PLR2004
        return None
    return {"type": "LineString", "coordinates": coordinates}


def geometry_of(
    index: ModelIndex, object_id: str, object_type: ObjectType | None
) -> dict[str, Any] | None:
    """Geometry of a feed object, None for kinds without geometry."""
    if object_type == ObjectType.STOP:
        return stop_geometry(index, object_id)
    if object_type == ObjectType.SHAPE:
        return shape_geometry(index, object_id)
    if object_type == ObjectType.TRIP:
        return trip_geometry(index, object_id)
    return None


def add_visualization(issue: Issue, index: ModelIndex) -> Issue:
    """Copy of an issue with its GeoJSON attachment.

    Issues with neither a located subject nor located related objects are
    returned unchanged.
    """
    features = []
    geometry = geometry_of(index, issue.object_id, issue.object_type)
    if geometry is not None:
        features.append(
            _feature(
                geometry,
                {"id": issue.object_id, "object_type": issue.object_type,
                 "name": issue.object_name},
            )
        )
    for related in issue.related_objects:
        geometry = geometry_of(index, related.id, related.object_type)
        if geometry is not None:
            features.append(
                _feature(
                    geometry,
                    {"id": related.id, "object_type": related.object_type,
                     "name": related.name},
                )
            )
    if not features:
        return issue

    if issue.details:
        features.append(_feature(None, {"details": issue.details}))
    return issue.with_geojson({"type": "FeatureCollection", "features": features})
