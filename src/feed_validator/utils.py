"""Geospatial and kinematic helpers."""

import math

import polars as pl

EARTH_RADIUS = 6371000.0  # Earth radius (meters)


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points, in meters.

    The intermediate term is clamped to [0, 1] so that rounding at
    coincident or antipodal points never leaves the domain of asin.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dlat = phi2 - phi1
    dlon = math.radians(lon2) - math.radians(lon1)
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlon / 2) ** 2
    )
    a = min(1.0, max(0.0, a))
    return 2 * EARTH_RADIUS * math.asin(math.sqrt(a))


def expr_haversine(
    lat1: pl.Expr,
    lon1: pl.Expr,
    lat2: pl.Expr,
    lon2: pl.Expr,
) -> pl.Expr:
    """Return a Polars expression for Haversine distance in meters."""
    dlat = lat2.radians() - lat1.radians()
    dlon = lon2.radians() - lon1.radians()
    a = (dlat / 2).sin().pow(
        2
    ) + lat1.radians().cos() * lat2.radians().cos() * (dlon / 2).sin().pow(2)

    return 2 * EARTH_RADIUS * a.clip(0.0, 1.0).sqrt().arcsin()


def speed_kmh(distance: float, duration: int) -> float:
    """Speed in km/h for a distance in meters covered in seconds.

    Raises:
        ValueError: If the duration is not positive
    """
    if duration <= 0:
        msg = f"duration must be positive, got {duration}"
        raise ValueError(msg)
    return distance / duration * 3.6


def valid_coordinates(lat: float | None, lon: float | None) -> bool:
    """Whether a coordinate pair is set and within WGS84 bounds."""
    if lat is None or lon is None:
        return False
    if math.isnan(lat) or math.isnan(lon):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0  # noqa: PLR2004
