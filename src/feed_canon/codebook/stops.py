"""Codebook enumerations for stops table."""

from enum import IntEnum


class LocationType(IntEnum):
    """location_type value labels."""

    STOP_POINT = 0
    STOP_AREA = 1
    STATION_ENTRANCE = 2
    GENERIC_NODE = 3
    BOARDING_AREA = 4
