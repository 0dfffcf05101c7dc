"""Codebook enumerations for routes table.

Route types come in two flavours: the basic set of the reference
(0-7, 11, 12) and the extended hierarchical set (100-1799) where the
hundreds digit selects the family. Both collapse to a TransportMode,
which is what speed ceilings are configured against.
"""

from enum import StrEnum


class TransportMode(StrEnum):
    """Transport mode used to pick a maximum speed."""

    TRAM = "tram"
    SUBWAY = "subway"
    RAIL = "rail"
    BUS = "bus"
    FERRY = "ferry"
    CABLE_CAR = "cable_car"
    GONDOLA = "gondola"
    FUNICULAR = "funicular"
    COACH = "coach"
    AIR = "air"
    TAXI = "taxi"
    OTHER = "other"


BASIC_ROUTE_TYPES: dict[int, TransportMode] = {
    0: TransportMode.TRAM,
    1: TransportMode.SUBWAY,
    2: TransportMode.RAIL,
    3: TransportMode.BUS,
    4: TransportMode.FERRY,
    5: TransportMode.CABLE_CAR,
    6: TransportMode.GONDOLA,
    7: TransportMode.FUNICULAR,
    11: TransportMode.BUS,  # trolleybus
    12: TransportMode.RAIL,  # monorail
}

# Extended route types, keyed by hundreds
EXTENDED_ROUTE_FAMILIES: dict[int, TransportMode] = {
    1: TransportMode.RAIL,
    2: TransportMode.COACH,
    3: TransportMode.RAIL,
    4: TransportMode.SUBWAY,
    5: TransportMode.SUBWAY,
    6: TransportMode.SUBWAY,
    7: TransportMode.BUS,
    8: TransportMode.BUS,
    9: TransportMode.TRAM,
    10: TransportMode.FERRY,
    11: TransportMode.AIR,
    12: TransportMode.FERRY,
    13: TransportMode.GONDOLA,
    14: TransportMode.FUNICULAR,
    15: TransportMode.TAXI,
    16: TransportMode.OTHER,
    17: TransportMode.OTHER,
}


def route_type_to_mode(route_type: int | None) -> TransportMode | None:
    """Map a route_type code to its transport mode.

    Args:
        route_type: Raw route_type value

    Returns:
        The transport mode, or None if the code is not a standard one
    """
    if route_type is None:
        return None
    if route_type in BASIC_ROUTE_TYPES:
        return BASIC_ROUTE_TYPES[route_type]
    if 100 <= route_type < 1800:  # noqa: PLR2004
        return EXTENDED_ROUTE_FAMILIES.get(route_type // 100)
    return None
