"""Codebook enumerations for stop_times table."""

from enum import IntEnum


class PickupDropOffType(IntEnum):
    """pickup_type / drop_off_type value labels."""

    REGULAR = 0
    NOT_AVAILABLE = 1
    ARRANGE_BY_PHONE = 2
    COORDINATE_WITH_DRIVER = 3
