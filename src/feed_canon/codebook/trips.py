"""Codebook enumerations for trips table."""

from enum import IntEnum


class BikesAllowed(IntEnum):
    """bikes_allowed value labels."""

    NO_BIKE_INFO = 0
    ALLOWED = 1
    NOT_ALLOWED = 2
