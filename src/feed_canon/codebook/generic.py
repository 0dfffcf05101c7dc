"""Codebook enumerations shared by several feed tables."""

from enum import IntEnum, StrEnum


class ObjectType(StrEnum):
    """Kind of feed object an issue can be attached to."""

    AGENCY = "agency"
    ROUTE = "route"
    TRIP = "trip"
    STOP = "stop"
    STOP_TIME = "stop_time"
    CALENDAR = "calendar"
    SHAPE = "shape"
    FARE = "fare"
    FEED_INFO = "feed_info"
    PATHWAY = "pathway"
    FILE = "file"


class Availability(IntEnum):
    """wheelchair_boarding / wheelchair_accessible value labels."""

    INFORMATION_NOT_AVAILABLE = 0
    AVAILABLE = 1
    NOT_AVAILABLE = 2
