"""Canonical raw model of a transit feed."""
from .dataclass import FeedLoadError, RawFeed, TableLoadError
from .models import (
    TABLE_MODELS,
    AgencyModel,
    CalendarDateModel,
    CalendarModel,
    FareAttributeModel,
    FareRuleModel,
    FeedInfoModel,
    FeedRecord,
    PathwayModel,
    RouteModel,
    ShapePointModel,
    StopModel,
    StopTimeModel,
    TripModel,
)

__all__ = [
    "TABLE_MODELS",
    "AgencyModel",
    "CalendarDateModel",
    "CalendarModel",
    "FareAttributeModel",
    "FareRuleModel",
    "FeedInfoModel",
    "FeedLoadError",
    "FeedRecord",
    "PathwayModel",
    "RawFeed",
    "RouteModel",
    "ShapePointModel",
    "StopModel",
    "StopTimeModel",
    "TableLoadError",
    "TripModel",
]
