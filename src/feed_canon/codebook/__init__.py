"""Codebook enumerations for transit feed tables.

This package contains enumerations for the coded columns of a feed.
Each table has its own module with the enumerations it uses.

Available modules:
- generic: Object types and availability flags shared across tables
- stops: Stop location types
- routes: Route types and transport modes
- trips: Bike information
- stop_times: Pickup and drop-off types
- calendar: Calendar date exception types
"""

from . import calendar, generic, routes, stop_times, stops, trips

__all__ = ["calendar", "generic", "routes", "stop_times", "stops", "trips"]
