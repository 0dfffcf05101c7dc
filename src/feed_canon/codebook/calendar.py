"""Codebook enumerations for calendar_dates table."""

from enum import IntEnum


class ExceptionType(IntEnum):
    """exception_type value labels."""

    ADDED = 1
    REMOVED = 2
