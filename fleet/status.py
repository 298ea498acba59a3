"""Status enum for maintenance urgency levels."""

from enum import Enum


class Status(Enum):
    """Maintenance status categories. Lower value = more urgent."""

    DUE = 1
    APPROACHING = 2
    OK = 3
    UNKNOWN = 4  # Not tracked, or can't calculate (missing data)
