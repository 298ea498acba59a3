"""Helper functions for due-status calculations."""

import logging
import math
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union

from dateutil.parser import isoparse

from .status import Status

logger = logging.getLogger(__name__)

Number = Union[int, float]


def clean_distance(value) -> Optional[Number]:
    """
    Sanitise an odometer reading or interval.

    Negative, non-finite and non-numeric values are treated as absent, never
    as zero, so they can't manufacture a due result.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            logger.debug("Ignoring non-numeric distance %r", value)
            return None
    if not isinstance(value, (int, float)):
        logger.debug("Ignoring distance of type %s", type(value).__name__)
        return None
    if not math.isfinite(value) or value < 0:
        logger.debug("Ignoring invalid distance %r", value)
        return None
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def clean_interval(value) -> Optional[Number]:
    """Sanitise an interval. Zero means "not set" and returns None."""
    distance = clean_distance(value)
    if not distance:
        return None
    return distance


def parse_date(value) -> Optional[datetime]:
    """
    Parse a stored date into a naive datetime.

    Accepts ISO strings, dates (taken as midnight) and datetimes. Aware values
    are converted to UTC before the offset is dropped. Anything unparseable
    returns None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        try:
            parsed = isoparse(value.strip())
        except ValueError:
            logger.debug("Ignoring unparseable date %r", value)
            return None
    else:
        logger.debug("Ignoring date of type %s", type(value).__name__)
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.replace(tzinfo=None)


def calc_next_due_distance(
    last_distance: Optional[Number], interval: Optional[Number]
) -> Optional[Number]:
    """Next due odometer reading: last service reading + interval."""
    if last_distance is None or interval is None:
        return None
    return last_distance + interval


def calc_overdue_distance(
    current: Optional[Number], next_due: Optional[Number]
) -> Number:
    """How far the odometer is past the due point, 0 when not past it."""
    if current is None or next_due is None:
        return 0
    return max(0, current - next_due)


def check_distance_status(current: Number, due: Number, soon_threshold: Number) -> Status:
    """Determine status by comparing an odometer reading to a due reading."""
    if current >= due:
        return Status.DUE
    if current + soon_threshold >= due:
        return Status.APPROACHING
    return Status.OK


def check_date_status(now: datetime, due: datetime, soon_days: int) -> Status:
    """Determine status by comparing now to a due date."""
    if now > due:
        return Status.DUE
    if now + timedelta(days=soon_days) >= due and due > now:
        return Status.APPROACHING
    return Status.OK
