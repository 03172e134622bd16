"""Comparison windows for performance metrics"""

from datetime import datetime
from typing import Tuple

from overview_gateway.domain.exceptions import InvalidPeriodError
from overview_gateway.domain.models import Window
from overview_gateway.utils.date_utils import days_before

SUPPORTED_PERIODS = {"30d": 30, "60d": 60, "90d": 90}


def parse_period(period: str) -> int:
    """Map a period string ("30d", "60d", "90d") to its day count"""
    try:
        return SUPPORTED_PERIODS[period]
    except KeyError:
        raise InvalidPeriodError(
            f"Unsupported period {period!r}; expected one of {', '.join(SUPPORTED_PERIODS)}"
        ) from None


def build_windows(days: int, now: datetime) -> Tuple[Window, Window]:
    """
    Build the current and previous windows for a day count.

    current  = [now - days, now]             both ends inclusive
    previous = [now - 2 * days, now - days)  upper end exclusive, so no overlap
    """
    current_start = days_before(now, days)
    current = Window(start=current_start, end=now)
    previous = Window(start=days_before(now, days * 2), end=current_start, end_inclusive=False)
    return current, previous
