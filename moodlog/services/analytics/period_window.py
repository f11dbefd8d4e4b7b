"""
Named analytics windows.

Every window ends at the start of tomorrow (UTC), exclusive, so today is
always included. `all` has no bounds.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from dateutil.relativedelta import relativedelta

from common.utils import BadRequestException

PERIODS = ("week", "month", "3months", "year", "all")

_LOOKBACK = {
    "week": relativedelta(days=7),
    "month": relativedelta(months=1),
    "3months": relativedelta(months=3),
    "year": relativedelta(years=1),
}


@dataclass(frozen=True)
class PeriodWindow:
    """A resolved `[start, end)` range; both bounds are None for `all`."""
    period: str
    start: Optional[datetime]
    end: Optional[datetime]

    def to_dict(self) -> dict:
        return {"start": self.start, "end": self.end}


def resolve_period(period: str, today: Optional[date] = None) -> PeriodWindow:
    """
    Resolve a period name to its window.

    Args:
        period: One of week, month, 3months, year, all
        today: Current UTC date (defaults to now)

    Raises:
        BadRequestException: INVALID_PERIOD for any other name
    """
    if period not in PERIODS:
        raise BadRequestException(
            f"Invalid period. Valid options: {', '.join(PERIODS)}",
            code="INVALID_PERIOD",
        )

    if period == "all":
        return PeriodWindow(period=period, start=None, end=None)

    if today is None:
        today = datetime.now(timezone.utc).date()

    midnight = datetime.combine(today, time.min, tzinfo=timezone.utc)
    start = midnight - _LOOKBACK[period]
    end = midnight + timedelta(days=1)
    return PeriodWindow(period=period, start=start, end=end)
