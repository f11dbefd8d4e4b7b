"""
Check-in streak calculation.
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional

from bson import ObjectId

from moodlog.query import CheckInFilter, GroupKey, QueryEngine

logger = logging.getLogger(__name__)


def current_streak(days: Iterable[date], today: date) -> int:
    """
    Length of the run of consecutive check-in days ending today or yesterday.

    Algorithm:
        1. If the most recent day is older than yesterday, return 0
        2. Start from today if it has a check-in, else from yesterday
        3. Walk back one day at a time while days are present
    """
    present = set(days)
    if not present:
        return 0

    yesterday = today - timedelta(days=1)
    if max(present) < yesterday:
        return 0

    cursor = today if today in present else yesterday
    streak = 0
    while cursor in present:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


class StreakCalculator:
    """Current streak from the set of UTC calendar days with check-ins."""

    def __init__(self, engine: QueryEngine):
        self._engine = engine

    async def calculate(self, user_id: ObjectId, today: Optional[date] = None) -> int:
        """
        Calculate the current streak for a user.

        Args:
            user_id: Owner of the check-ins
            today: Current UTC date (defaults to now)

        Returns:
            Number of consecutive days, 0 when broken or empty
        """
        if today is None:
            today = datetime.now(timezone.utc).date()

        groups = await self._engine.group_checkins(
            CheckInFilter(author_id=user_id), GroupKey.CALENDAR_DAY
        )
        days = [date.fromisoformat(group.key) for group in groups if group.key]

        streak = current_streak(days, today)
        logger.debug(f"Streak for user {user_id}: {streak} day(s) over {len(days)} active days")
        return streak
