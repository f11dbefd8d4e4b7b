"""
Mood aggregation service.

Builds the period, day-of-week and context statistics shown on the
analytics dashboard from grouped check-in data.
"""

import logging
import math
from typing import Any, Dict, List, Optional

from bson import ObjectId

from moodlog.query import ATTRIBUTE_NAMES, TAG_FIELDS, CheckInFilter, GroupKey, GroupStats, QueryEngine
from moodlog.services.analytics.period_window import PeriodWindow
from moodlog.services.analytics.top_emotion import resolve_top_emotion

logger = logging.getLogger(__name__)


DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

# contextType -> stored tag field; the contextType is also the tag key in each entry
CONTEXT_FIELDS = {
    "activity": GroupKey.ACTIVITIES,
    "people": GroupKey.PEOPLE,
}
CONTEXT_ALIASES = {"person": "people"}


def round2(value: Optional[float]) -> Optional[float]:
    """Round half up to 2 decimals; None stays None."""
    if value is None:
        return None
    return math.floor(value * 100 + 0.5) / 100


def empty_stats() -> Dict[str, Any]:
    """Shape reported for a bucket with no check-ins."""
    return {
        "averageAttributes": {attribute: None for attribute in ATTRIBUTE_NAMES},
        "totalCheckins": 0,
        "topEmotion": None,
        "topEmotionCount": 0,
    }


def format_stats(stats: Optional[GroupStats]) -> Dict[str, Any]:
    """Round averages and resolve the top emotion for one bucket."""
    if stats is None or stats.count == 0:
        return empty_stats()

    top = resolve_top_emotion(stats.emotions)
    return {
        "averageAttributes": {
            attribute: round2(stats.averages.get(attribute)) for attribute in ATTRIBUTE_NAMES
        },
        "totalCheckins": stats.count,
        "topEmotion": top["name"] if top else None,
        "topEmotionCount": top["count"] if top else 0,
    }


def normalize_context_type(context_type: str) -> str:
    """Map accepted spellings to `activity` or `people`."""
    context_type = CONTEXT_ALIASES.get(context_type, context_type)
    if context_type not in CONTEXT_FIELDS:
        raise ValueError(f"Unknown context type: {context_type}")
    return context_type


class MoodAggregator:
    """
    Per-user mood statistics over a period window.

    Holds only the query engine; user, window and context are passed on
    every call.
    """

    def __init__(self, engine: QueryEngine):
        """
        Initialize MoodAggregator.

        Args:
            engine: Query engine for the check-in store
        """
        self._engine = engine

    @staticmethod
    def _filter(user_id: ObjectId, window: PeriodWindow, tag_field: Optional[str] = None) -> CheckInFilter:
        return CheckInFilter(
            author_id=user_id,
            start=window.start,
            end=window.end,
            tag_field=tag_field,
        )

    async def period_stats(self, user_id: ObjectId, window: PeriodWindow) -> Dict[str, Any]:
        """
        Averaged attributes, count and top emotion over the window.

        Returns:
            dict with averageAttributes, totalCheckins, topEmotion, topEmotionCount
        """
        groups = await self._engine.group_checkins(self._filter(user_id, window), GroupKey.ALL)
        return format_stats(groups[0] if groups else None)

    async def day_of_week_stats(self, user_id: ObjectId, window: PeriodWindow) -> List[Dict[str, Any]]:
        """
        The period statistics split by UTC weekday.

        Always returns 7 entries ordered Sunday to Saturday.
        """
        groups = await self._engine.group_checkins(
            self._filter(user_id, window), GroupKey.DAY_OF_WEEK
        )
        by_day = {group.key: group for group in groups}

        result = []
        for index, day_name in enumerate(DAY_NAMES):
            day_number = index + 1
            entry = {"dayOfWeek": day_name, "dayNumber": day_number}
            entry.update(format_stats(by_day.get(day_number)))
            result.append(entry)
        return result

    async def context_stats(
        self,
        user_id: ObjectId,
        window: PeriodWindow,
        context_type: str,
    ) -> Dict[str, Any]:
        """
        The period statistics per activity or person tag.

        A check-in carrying several distinct tags counts once in each of
        their buckets, so percentageOfTotal can sum past 100.

        Args:
            user_id: Owner of the check-ins
            window: Resolved period window
            context_type: activity, people (or person)

        Returns:
            dict with contexts (sorted by count desc, then tag) and summary
        """
        context_type = normalize_context_type(context_type)
        group_key = CONTEXT_FIELDS[context_type]
        flt = self._filter(user_id, window, tag_field=TAG_FIELDS[group_key])

        tally = await self._engine.tally_checkins(flt, group_key)
        total_with_context = tally.total
        groups = tally.groups
        groups.sort(key=lambda group: (-group.count, group.key))

        contexts = []
        for group in groups:
            entry: Dict[str, Any] = {context_type: group.key}
            entry.update(format_stats(group))
            entry["percentageOfTotal"] = (
                round2(group.count / total_with_context * 100) if total_with_context else 0
            )
            contexts.append(entry)

        logger.debug(
            f"Context stats for user {user_id}: {len(contexts)} {context_type} tags "
            f"over {total_with_context} check-ins"
        )

        return {
            "contexts": contexts,
            "summary": {
                "totalUniqueContexts": len(groups),
                "totalCheckinsWithContext": total_with_context,
            },
        }
