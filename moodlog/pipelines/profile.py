"""
Profile pipeline functions.

Stateless orchestration logic for the profile summary and the analytics
dashboard.
"""

import logging
from datetime import date
from typing import Any, Dict, Optional

from bson import ObjectId

from moodlog.services.analytics import MoodAggregator, StreakCalculator, resolve_period
from moodlog.services.profile import ProfileService

logger = logging.getLogger(__name__)


async def get_profile_summary_pipeline(
    profile_service: ProfileService,
    streak_calculator: StreakCalculator,
    mood_aggregator: MoodAggregator,
    user_id: ObjectId,
    today: date,
    recent_limit: int = 3,
) -> Dict[str, Any]:
    """
    Orchestrates the profile summary card.

    Args:
        profile_service: For user and check-in facts
        streak_calculator: For the current streak
        mood_aggregator: For the weekly averages
        user_id: Current user's ID
        today: Current UTC date
        recent_limit: Number of recent check-ins to include

    Returns:
        Summary dict with username, totals, streak, top mood, recent
        check-ins and the weekly summary
    """
    user = await profile_service.get_user(user_id)

    total_checkins = await profile_service.count_checkins(user_id)
    checkin_streak = await streak_calculator.calculate(user_id, today=today)
    top_mood = await profile_service.get_top_mood(user_id)
    recent_checkins = await profile_service.get_recent_checkins(user_id, limit=recent_limit)

    week = resolve_period("week", today=today)
    average_mood_for_week = await mood_aggregator.period_stats(user_id, week)

    weekly_top_mood = None
    if average_mood_for_week["topEmotion"] is not None:
        weekly_top_mood = {
            "name": average_mood_for_week["topEmotion"],
            "count": average_mood_for_week["topEmotionCount"],
        }

    return {
        "username": user.get("username"),
        "email": user.get("email"),
        "profilePicture": user.get("profilePicture"),
        "totalCheckins": total_checkins,
        "checkinStreak": checkin_streak,
        "topMood": top_mood,
        "recentCheckins": recent_checkins,
        "weeklySummary": {
            "weeklyCheckinsCount": average_mood_for_week["totalCheckins"],
            "weeklyTopMood": weekly_top_mood,
            "averageMoodForWeek": average_mood_for_week,
        },
    }


async def get_mood_analytics_pipeline(
    mood_aggregator: MoodAggregator,
    user_id: ObjectId,
    period: str,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """
    Orchestrates the analytics dashboard.

    Args:
        mood_aggregator: For all period statistics
        user_id: Current user's ID
        period: week, month, 3months, year or all
        today: Current UTC date

    Returns:
        dict with period, dateRange and the four aggregations

    Raises:
        BadRequestException: INVALID_PERIOD, before any store access
    """
    window = resolve_period(period, today=today)

    average_mood_for_period = await mood_aggregator.period_stats(user_id, window)
    average_mood_by_day = await mood_aggregator.day_of_week_stats(user_id, window)
    average_mood_by_activity = await mood_aggregator.context_stats(user_id, window, "activity")
    average_mood_by_people = await mood_aggregator.context_stats(user_id, window, "people")

    logger.info(
        f"Analytics for user {user_id} over {period}: "
        f"{average_mood_for_period['totalCheckins']} check-ins"
    )

    return {
        "period": window.period,
        "dateRange": window.to_dict(),
        "averageMoodForPeriod": average_mood_for_period,
        "averageMoodByDayOfWeek": average_mood_by_day,
        "averageMoodByActivity": average_mood_by_activity,
        "averageMoodByPeople": average_mood_by_people,
    }
