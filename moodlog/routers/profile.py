"""
FastAPI router for Profile endpoints.

Provides the profile summary card and the mood analytics dashboard.
"""

import logging
from datetime import datetime, timezone
from typing import Annotated

from bson import ObjectId
from fastapi import APIRouter, Depends, Query

from common.utils import success_response
from moodlog.config import settings
from moodlog.dependencies import (
    require_user_id,
    get_profile_service,
    get_streak_calculator,
    get_mood_aggregator,
)
from moodlog.pipelines import profile as pipelines
from moodlog.schemas.profile import MoodAnalyticsData, ProfileSummaryData
from moodlog.services.analytics import MoodAggregator, StreakCalculator
from moodlog.services.profile import ProfileService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("/summary")
async def get_profile_summary(
    user_id: Annotated[ObjectId, Depends(require_user_id)],
    profile_service: Annotated[ProfileService, Depends(get_profile_service)],
    streak_calculator: Annotated[StreakCalculator, Depends(get_streak_calculator)],
    mood_aggregator: Annotated[MoodAggregator, Depends(get_mood_aggregator)],
):
    """
    Get the caller's profile summary.

    Includes totals, current streak, top mood, recent check-ins and the
    weekly summary.
    """
    result = await pipelines.get_profile_summary_pipeline(
        profile_service=profile_service,
        streak_calculator=streak_calculator,
        mood_aggregator=mood_aggregator,
        user_id=user_id,
        today=datetime.now(timezone.utc).date(),
        recent_limit=settings.PROFILE_RECENT_CHECKINS,
    )

    return success_response(ProfileSummaryData(**result).model_dump(exclude_unset=True))


@router.get("/analytics")
async def get_mood_analytics(
    user_id: Annotated[ObjectId, Depends(require_user_id)],
    mood_aggregator: Annotated[MoodAggregator, Depends(get_mood_aggregator)],
    period: str = Query(settings.DEFAULT_ANALYTICS_PERIOD),
):
    """
    Get mood analytics for a period.

    period is one of week, month, 3months, year, all.
    """
    result = await pipelines.get_mood_analytics_pipeline(
        mood_aggregator=mood_aggregator,
        user_id=user_id,
        period=period,
        today=datetime.now(timezone.utc).date(),
    )

    return success_response(MoodAnalyticsData(**result).model_dump(exclude_unset=True))
