"""
Pydantic models for profile and analytics response validation.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


# =============================================================================
# Shared
# =============================================================================

class AverageAttributes(BaseModel):
    pleasantness: Optional[float] = None
    intensity: Optional[float] = None
    control: Optional[float] = None
    clarity: Optional[float] = None


class MoodStats(BaseModel):
    """Statistics for one period, weekday or tag bucket."""
    averageAttributes: AverageAttributes
    totalCheckins: int
    topEmotion: Optional[str] = None
    topEmotionCount: int


# =============================================================================
# GET /profile/summary
# =============================================================================

class TopMood(BaseModel):
    name: str
    count: int
    attributes: Optional[Dict[str, Any]] = None


class WeeklyTopMood(BaseModel):
    name: str
    count: int


class RecentCheckIn(BaseModel):
    id: str
    emotion: Optional[Dict[str, Any]] = None
    timestamp: Optional[datetime] = None


class WeeklySummary(BaseModel):
    weeklyCheckinsCount: int
    weeklyTopMood: Optional[WeeklyTopMood] = None
    averageMoodForWeek: MoodStats


class ProfileSummaryData(BaseModel):
    """Response data for GET /profile/summary"""
    username: Optional[str] = None
    email: Optional[str] = None
    profilePicture: Optional[str] = None
    totalCheckins: int
    checkinStreak: int
    topMood: Optional[TopMood] = None
    recentCheckins: List[RecentCheckIn]
    weeklySummary: WeeklySummary


# =============================================================================
# GET /profile/analytics
# =============================================================================

class DateRange(BaseModel):
    start: Optional[datetime] = None
    end: Optional[datetime] = None


class DayOfWeekStats(MoodStats):
    dayOfWeek: str
    dayNumber: int


class ContextStats(MoodStats):
    activity: Optional[str] = None
    people: Optional[str] = None
    percentageOfTotal: float


class ContextSummary(BaseModel):
    totalUniqueContexts: int
    totalCheckinsWithContext: int


class ContextBreakdown(BaseModel):
    contexts: List[ContextStats]
    summary: ContextSummary


class MoodAnalyticsData(BaseModel):
    """Response data for GET /profile/analytics"""
    period: str
    dateRange: DateRange
    averageMoodForPeriod: MoodStats
    averageMoodByDayOfWeek: List[DayOfWeekStats]
    averageMoodByActivity: ContextBreakdown
    averageMoodByPeople: ContextBreakdown
