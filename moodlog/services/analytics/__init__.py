"""Mood analytics services."""

from moodlog.services.analytics.mood_aggregator import (
    DAY_NAMES,
    MoodAggregator,
    empty_stats,
    format_stats,
    normalize_context_type,
    round2,
)
from moodlog.services.analytics.period_window import PERIODS, PeriodWindow, resolve_period
from moodlog.services.analytics.streak_calculator import StreakCalculator, current_streak
from moodlog.services.analytics.top_emotion import resolve_top_emotion

__all__ = [
    "DAY_NAMES",
    "MoodAggregator",
    "empty_stats",
    "format_stats",
    "normalize_context_type",
    "round2",
    "PERIODS",
    "PeriodWindow",
    "resolve_period",
    "StreakCalculator",
    "current_streak",
    "resolve_top_emotion",
]
