"""
Feed ranking strategies.

Each strategy carries its sort order and, when scored, both the MongoDB
expression and the equivalent Python computation of the score.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from moodlog.query import DESCENDING, Ranking, ensure_utc

# Relevance weights
RECENCY_CEILING = 100.0
RECENCY_DECAY_PER_HOUR = 0.5
RECENCY_WEIGHT = 0.4
LIKE_WEIGHT = 0.8
COMMENT_WEIGHT = 1.2

# Popularity weights
POPULARITY_COMMENT_WEIGHT = 2

MS_PER_HOUR = 60 * 60 * 1000


def _size(field_name: str) -> Dict[str, Any]:
    return {"$size": {"$ifNull": [f"${field_name}", []]}}


def _count(doc: Dict[str, Any], field_name: str) -> int:
    return len(doc.get(field_name) or [])


class ChronologicalRanking(Ranking):
    """Newest first."""

    name = "chronological"
    sort = [("timestamp", DESCENDING), ("_id", DESCENDING)]


class PopularityRanking(Ranking):
    """likes + 2 * comments, newest first on ties."""

    name = "popularity"
    sort = [("score", DESCENDING), ("timestamp", DESCENDING), ("_id", DESCENDING)]

    def score_expression(self, now: datetime) -> Optional[Dict[str, Any]]:
        return {
            "$add": [
                _size("likes"),
                {"$multiply": [POPULARITY_COMMENT_WEIGHT, _size("comments")]},
            ]
        }

    def score(self, doc: Dict[str, Any], now: datetime) -> Optional[float]:
        return _count(doc, "likes") + POPULARITY_COMMENT_WEIGHT * _count(doc, "comments")


class RelevanceRanking(Ranking):
    """
    Time-decayed recency blended with engagement.

    recency = max(0, 100 - 0.5 * ageHours)
    score   = 0.4 * recency + 0.8 * likes + 1.2 * comments
    """

    name = "relevance"
    sort = [("score", DESCENDING), ("timestamp", DESCENDING), ("_id", DESCENDING)]

    def score_expression(self, now: datetime) -> Optional[Dict[str, Any]]:
        age_hours = {"$divide": [{"$subtract": [now, "$timestamp"]}, MS_PER_HOUR]}
        recency = {
            "$max": [
                0,
                {"$subtract": [RECENCY_CEILING, {"$multiply": [RECENCY_DECAY_PER_HOUR, age_hours]}]},
            ]
        }
        return {
            "$add": [
                {"$multiply": [RECENCY_WEIGHT, recency]},
                {"$multiply": [LIKE_WEIGHT, _size("likes")]},
                {"$multiply": [COMMENT_WEIGHT, _size("comments")]},
            ]
        }

    def score(self, doc: Dict[str, Any], now: datetime) -> Optional[float]:
        age_hours = (ensure_utc(now) - ensure_utc(doc["timestamp"])).total_seconds() / 3600
        recency = max(0.0, RECENCY_CEILING - RECENCY_DECAY_PER_HOUR * age_hours)
        return (
            RECENCY_WEIGHT * recency
            + LIKE_WEIGHT * _count(doc, "likes")
            + COMMENT_WEIGHT * _count(doc, "comments")
        )


# Wire name -> strategy
STRATEGIES: Dict[str, Ranking] = {
    "timestamp": ChronologicalRanking(),
    "hottest": PopularityRanking(),
    "relevance": RelevanceRanking(),
}

DEFAULT_SORT = "timestamp"


def get_strategy(sort: str) -> Optional[Ranking]:
    """Look up a strategy by its wire name."""
    return STRATEGIES.get(sort)
