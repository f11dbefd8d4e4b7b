"""
Map service.

Area statistics and nearby check-ins for the mood map. Both only look
at public check-ins from the recent window, minus the viewer's block
exclusions.
"""

import logging
from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Dict, FrozenSet, List, Optional

from bson import ObjectId

from moodlog.query import CheckInFilter, GeoBox, GroupKey, QueryEngine
from moodlog.services.analytics import round2
from moodlog.services.feed import clamp_limit

logger = logging.getLogger(__name__)


DEFAULT_WINDOW_DAYS = 30


def _author_card(author: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if author is None:
        return None
    return {
        "_id": str(author["_id"]),
        "id": str(author["_id"]),
        "username": author.get("username"),
        "profilePicture": author.get("profilePicture"),
    }


def to_map_item(doc: Dict[str, Any], author: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Project a nearby check-in to the map-pin shape; distance goes out in km."""
    likes = doc.get("likes")
    comments = doc.get("comments")
    is_anonymous = doc.get("isAnonymous")

    return {
        "_id": str(doc["_id"]),
        "id": str(doc["_id"]),
        "userId": _author_card(author),
        "emotion": doc.get("emotion"),
        "reason": doc.get("reason"),
        "location": doc.get("location"),
        "timestamp": doc.get("timestamp"),
        "privacy": doc.get("privacy"),
        "isAnonymous": is_anonymous if isinstance(is_anonymous, bool) else False,
        "distance": doc["distance"] / 1000,
        "likesCount": len(likes) if isinstance(likes, list) else 0,
        "commentsCount": len(comments) if isinstance(comments, list) else 0,
        "people": doc.get("people") if isinstance(doc.get("people"), list) else [],
        "activities": doc.get("activities") if isinstance(doc.get("activities"), list) else [],
    }


class MapService:
    """Geographic views over recent public check-ins."""

    def __init__(
        self,
        engine: QueryEngine,
        window_days: int = DEFAULT_WINDOW_DAYS,
        nearby_default_limit: int = 50,
        nearby_max_limit: int = 200,
    ):
        """
        Initialize MapService.

        Args:
            engine: Query engine for the check-in store
            window_days: How far back the map looks
            nearby_default_limit: Page size when the client sends none
            nearby_max_limit: Largest number of nearby pins served
        """
        self._engine = engine
        self._window_days = window_days
        self._nearby_default_limit = nearby_default_limit
        self._nearby_max_limit = nearby_max_limit

    def _recent_public(
        self,
        now: datetime,
        excluded: FrozenSet[ObjectId],
        within: Optional[GeoBox] = None,
    ) -> CheckInFilter:
        return CheckInFilter(
            privacy="public",
            exclude_authors=excluded,
            start=now - timedelta(days=self._window_days),
            within=within,
        )

    async def area_stats(
        self,
        box: GeoBox,
        now: datetime,
        excluded: FrozenSet[ObjectId] = frozenset(),
    ) -> Dict[str, Any]:
        """
        Summarize recent public check-ins inside a bounding box.

        Returns:
            dict with totalPosts, emotionBreakdown {name: count} and
            postsPerDay over the window
        """
        groups = await self._engine.group_checkins(
            self._recent_public(now, excluded, within=box),
            GroupKey.ALL,
        )
        if not groups:
            return {"totalPosts": 0, "emotionBreakdown": {}, "postsPerDay": 0}

        stats = groups[0]
        counts = Counter(name for name in stats.emotions if isinstance(name, str) and name)

        return {
            "totalPosts": stats.count,
            "emotionBreakdown": dict(sorted(counts.items())),
            "postsPerDay": round2(stats.count / self._window_days),
        }

    async def nearby(
        self,
        lat: float,
        lng: float,
        now: datetime,
        excluded: FrozenSet[ObjectId] = frozenset(),
        max_distance: float = 5000.0,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Get recent public check-ins around a point, nearest first.

        Args:
            lat: Latitude of the center
            lng: Longitude of the center
            now: Request time, captured once
            excluded: Authors hidden from the viewer
            max_distance: Search radius in meters
            limit: Number of pins wanted

        Returns:
            List of map items with the author card and distance in km
        """
        limit = clamp_limit(limit, self._nearby_default_limit, self._nearby_max_limit)
        docs = await self._engine.find_nearby(
            self._recent_public(now, excluded),
            lng,
            lat,
            max_distance,
            limit,
        )

        author_ids = sorted({doc["userId"] for doc in docs if doc.get("userId") is not None})
        authors = await self._engine.find_users(author_ids, projection=["username", "profilePicture"])
        authors_by_id = {author["_id"]: author for author in authors}

        logger.debug(f"Found {len(docs)} check-ins within {max_distance}m of ({lat}, {lng})")
        return [to_map_item(doc, authors_by_id.get(doc.get("userId"))) for doc in docs]
