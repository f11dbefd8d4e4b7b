"""
Feed ranking service.

Orders the public check-ins visible to a viewer and projects each row
to the feed-item shape.
"""

import logging
from datetime import datetime
from typing import Any, Dict, FrozenSet, List, Optional

from bson import ObjectId

from moodlog.query import CheckInFilter, QueryEngine, Ranking

logger = logging.getLogger(__name__)


DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def clamp_limit(limit: Optional[int], default: int = DEFAULT_LIMIT, maximum: int = MAX_LIMIT) -> int:
    """Clamp a page size into [1, maximum]; None or 0 means default."""
    if not limit:
        return default
    return max(1, min(limit, maximum))


def _str_id(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


def format_location(location: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Only locations with a landmark name are shown."""
    if not location or not location.get("landmarkName"):
        return None
    coordinates = location.get("coordinates") or {}
    return {
        "name": location["landmarkName"],
        "coordinates": coordinates.get("coordinates"),
        "isShared": location.get("isShared"),
    }


def to_feed_item(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Project a stored check-in to the feed-item shape."""
    likes = doc.get("likes") or []
    comments = doc.get("comments") or []
    emotion = doc.get("emotion") or {}

    item = {
        "_id": str(doc["_id"]),
        "userId": _str_id(doc.get("userId")),
        # Only public check-ins reach the feed
        "isAnonymous": doc.get("privacy") == "private",
        "emotion": {
            "name": emotion.get("name"),
            "attributes": emotion.get("attributes") or {},
        },
        "reason": doc.get("reason"),
        "people": doc.get("people") or [],
        "activities": doc.get("activities") or [],
        "privacy": doc.get("privacy"),
        "location": format_location(doc.get("location")),
        "timestamp": doc.get("timestamp"),
        "createdAt": doc.get("createdAt"),
        "updatedAt": doc.get("updatedAt"),
        "likes": {
            "count": len(likes),
            "userIds": [str(user_id) for user_id in likes],
        },
        "comments": {
            "count": len(comments),
            "data": [
                {
                    "userId": _str_id(comment.get("userId")),
                    "content": comment.get("content"),
                    "timestamp": comment.get("timestamp"),
                }
                for comment in comments
            ],
        },
    }

    if "score" in doc:
        item["score"] = doc["score"]

    return item


class FeedRanker:
    """
    Ranks the public feed for one viewer.

    Candidates are public check-ins whose author is not in the viewer's
    exclusion set.
    """

    def __init__(self, engine: QueryEngine, default_limit: int = DEFAULT_LIMIT, max_limit: int = MAX_LIMIT):
        """
        Initialize FeedRanker.

        Args:
            engine: Query engine for the check-in store
            default_limit: Page size when the client sends none
            max_limit: Largest page size served
        """
        self._engine = engine
        self._default_limit = default_limit
        self._max_limit = max_limit

    async def rank(
        self,
        excluded: FrozenSet[ObjectId],
        ranking: Ranking,
        now: datetime,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Get one page of the feed.

        Args:
            excluded: Author ids hidden from the viewer
            ranking: Ordering strategy
            now: Request time, used by time-decayed scores
            skip: Offset into the ordered feed
            limit: Page size, clamped to [1, max_limit]

        Returns:
            Feed items in rank order
        """
        page_size = clamp_limit(limit, self._default_limit, self._max_limit)
        flt = CheckInFilter(privacy="public", exclude_authors=frozenset(excluded))

        docs = await self._engine.rank_checkins(flt, ranking, now, max(skip, 0), page_size)

        logger.debug(
            f"Feed page by {ranking.name}: skip={skip} limit={page_size} "
            f"excluded={len(excluded)} returned={len(docs)}"
        )
        return [to_feed_item(doc) for doc in docs]
