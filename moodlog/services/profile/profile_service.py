"""
Profile data service.

Reads the user record and the check-in facts shown on the profile card.
"""

import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId

from common.utils import NotFoundException
from moodlog.query import DESCENDING, CheckInFilter, GroupKey, QueryEngine
from moodlog.services.analytics.top_emotion import resolve_top_emotion

logger = logging.getLogger(__name__)

NEWEST_FIRST = [("timestamp", DESCENDING), ("_id", DESCENDING)]


class ProfileService:
    """User profile facts backed by the query engine."""

    def __init__(self, engine: QueryEngine):
        """
        Initialize ProfileService.

        Args:
            engine: Query engine for the check-in and user stores
        """
        self._engine = engine

    async def get_user(self, user_id: ObjectId) -> Dict[str, Any]:
        """
        Get the public fields of a user.

        Raises:
            NotFoundException: USER_NOT_FOUND
        """
        user = await self._engine.find_user(
            user_id, projection=["username", "email", "profilePicture"]
        )
        if user is None:
            raise NotFoundException("User not found", code="USER_NOT_FOUND")
        return user

    async def count_checkins(self, user_id: ObjectId) -> int:
        return await self._engine.count_checkins(CheckInFilter(author_id=user_id))

    async def get_top_mood(self, user_id: ObjectId) -> Optional[Dict[str, Any]]:
        """
        Most frequent emotion over the user's whole history.

        Returns:
            {name, count, attributes} where attributes come from the most
            recent check-in with that emotion, or None with no history
        """
        groups = await self._engine.group_checkins(CheckInFilter(author_id=user_id), GroupKey.ALL)
        top = resolve_top_emotion(groups[0].emotions) if groups else None
        if top is None:
            return None

        latest = await self._engine.find_checkins(
            CheckInFilter(author_id=user_id, emotion_name=top["name"]),
            sort=NEWEST_FIRST,
            limit=1,
            projection=["emotion.attributes"],
        )
        attributes = latest[0].get("emotion", {}).get("attributes") if latest else None

        return {"name": top["name"], "count": top["count"], "attributes": attributes}

    async def get_recent_checkins(self, user_id: ObjectId, limit: int = 3) -> List[Dict[str, Any]]:
        """Most recent check-ins as {id, emotion, timestamp}."""
        docs = await self._engine.find_checkins(
            CheckInFilter(author_id=user_id),
            sort=NEWEST_FIRST,
            limit=limit,
            projection=["emotion", "timestamp"],
        )
        return [
            {
                "id": str(doc["_id"]),
                "emotion": doc.get("emotion"),
                "timestamp": doc.get("timestamp"),
            }
            for doc in docs
        ]
