"""
Visibility filter.

Blocking is stored on the blocker's user document but hides content in
both directions.
"""

import logging
from typing import FrozenSet

from bson import ObjectId

from moodlog.query import QueryEngine

logger = logging.getLogger(__name__)


class VisibilityFilter:
    """Resolves which authors a viewer must not see."""

    def __init__(self, engine: QueryEngine):
        self._engine = engine

    async def excluded_authors(self, viewer_id: ObjectId) -> FrozenSet[ObjectId]:
        """
        Users the viewer blocked plus users who blocked the viewer.

        Store failures propagate as StoreError; an empty set is never
        returned in place of a failed lookup.

        Args:
            viewer_id: The user reading the feed

        Returns:
            Deduplicated set of author ids to exclude
        """
        viewer = await self._engine.find_user(viewer_id, projection=["blockedUsers"])
        blocked_by_viewer = (viewer or {}).get("blockedUsers") or []

        blockers = await self._engine.find_blocker_ids(viewer_id)

        excluded = frozenset(blocked_by_viewer) | frozenset(blockers)
        logger.debug(
            f"Viewer {viewer_id}: {len(blocked_by_viewer)} blocked, "
            f"{len(blockers)} blockers, {len(excluded)} excluded"
        )
        return excluded
