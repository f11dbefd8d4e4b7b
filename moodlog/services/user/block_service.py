"""
Block management service.

Maintains the per-user block lists that the visibility filter reads.
"""

import logging
from typing import Any, Dict

from bson import ObjectId

from common.utils import BadRequestException, NotFoundException
from moodlog.query import QueryEngine

logger = logging.getLogger(__name__)


class BlockService:
    """Block, unblock and list blocked users."""

    def __init__(self, engine: QueryEngine):
        """
        Initialize BlockService.

        Args:
            engine: Query engine for the user store
        """
        self._engine = engine

    async def block_user(self, user_id: ObjectId, blocked_id: ObjectId) -> Dict[str, Any]:
        """
        Add a user to the caller's block list.

        Blocking an already blocked user is a no-op.

        Raises:
            BadRequestException: CANNOT_BLOCK_SELF
            NotFoundException: USER_NOT_FOUND if the caller does not exist
        """
        if user_id == blocked_id:
            raise BadRequestException("You cannot block yourself", code="CANNOT_BLOCK_SELF")

        if not await self._engine.add_blocked_user(user_id, blocked_id):
            raise NotFoundException("User not found", code="USER_NOT_FOUND")

        logger.info(f"User {user_id} blocked {blocked_id}")
        return {"blockedUserId": str(blocked_id)}

    async def unblock_user(self, user_id: ObjectId, blocked_id: ObjectId) -> Dict[str, Any]:
        """
        Remove a user from the caller's block list.

        Raises:
            BadRequestException: CANNOT_UNBLOCK_SELF, or NOT_BLOCKED when
                the user is not on the list
            NotFoundException: USER_NOT_FOUND if the caller does not exist
        """
        if user_id == blocked_id:
            raise BadRequestException("You cannot unblock yourself", code="CANNOT_UNBLOCK_SELF")

        if await self._engine.remove_blocked_user(user_id, blocked_id):
            logger.info(f"User {user_id} unblocked {blocked_id}")
            return {"unblockedUserId": str(blocked_id)}

        if await self._engine.find_user(user_id, projection=["_id"]) is None:
            raise NotFoundException("User not found", code="USER_NOT_FOUND")
        raise BadRequestException("User is not in your blocked list", code="NOT_BLOCKED")

    async def list_blocked(self, user_id: ObjectId) -> Dict[str, Any]:
        """
        Get the users on the caller's block list.

        Returns:
            dict with blockedUsers [{_id, username}] and count
        """
        user = await self._engine.find_user(user_id, projection=["blockedUsers"])
        if user is None:
            raise NotFoundException("User not found", code="USER_NOT_FOUND")

        blocked_ids = user.get("blockedUsers") or []
        users = await self._engine.find_users(blocked_ids, projection=["username"])

        blocked = [
            {"_id": str(blocked_user["_id"]), "username": blocked_user.get("username")}
            for blocked_user in users
        ]
        return {"blockedUsers": blocked, "count": len(blocked)}
