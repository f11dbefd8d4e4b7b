"""
User pipeline functions.

Stateless orchestration logic for block management.
"""

import logging
from typing import Any, Dict

from bson import ObjectId

from moodlog.services.user import BlockService
from moodlog.validators import parse_object_id

logger = logging.getLogger(__name__)


async def block_user_pipeline(
    block_service: BlockService,
    user_id: ObjectId,
    target_user_id: str,
) -> Dict[str, Any]:
    """Validate the target id and add it to the caller's block list."""
    blocked_id = parse_object_id(target_user_id, field="user ID")
    return await block_service.block_user(user_id, blocked_id)


async def unblock_user_pipeline(
    block_service: BlockService,
    user_id: ObjectId,
    target_user_id: str,
) -> Dict[str, Any]:
    """Validate the target id and remove it from the caller's block list."""
    blocked_id = parse_object_id(target_user_id, field="user ID")
    return await block_service.unblock_user(user_id, blocked_id)


async def get_blocked_users_pipeline(
    block_service: BlockService,
    user_id: ObjectId,
) -> Dict[str, Any]:
    return await block_service.list_blocked(user_id)
