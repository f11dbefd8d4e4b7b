"""
FastAPI router for User endpoints.

Provides block management.
"""

import logging
from typing import Annotated

from bson import ObjectId
from fastapi import APIRouter, Depends

from common.utils import success_response
from moodlog.dependencies import require_user_id, get_block_service
from moodlog.pipelines import user as pipelines
from moodlog.schemas.user import BlockedUsersData
from moodlog.services.user import BlockService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me/blocked")
async def get_blocked_users(
    user_id: Annotated[ObjectId, Depends(require_user_id)],
    block_service: Annotated[BlockService, Depends(get_block_service)],
):
    """Get the users the caller has blocked, as a bare body."""
    result = await pipelines.get_blocked_users_pipeline(block_service, user_id)
    return BlockedUsersData(**result).model_dump(by_alias=True)


@router.post("/{target_user_id}/block")
async def block_user(
    target_user_id: str,
    user_id: Annotated[ObjectId, Depends(require_user_id)],
    block_service: Annotated[BlockService, Depends(get_block_service)],
):
    """Block a user. Blocking hides content in both directions."""
    result = await pipelines.block_user_pipeline(block_service, user_id, target_user_id)
    return success_response(result, message="User blocked successfully")


@router.post("/{target_user_id}/unblock")
async def unblock_user(
    target_user_id: str,
    user_id: Annotated[ObjectId, Depends(require_user_id)],
    block_service: Annotated[BlockService, Depends(get_block_service)],
):
    """Unblock a user."""
    result = await pipelines.unblock_user_pipeline(block_service, user_id, target_user_id)
    return success_response(result, message="User unblocked successfully")
