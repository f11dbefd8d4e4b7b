"""
FastAPI router for the social feed.
"""

import logging
from datetime import datetime, timezone
from typing import Annotated, Optional

from bson import ObjectId
from fastapi import APIRouter, Depends, Query

from moodlog.dependencies import get_feed_ranker, get_visibility_filter, require_user_id
from moodlog.pipelines import feed as pipelines
from moodlog.schemas.feed import FeedItem
from moodlog.services.feed import DEFAULT_SORT, FeedRanker
from moodlog.services.visibility import VisibilityFilter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/feed", tags=["feed"])


@router.get("")
async def get_feed(
    user_id: Annotated[ObjectId, Depends(require_user_id)],
    visibility_filter: Annotated[VisibilityFilter, Depends(get_visibility_filter)],
    feed_ranker: Annotated[FeedRanker, Depends(get_feed_ranker)],
    sort: str = Query(DEFAULT_SORT),
    skip: int = Query(0, ge=0),
    limit: Optional[int] = Query(None),
):
    """
    Get one page of public check-ins from users the caller can see.

    sort is one of timestamp, hottest, relevance. The page is returned
    as a bare list; errors still use the error envelope.
    """
    items = await pipelines.get_feed_pipeline(
        visibility_filter=visibility_filter,
        feed_ranker=feed_ranker,
        viewer_id=user_id,
        sort=sort,
        now=datetime.now(timezone.utc),
        skip=skip,
        limit=limit,
    )

    return [FeedItem(**item).model_dump(by_alias=True, exclude_unset=True) for item in items]
