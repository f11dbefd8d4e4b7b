"""
Feed pipeline functions.

Stateless orchestration logic for the social feed.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId

from common.utils import BadRequestException
from moodlog.services.feed import STRATEGIES, FeedRanker, get_strategy
from moodlog.services.visibility import VisibilityFilter

logger = logging.getLogger(__name__)


async def get_feed_pipeline(
    visibility_filter: VisibilityFilter,
    feed_ranker: FeedRanker,
    viewer_id: ObjectId,
    sort: str,
    now: datetime,
    skip: int = 0,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Orchestrates one feed page.

    Args:
        visibility_filter: For the viewer's block exclusions
        feed_ranker: For ordering and projection
        viewer_id: Current user's ID
        sort: Wire name of the strategy (timestamp, hottest, relevance)
        now: Request time, captured once
        skip: Offset into the ordered feed
        limit: Requested page size

    Returns:
        List of feed items

    Raises:
        BadRequestException: INVALID_SORT for an unknown sort
    """
    ranking = get_strategy(sort)
    if ranking is None:
        raise BadRequestException(
            f"Invalid sort method. Use: {', '.join(STRATEGIES)}",
            code="INVALID_SORT",
        )

    excluded = await visibility_filter.excluded_authors(viewer_id)

    return await feed_ranker.rank(
        excluded=excluded,
        ranking=ranking,
        now=now,
        skip=skip,
        limit=limit,
    )
