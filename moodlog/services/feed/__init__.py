"""Feed services."""

from moodlog.services.feed.feed_ranker import FeedRanker, clamp_limit, to_feed_item
from moodlog.services.feed.strategies import (
    DEFAULT_SORT,
    STRATEGIES,
    ChronologicalRanking,
    PopularityRanking,
    RelevanceRanking,
    get_strategy,
)

__all__ = [
    "FeedRanker",
    "clamp_limit",
    "to_feed_item",
    "DEFAULT_SORT",
    "STRATEGIES",
    "ChronologicalRanking",
    "PopularityRanking",
    "RelevanceRanking",
    "get_strategy",
]
